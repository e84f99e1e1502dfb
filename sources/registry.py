from __future__ import annotations

from typing import Any, Callable, Dict


_REGISTRY: Dict[str, Callable[..., Any]] = {}


def register(name: str, factory: Callable[..., Any]) -> None:
    _REGISTRY[name] = factory


def get_source(name: str, **kwargs: Any):
    if name not in _REGISTRY:
        raise KeyError(f"Unknown source: {name}")
    return _REGISTRY[name](**kwargs)


def available_sources() -> Dict[str, Any]:
    return dict(_REGISTRY)
