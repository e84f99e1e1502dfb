from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.import_log import ImportType
from models.raw_profile import RawProfile
from services.errors import MalformedInput


logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("linkedin_id", "full_name", "profile_url")


def has_required_keys(raw: Dict[str, Any]) -> bool:
    """Rows lacking an id, name or URL never reach the engine."""
    return all(isinstance(raw.get(k), str) and raw.get(k) for k in REQUIRED_KEYS)


def to_raw_profile(raw: Dict[str, Any], file_name: Optional[str] = None) -> RawProfile:
    try:
        return RawProfile.model_validate(raw)
    except ValidationError as e:
        ident = raw.get("linkedin_id") or "<unknown>"
        raise MalformedInput(f"profile {ident} has an invalid structure: {e.error_count()} error(s)", file_name) from e


class ProfileSource:
    """Base for record sources: subclasses fill `load`."""

    source_name: str = "base"
    import_type: ImportType = "json"

    def load(self) -> List[RawProfile]:
        raise NotImplementedError
