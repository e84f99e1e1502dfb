from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, List, Optional

from models.raw_profile import RawProfile
from models.run_summary import RunSummary
from utils.logging_setup import init_logging


@dataclass
class ImportBatch:
    """Profiles that came from one file or fetch request, with any parse failure."""

    import_type: str
    file_name: str
    profiles: List[RawProfile] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class RunContext:
    profiles: List[RawProfile] = field(default_factory=list)
    batches: List[ImportBatch] = field(default_factory=list)
    summary: Optional[RunSummary] = None
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            ctx = step.run(ctx)
        return ctx
