from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


RunKind = Literal["full", "incremental"]
RunStatus = Literal["running", "completed", "failed"]
Outcome = Literal["added", "updated", "unchanged"]


class RunCounters(BaseModel):
    processed: int = 0
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    images_processed: int = 0
    validation_failures: int = 0

    def is_conserved(self) -> bool:
        return self.processed == self.added + self.updated + self.unchanged


class EtlRun(BaseModel):
    id: int | None = None
    run_type: RunKind = "incremental"
    status: RunStatus = "running"
    started_at: datetime
    completed_at: datetime | None = None
    counters: RunCounters = Field(default_factory=RunCounters)
    error_message: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.status != "running"
