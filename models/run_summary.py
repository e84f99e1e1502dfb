from __future__ import annotations

from pydantic import BaseModel, Field

from .etl_run import EtlRun, Outcome
from .stored_profile import ValidationIssue, ValidationStatus


class RecordOutcome(BaseModel):
    """Result of one record in one run; `outcome` is None if it was never classified."""

    linkedin_id: str
    outcome: Outcome | None = None
    validation_status: ValidationStatus = "pending"
    issues: list[ValidationIssue] = Field(default_factory=list)
    changed_fields: list[str] = Field(default_factory=list)
    images_processed: int = 0
    error: str | None = None


class RunSummary(BaseModel):
    """Final run state plus per-record outcomes.

    `persisted` is False when the final run state could not be written back,
    in which case the stored run may still read as running.
    """

    run: EtlRun
    outcomes: list[RecordOutcome] = Field(default_factory=list)
    persisted: bool = True

    @property
    def succeeded(self) -> bool:
        return self.run.status == "completed" and self.persisted
