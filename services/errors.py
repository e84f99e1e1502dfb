from __future__ import annotations

from typing import List, Optional


class EtlError(RuntimeError):
    """Base class for errors raised by the profile ETL."""


class ValidationFailure(EtlError):
    """A record failed validation with error-severity issues.

    Non-fatal: the engine records it per record and keeps going.
    """

    def __init__(self, linkedin_id: str, issues: Optional[List] = None) -> None:
        self.linkedin_id = linkedin_id
        self.issues = list(issues or [])
        fields = ", ".join(i.field for i in self.issues if i.severity == "error")
        super().__init__(f"Profile {linkedin_id or '<missing id>'} failed validation: {fields}")


class ClassificationError(EtlError):
    """Classification could not be computed; indicates a defect in the input shape."""


class StoreUnavailable(EtlError):
    """The profile store cannot be read or written; fatal for the current batch."""


class MalformedInput(EtlError):
    """A source file could not be parsed into profiles at all."""

    def __init__(self, message: str, file_name: Optional[str] = None) -> None:
        self.file_name = file_name
        prefix = f"{file_name}: " if file_name else ""
        super().__init__(f"{prefix}{message}")


class RunStateError(EtlError):
    """An operation was attempted on a run that is already finalized."""
