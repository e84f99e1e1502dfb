from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .raw_profile import RawProfile


Severity = Literal["error", "warning"]
ValidationStatus = Literal["pending", "valid", "invalid"]


class ValidationIssue(BaseModel):
    field: str
    message: str
    severity: Severity

    model_config = ConfigDict(frozen=True)


class StoredProfile(RawProfile):
    """App/DB record shape: the durable form of a profile owned by the store."""

    id: int | None = None
    data_hash: str = ""
    validation_status: ValidationStatus = "pending"
    validation_errors: list[ValidationIssue] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_validated_at: datetime | None = None
