from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FieldChange(BaseModel):
    """Audit entry for one field's old/new value, attributed to a run."""

    profile_id: int | None = None
    etl_run_id: int | None = None
    field_name: str
    old_value: str | None = None
    new_value: str | None = None
    changed_at: datetime

    model_config = ConfigDict(frozen=True)
