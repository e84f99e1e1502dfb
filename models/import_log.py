from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


ImportType = Literal["csv", "json", "api"]


class ImportLogEntry(BaseModel):
    id: int | None = None
    import_type: ImportType
    file_name: str
    total_records: int = 0
    successful_records: int = 0
    failed_records: int = 0
    error_message: str | None = None
    created_at: datetime | None = None
