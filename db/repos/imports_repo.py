from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import List

from models.import_log import ImportLogEntry


class ImportsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def log_import(self, entry: ImportLogEntry) -> int:
        created_at = entry.created_at or datetime.now(timezone.utc)
        sql = (
            "INSERT INTO user_imports (import_type, file_name, total_records, successful_records, failed_records, error_message, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?) RETURNING id;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (
            entry.import_type,
            entry.file_name,
            entry.total_records,
            entry.successful_records,
            entry.failed_records,
            entry.error_message,
            created_at.isoformat(),
        ))
        row = cur.fetchone()
        self.conn.commit()
        return int(row[0])

    def list_recent(self, limit: int = 20) -> List[ImportLogEntry]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM user_imports ORDER BY created_at DESC, id DESC LIMIT ?", (limit,))
        return [ImportLogEntry.model_validate(dict(r)) for r in cur.fetchall()]
