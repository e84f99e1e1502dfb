from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.etl_run import EtlRun, RunKind


def _row_to_run(row: sqlite3.Row) -> EtlRun:
    return EtlRun.model_validate({
        "id": row["id"],
        "run_type": row["run_type"],
        "status": row["status"],
        "started_at": row["started_at"],
        "completed_at": row["completed_at"],
        "counters": {
            "processed": row["profiles_processed"],
            "added": row["profiles_added"],
            "updated": row["profiles_updated"],
            "unchanged": row["profiles_unchanged"],
            "images_processed": row["images_processed"],
            "validation_failures": row["validation_failures"],
        },
        "error_message": row["error_message"],
        "metadata": json.loads(row["metadata_json"] or "{}"),
    })


class RunsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create(self, kind: RunKind, started_at: datetime, metadata: Optional[Dict[str, Any]] = None) -> int:
        sql = (
            "INSERT INTO etl_runs (run_type, status, started_at, metadata_json) "
            "VALUES (?, 'running', ?, ?) RETURNING id;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (kind, started_at.isoformat(), json.dumps(metadata or {}, ensure_ascii=False)))
        row = cur.fetchone()
        self.conn.commit()
        return int(row[0])

    def update(self, run: EtlRun) -> None:
        c = run.counters
        sql = (
            "UPDATE etl_runs SET status = ?, completed_at = ?, profiles_processed = ?, profiles_added = ?, "
            "profiles_updated = ?, profiles_unchanged = ?, images_processed = ?, validation_failures = ?, "
            "error_message = ?, metadata_json = ? WHERE id = ?;"
        )
        self.conn.execute(sql, (
            run.status,
            run.completed_at.isoformat() if run.completed_at else None,
            c.processed,
            c.added,
            c.updated,
            c.unchanged,
            c.images_processed,
            c.validation_failures,
            run.error_message,
            json.dumps(run.metadata, ensure_ascii=False, default=str),
            run.id,
        ))
        self.conn.commit()

    def get(self, run_id: int) -> Optional[EtlRun]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM etl_runs WHERE id = ?", (run_id,))
        row = cur.fetchone()
        return _row_to_run(row) if row else None

    def list_recent(self, limit: int = 10) -> List[EtlRun]:
        """Runs ordered newest first."""
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM etl_runs ORDER BY started_at DESC, id DESC LIMIT ?", (limit,))
        return [_row_to_run(r) for r in cur.fetchall()]
