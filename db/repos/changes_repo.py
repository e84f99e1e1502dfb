from __future__ import annotations

import sqlite3
from typing import List

from models.field_change import FieldChange


def _row_to_change(row: sqlite3.Row) -> FieldChange:
    return FieldChange.model_validate({
        "profile_id": row["profile_id"],
        "etl_run_id": row["etl_run_id"],
        "field_name": row["field_name"],
        "old_value": row["old_value"],
        "new_value": row["new_value"],
        "changed_at": row["changed_at"],
    })


class ChangesRepo:
    """Append-only access to the profile_changes audit table."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def append(self, changes: List[FieldChange], commit: bool = True) -> int:
        if not changes:
            return 0
        sql = (
            "INSERT INTO profile_changes (profile_id, etl_run_id, field_name, old_value, new_value, changed_at) "
            "VALUES (?, ?, ?, ?, ?, ?)"
        )
        values = [
            (c.profile_id, c.etl_run_id, c.field_name, c.old_value, c.new_value, c.changed_at.isoformat())
            for c in changes
        ]
        cur = self.conn.cursor()
        cur.executemany(sql, values)
        if commit:
            self.conn.commit()
        return len(values)

    def list_for_run(self, run_id: int) -> List[FieldChange]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM profile_changes WHERE etl_run_id = ? ORDER BY id", (run_id,))
        return [_row_to_change(r) for r in cur.fetchall()]

    def list_for_profile(self, profile_id: int) -> List[FieldChange]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM profile_changes WHERE profile_id = ? ORDER BY id", (profile_id,))
        return [_row_to_change(r) for r in cur.fetchall()]
