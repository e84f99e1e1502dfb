from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.stored_profile import StoredProfile


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _dump_list(items: List[Any]) -> str:
    # Preserve non-ASCII characters (e.g., umlauts) in stored JSON text
    return json.dumps(
        [i.model_dump(exclude_none=True) if hasattr(i, "model_dump") else i for i in items],
        ensure_ascii=False,
    )


def row_to_profile(row: sqlite3.Row) -> StoredProfile:
    return StoredProfile.model_validate({
        "id": row["id"],
        "linkedin_id": row["linkedin_id"],
        "full_name": row["full_name"],
        "headline": row["headline"],
        "location": row["location"],
        "summary": row["summary"],
        "experience": json.loads(row["experience_json"] or "[]"),
        "education": json.loads(row["education_json"] or "[]"),
        "skills": json.loads(row["skills_json"] or "[]"),
        "connections_count": row["connections_count"],
        "profile_url": row["profile_url"],
        "profile_image_url": row["profile_image_url"],
        "banner_image_url": row["banner_image_url"],
        "data_hash": row["data_hash"],
        "validation_status": row["validation_status"],
        "validation_errors": json.loads(row["validation_errors_json"] or "[]"),
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
        "last_validated_at": row["last_validated_at"],
    })


class ProfilesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get_by_linkedin_id(self, linkedin_id: str) -> Optional[StoredProfile]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM linkedin_profiles WHERE linkedin_id = ?", (linkedin_id,))
        row = cur.fetchone()
        return row_to_profile(row) if row else None

    def upsert(self, profile: StoredProfile, commit: bool = True) -> int:
        """Insert or update a profile by linkedin_id; returns the row id.

        created_at is only written on insert.
        """
        sql = (
            "INSERT INTO linkedin_profiles (linkedin_id, full_name, headline, location, summary, experience_json, education_json, skills_json, "
            "connections_count, profile_url, profile_image_url, banner_image_url, data_hash, validation_status, validation_errors_json, "
            "created_at, updated_at, last_validated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(linkedin_id) DO UPDATE SET "
            " full_name = excluded.full_name, "
            " headline = excluded.headline, "
            " location = excluded.location, "
            " summary = excluded.summary, "
            " experience_json = excluded.experience_json, "
            " education_json = excluded.education_json, "
            " skills_json = excluded.skills_json, "
            " connections_count = excluded.connections_count, "
            " profile_url = excluded.profile_url, "
            " profile_image_url = excluded.profile_image_url, "
            " banner_image_url = excluded.banner_image_url, "
            " data_hash = excluded.data_hash, "
            " validation_status = excluded.validation_status, "
            " validation_errors_json = excluded.validation_errors_json, "
            " updated_at = excluded.updated_at, "
            " last_validated_at = excluded.last_validated_at "
            "RETURNING id;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (
            profile.linkedin_id,
            profile.full_name,
            profile.headline,
            profile.location,
            profile.summary,
            _dump_list(profile.experience),
            _dump_list(profile.education),
            _dump_list(profile.skills),
            profile.connections_count,
            profile.profile_url,
            profile.profile_image_url,
            profile.banner_image_url,
            profile.data_hash,
            profile.validation_status,
            _dump_list(profile.validation_errors),
            _iso(profile.created_at),
            _iso(profile.updated_at),
            _iso(profile.last_validated_at),
        ))
        row = cur.fetchone()
        if commit:
            self.conn.commit()
        return int(row[0])

    def list_profiles(self, limit: Optional[int] = None) -> List[StoredProfile]:
        """Profiles ordered by most recently updated first."""
        sql = "SELECT * FROM linkedin_profiles ORDER BY updated_at DESC, id DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        cur = self.conn.cursor()
        cur.execute(sql, params)
        return [row_to_profile(r) for r in cur.fetchall()]

    def validation_counts(self) -> Dict[str, int]:
        """Totals per validation status plus an overall count."""
        cur = self.conn.cursor()
        cur.execute("SELECT validation_status, COUNT(*) FROM linkedin_profiles GROUP BY validation_status")
        counts = {"total": 0, "valid": 0, "invalid": 0, "pending": 0}
        for status, n in cur.fetchall():
            counts[status] = int(n)
            counts["total"] += int(n)
        return counts
