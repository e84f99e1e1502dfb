from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import List

from models.profile_image import ProfileImage


class ImagesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def record(self, image: ProfileImage, commit: bool = True) -> int:
        """Store a new current image for (profile, type); older rows stop being current."""
        created_at = image.created_at or datetime.now(timezone.utc)
        cur = self.conn.cursor()
        cur.execute(
            "UPDATE profile_images SET is_current = 0 WHERE profile_id = ? AND image_type = ? AND is_current = 1",
            (image.profile_id, image.image_type),
        )
        cur.execute(
            (
                "INSERT INTO profile_images (profile_id, image_type, image_url, image_hash, is_current, created_at) "
                "VALUES (?, ?, ?, ?, 1, ?) RETURNING id;"
            ),
            (image.profile_id, image.image_type, image.image_url, image.image_hash, created_at.isoformat()),
        )
        row = cur.fetchone()
        if commit:
            self.conn.commit()
        return int(row[0])

    def list_for_profile(self, profile_id: int, current_only: bool = False) -> List[ProfileImage]:
        sql = "SELECT * FROM profile_images WHERE profile_id = ?"
        if current_only:
            sql += " AND is_current = 1"
        sql += " ORDER BY id"
        cur = self.conn.cursor()
        cur.execute(sql, (profile_id,))
        return [
            ProfileImage.model_validate({
                "id": r["id"],
                "profile_id": r["profile_id"],
                "image_type": r["image_type"],
                "image_url": r["image_url"],
                "image_hash": r["image_hash"],
                "is_current": bool(r["is_current"]),
                "created_at": r["created_at"],
            })
            for r in cur.fetchall()
        ]
