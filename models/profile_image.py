from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


ImageType = Literal["profile_photo", "banner"]


class ProfileImage(BaseModel):
    """Image asset reference tracked by URL fingerprint; bytes are never fetched."""

    id: int | None = None
    profile_id: int | None = None
    image_type: ImageType
    image_url: str
    image_hash: str
    is_current: bool = True
    created_at: datetime | None = None
