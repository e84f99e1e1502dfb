"""
Deterministic content fingerprints for profiles and image URLs.

The fingerprint covers only the semantic fields of a profile. Identifiers,
URLs and image references are excluded so that they never make an otherwise
identical profile look changed.
"""
from __future__ import annotations

import hashlib
import json
from typing import Any, Dict

from models.raw_profile import RawProfile


HASHED_FIELDS = (
    "full_name",
    "headline",
    "location",
    "summary",
    "experience",
    "education",
    "skills",
    "connections_count",
)


def canonical_json(value: Any) -> str:
    """Serialize with sorted keys and no whitespace so equal data gives equal text."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def project(profile: RawProfile) -> Dict[str, Any]:
    """Normalized projection of the hashed fields, with absent values defaulted."""
    return {
        "full_name": profile.full_name,
        "headline": profile.headline or "",
        "location": profile.location or "",
        "summary": profile.summary or "",
        "experience": [e.model_dump(exclude_none=True) for e in profile.experience],
        "education": [e.model_dump(exclude_none=True) for e in profile.education],
        "skills": list(profile.skills),
        "connections_count": profile.connections_count or 0,
    }


class ProfileHasher:
    def fingerprint(self, profile: RawProfile) -> str:
        return sha256_text(canonical_json(project(profile)))

    def image_fingerprint(self, url: str) -> str:
        return sha256_text(url)
