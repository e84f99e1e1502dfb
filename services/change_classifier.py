from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from models.etl_run import Outcome
from models.field_change import FieldChange
from models.raw_profile import RawProfile
from models.stored_profile import StoredProfile
from services.errors import ClassificationError
from services.hasher import HASHED_FIELDS, ProfileHasher, canonical_json, project


IMAGE_FIELDS = (
    ("profile_photo", "profile_image_url"),
    ("banner", "banner_image_url"),
)


@dataclass
class ClassificationResult:
    outcome: Outcome
    new_fingerprint: str
    diff: List[FieldChange] = field(default_factory=list)

    @property
    def changed_fields(self) -> List[str]:
        return [c.field_name for c in self.diff]


@dataclass(frozen=True)
class ImageChange:
    image_type: str
    image_url: str
    image_hash: str


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (list, dict)):
        return canonical_json(value)
    return str(value)


class ChangeClassifier:
    """Decide whether a profile is new, changed or unchanged against stored state.

    The verdict is driven only by fingerprint equality. The field diff is
    computed afterwards, for updated profiles, to build the audit trail.
    """

    def __init__(self, hasher: Optional[ProfileHasher] = None) -> None:
        self.hasher = hasher or ProfileHasher()

    def classify(
        self,
        raw: RawProfile,
        previous: Optional[StoredProfile],
        run_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ClassificationResult:
        try:
            fingerprint = self.hasher.fingerprint(raw)
        except (TypeError, ValueError) as e:
            raise ClassificationError(f"Cannot fingerprint profile {raw.linkedin_id!r}: {e}") from e

        if previous is None:
            return ClassificationResult(outcome="added", new_fingerprint=fingerprint)
        if fingerprint == previous.data_hash:
            return ClassificationResult(outcome="unchanged", new_fingerprint=fingerprint)

        changed_at = now or datetime.now(timezone.utc)
        diff = [
            FieldChange(
                profile_id=previous.id,
                etl_run_id=run_id,
                field_name=name,
                old_value=old,
                new_value=new,
                changed_at=changed_at,
            )
            for name, old, new in self.diff_fields(previous, raw)
        ]
        return ClassificationResult(outcome="updated", new_fingerprint=fingerprint, diff=diff)

    def diff_fields(self, previous: RawProfile, raw: RawProfile) -> List[Tuple[str, Optional[str], Optional[str]]]:
        """(field, old, new) for every hashed field whose serialized value differs."""
        old_proj = project(previous)
        new_proj = project(raw)
        changes: List[Tuple[str, Optional[str], Optional[str]]] = []
        for name in HASHED_FIELDS:
            old = _stringify(old_proj[name])
            new = _stringify(new_proj[name])
            if old != new:
                changes.append((name, old, new))
        return changes

    def image_changes(self, raw: RawProfile, previous: Optional[StoredProfile]) -> List[ImageChange]:
        """Image URLs that are new or whose fingerprint differs from the stored one."""
        changes: List[ImageChange] = []
        for image_type, attr in IMAGE_FIELDS:
            url = getattr(raw, attr)
            if not url:
                continue
            image_hash = self.hasher.image_fingerprint(url)
            old_url = getattr(previous, attr) if previous is not None else None
            if old_url and self.hasher.image_fingerprint(old_url) == image_hash:
                continue
            changes.append(ImageChange(image_type=image_type, image_url=url, image_hash=image_hash))
        return changes
