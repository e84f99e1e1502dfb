from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from models.etl_run import EtlRun, RunKind
from models.field_change import FieldChange
from models.profile_image import ProfileImage
from models.stored_profile import StoredProfile


class ProfileStorePort(Protocol):
    def get(self, linkedin_id: str) -> Optional[StoredProfile]:
        ...

    def upsert(self, profile: StoredProfile) -> StoredProfile:
        ...

    def append_changes(self, changes: List[FieldChange]) -> None:
        ...

    def record_image(self, image: ProfileImage) -> ProfileImage:
        ...

    def save_classified(
        self,
        profile: StoredProfile,
        changes: List[FieldChange],
        images: List[ProfileImage],
    ) -> StoredProfile:
        """Atomic write of one classified record; all or nothing."""
        ...

    def create_run(self, kind: RunKind, metadata: Optional[Dict[str, Any]] = None) -> EtlRun:
        ...

    def update_run(self, run: EtlRun) -> None:
        ...

    def get_run(self, run_id: int) -> Optional[EtlRun]:
        ...

    def list_runs(self, limit: int = 10) -> List[EtlRun]:
        ...
