from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from db import schema
from db.connection import get_connection
from db.repos.changes_repo import ChangesRepo
from db.repos.images_repo import ImagesRepo
from db.repos.imports_repo import ImportsRepo
from db.repos.profiles_repo import ProfilesRepo
from db.repos.runs_repo import RunsRepo
from models.etl_run import EtlRun, RunKind
from models.field_change import FieldChange
from models.import_log import ImportLogEntry
from models.profile_image import ProfileImage
from models.stored_profile import StoredProfile
from services.errors import StoreUnavailable


logger = logging.getLogger(__name__)


class SqliteProfileStore:
    """ProfileStorePort backed by the SQLite repos.

    Every sqlite3 error is surfaced as StoreUnavailable so the engine can
    treat persistence failures uniformly.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.profiles = ProfilesRepo(conn)
        self.changes = ChangesRepo(conn)
        self.runs = RunsRepo(conn)
        self.images = ImagesRepo(conn)
        self.imports = ImportsRepo(conn)

    @classmethod
    def open(cls, db_path: str) -> "SqliteProfileStore":
        try:
            conn = get_connection(db_path)
            schema.bootstrap(conn)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot open profile store at {db_path}: {e}") from e
        return cls(conn)

    def close(self) -> None:
        self.conn.close()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as e:
            logger.error(
                "store operation failed",
                extra={"step": f"store.{operation}", "status": "error", "error": str(e)},
            )
            raise StoreUnavailable(f"Store {operation} failed: {e}") from e

    # --- Profiles ---
    def get(self, linkedin_id: str) -> Optional[StoredProfile]:
        with self._guard("get"):
            return self.profiles.get_by_linkedin_id(linkedin_id)

    def upsert(self, profile: StoredProfile) -> StoredProfile:
        with self._guard("upsert"):
            profile_id = self.profiles.upsert(profile)
        return profile.model_copy(update={"id": profile_id})

    def list_profiles(self, limit: Optional[int] = None) -> List[StoredProfile]:
        with self._guard("list_profiles"):
            return self.profiles.list_profiles(limit)

    def validation_counts(self) -> Dict[str, int]:
        with self._guard("validation_counts"):
            return self.profiles.validation_counts()

    # --- Audit ---
    def append_changes(self, changes: List[FieldChange]) -> None:
        with self._guard("append_changes"):
            self.changes.append(changes)

    def list_changes(self, run_id: Optional[int] = None, profile_id: Optional[int] = None) -> List[FieldChange]:
        with self._guard("list_changes"):
            if run_id is not None:
                return self.changes.list_for_run(run_id)
            if profile_id is not None:
                return self.changes.list_for_profile(profile_id)
        raise ValueError("list_changes needs run_id or profile_id")

    def record_image(self, image: ProfileImage) -> ProfileImage:
        with self._guard("record_image"):
            image_id = self.images.record(image)
        return image.model_copy(update={"id": image_id})

    def save_classified(
        self,
        profile: StoredProfile,
        changes: List[FieldChange],
        images: List[ProfileImage],
    ) -> StoredProfile:
        """Write a profile with its field changes and new images in one transaction.

        Nothing is kept if any write fails, so a retried record is classified
        against the state from before the failed attempt.
        """
        with self._guard("save_classified"):
            try:
                profile_id = self.profiles.upsert(profile, commit=False)
                self.changes.append(
                    [c.model_copy(update={"profile_id": profile_id}) for c in changes],
                    commit=False,
                )
                for image in images:
                    self.images.record(image.model_copy(update={"profile_id": profile_id}), commit=False)
                self.conn.commit()
            except sqlite3.Error:
                self.conn.rollback()
                raise
        return profile.model_copy(update={"id": profile_id})

    # --- Runs ---
    def create_run(self, kind: RunKind, metadata: Optional[Dict[str, Any]] = None) -> EtlRun:
        started_at = datetime.now(timezone.utc)
        with self._guard("create_run"):
            run_id = self.runs.create(kind, started_at, metadata)
        return EtlRun(id=run_id, run_type=kind, started_at=started_at, metadata=dict(metadata or {}))

    def update_run(self, run: EtlRun) -> None:
        with self._guard("update_run"):
            self.runs.update(run)

    def get_run(self, run_id: int) -> Optional[EtlRun]:
        with self._guard("get_run"):
            return self.runs.get(run_id)

    def list_runs(self, limit: int = 10) -> List[EtlRun]:
        with self._guard("list_runs"):
            return self.runs.list_recent(limit)

    # --- Imports ---
    def log_import(self, entry: ImportLogEntry) -> int:
        with self._guard("log_import"):
            return self.imports.log_import(entry)

    def list_imports(self, limit: int = 20) -> List[ImportLogEntry]:
        with self._guard("list_imports"):
            return self.imports.list_recent(limit)
