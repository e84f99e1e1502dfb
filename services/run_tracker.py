from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models.etl_run import EtlRun, Outcome, RunCounters, RunKind
from ports.store import ProfileStorePort
from services.errors import RunStateError


logger = logging.getLogger(__name__)


class RunTracker:
    """State machine for one ETL run: running -> completed | failed.

    Counter updates take a lock so workers sharing a tracker cannot lose
    increments. Once terminal, every mutation raises RunStateError.
    """

    def __init__(self, run: EtlRun) -> None:
        self.run = run
        self._lock = threading.Lock()

    @classmethod
    def start(cls, store: ProfileStorePort, kind: RunKind, metadata: Optional[Dict[str, Any]] = None) -> "RunTracker":
        run = store.create_run(kind, metadata=metadata)
        logger.info("run started", extra={"step": "run", "status": run.status, "run_id": run.id})
        return cls(run)

    @classmethod
    def new(cls, kind: RunKind, metadata: Optional[Dict[str, Any]] = None) -> "RunTracker":
        """Tracker around an unsaved run, for callers that persist it themselves."""
        return cls(EtlRun(run_type=kind, started_at=datetime.now(timezone.utc), metadata=dict(metadata or {})))

    @property
    def counters(self) -> RunCounters:
        return self.run.counters

    def _ensure_running(self, op: str) -> None:
        if self.run.is_terminal:
            raise RunStateError(f"Cannot {op} on run {self.run.id} with status {self.run.status}")

    def record(self, outcome: Outcome) -> None:
        with self._lock:
            self._ensure_running("record an outcome")
            counters = self.run.counters
            if outcome == "added":
                counters.added += 1
            elif outcome == "updated":
                counters.updated += 1
            elif outcome == "unchanged":
                counters.unchanged += 1
            else:
                raise ValueError(f"Unknown outcome: {outcome!r}")
            counters.processed += 1

    def record_validation_failure(self) -> None:
        with self._lock:
            self._ensure_running("record a validation failure")
            self.run.counters.validation_failures += 1

    def record_image_processed(self) -> None:
        with self._lock:
            self._ensure_running("record an image")
            self.run.counters.images_processed += 1

    def complete(self, final_counters: Optional[RunCounters] = None) -> EtlRun:
        """Finalize as completed.

        Supplied counters replace the accumulated ones; the caller must make
        sure processed == added + updated + unchanged holds for them.
        """
        with self._lock:
            self._ensure_running("complete")
            if final_counters is not None:
                self.run.counters = final_counters.model_copy()
            if not self.run.counters.is_conserved():
                logger.warning(
                    "run completed with unbalanced counters",
                    extra={"step": "run", "status": "completed", "run_id": self.run.id},
                )
            self.run.status = "completed"
            self.run.completed_at = datetime.now(timezone.utc)
        logger.info("run completed", extra={"step": "run", "status": "completed", "run_id": self.run.id})
        return self.run

    def fail(self, error_message: str) -> EtlRun:
        with self._lock:
            self._ensure_running("fail")
            self.run.status = "failed"
            self.run.error_message = error_message
            self.run.completed_at = datetime.now(timezone.utc)
        logger.error(
            "run failed",
            extra={"step": "run", "status": "failed", "run_id": self.run.id, "error": error_message},
        )
        return self.run
