from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from models.etl_run import EtlRun, RunKind
from models.profile_image import ProfileImage
from models.raw_profile import RawProfile
from models.run_summary import RecordOutcome, RunSummary
from models.stored_profile import StoredProfile
from ports.store import ProfileStorePort
from services.change_classifier import ChangeClassifier
from services.errors import ClassificationError, StoreUnavailable, ValidationFailure
from services.profile_validator import ProfileValidator
from services.run_tracker import RunTracker


logger = logging.getLogger(__name__)

SAVE_RUN_ATTEMPTS = 2


class EtlEngine:
    """Runs one batch of raw profiles through validate, classify and persist.

    Records are handled one at a time in input order. Invalid records are
    still classified and stored (with status 'invalid'), so a profile that
    turns invalid is tracked as updated and also counted as a validation
    failure. Records without an identifier cannot be keyed in the store and
    are only counted as validation failures.

    Each record is written with its field changes and images in one store
    transaction, so a failed write leaves nothing behind to skew a retry.
    """

    def __init__(
        self,
        store: ProfileStorePort,
        validator: Optional[ProfileValidator] = None,
        classifier: Optional[ChangeClassifier] = None,
    ) -> None:
        self.store = store
        self.validator = validator or ProfileValidator()
        self.classifier = classifier or ChangeClassifier()

    def process_batch(
        self,
        profiles: Iterable[RawProfile],
        run_kind: RunKind = "incremental",
        cancel_event: Optional[threading.Event] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RunSummary:
        batch = list(profiles)
        run_meta = dict(metadata or {})
        run_meta.setdefault("total_records", len(batch))
        tracker = RunTracker.start(self.store, run_kind, metadata=run_meta)
        outcomes = []
        started = time.monotonic()

        try:
            for index, raw in enumerate(batch):
                if cancel_event is not None and cancel_event.is_set():
                    tracker.fail(f"Run cancelled after {index} of {len(batch)} records")
                    break
                outcomes.append(self._process_one(raw, tracker))
            else:
                tracker.complete()
        except StoreUnavailable as e:
            # Already persisted records stay; the rest of the batch is not attempted
            tracker.fail(str(e))
        except Exception as e:
            tracker.fail(f"Unexpected error: {e}")
            self._save_run(tracker.run)
            raise

        persisted = self._save_run(tracker.run)
        c = tracker.counters
        logger.info(
            f"Batch finished: processed={c.processed} added={c.added} updated={c.updated} "
            f"unchanged={c.unchanged} validation_failures={c.validation_failures} images={c.images_processed}",
            extra={
                "step": "process_batch",
                "status": tracker.run.status,
                "run_id": tracker.run.id,
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return RunSummary(run=tracker.run, outcomes=outcomes, persisted=persisted)

    def _process_one(self, raw: RawProfile, tracker: RunTracker) -> RecordOutcome:
        run_id = tracker.run.id
        issues = self.validator.validate(raw)
        status = self.validator.status(issues)
        result = RecordOutcome(linkedin_id=raw.linkedin_id, validation_status=status, issues=issues)

        if not raw.linkedin_id:
            tracker.record_validation_failure()
            result.error = "Record has no LinkedIn ID and cannot be stored"
            logger.warning(result.error, extra={"step": "validate", "status": status, "run_id": run_id})
            return result

        previous = self.store.get(raw.linkedin_id)
        now = datetime.now(timezone.utc)
        try:
            classification = self.classifier.classify(raw, previous, run_id=run_id, now=now)
        except ClassificationError as e:
            logger.exception(
                "classification failed",
                extra={"step": "classify", "status": "error", "run_id": run_id, "linkedin_id": raw.linkedin_id},
            )
            result.error = str(e)
            return result

        bumped = classification.outcome != "unchanged" or previous is None
        stored = StoredProfile.model_validate({
            **raw.model_dump(),
            "id": previous.id if previous else None,
            "data_hash": classification.new_fingerprint,
            "validation_status": status,
            "validation_errors": [i.model_dump() for i in issues],
            "created_at": previous.created_at if previous and previous.created_at else now,
            "updated_at": now if bumped else previous.updated_at,
            "last_validated_at": now,
        })
        image_changes = self.classifier.image_changes(raw, previous)
        images = [
            ProfileImage(
                image_type=change.image_type,
                image_url=change.image_url,
                image_hash=change.image_hash,
                created_at=now,
            )
            for change in image_changes
        ]
        self.store.save_classified(stored, classification.diff, images)

        # Counters move only after every write for this record succeeded
        if status == "invalid":
            tracker.record_validation_failure()
            logger.warning(
                str(ValidationFailure(raw.linkedin_id, issues)),
                extra={"step": "validate", "status": status, "run_id": run_id, "linkedin_id": raw.linkedin_id},
            )
        tracker.record(classification.outcome)
        for _ in image_changes:
            tracker.record_image_processed()

        result.outcome = classification.outcome
        result.changed_fields = classification.changed_fields
        result.images_processed = len(image_changes)
        logger.debug(
            "record processed",
            extra={
                "step": "process_record",
                "status": status,
                "run_id": run_id,
                "linkedin_id": raw.linkedin_id,
                "outcome": classification.outcome,
            },
        )
        return result

    def _save_run(self, run: EtlRun) -> bool:
        """Write the final run state, retrying once; False if it never landed."""
        for attempt in range(SAVE_RUN_ATTEMPTS):
            try:
                self.store.update_run(run)
                return True
            except StoreUnavailable as e:
                logger.error(
                    f"could not persist final run state (attempt {attempt + 1} of {SAVE_RUN_ATTEMPTS})",
                    extra={"step": "update_run", "status": run.status, "run_id": run.id, "error": str(e)},
                )
        return False

