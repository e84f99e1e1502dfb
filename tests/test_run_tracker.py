from __future__ import annotations

import threading

import pytest

from models.etl_run import RunCounters
from services.errors import RunStateError
from services.run_tracker import RunTracker


def test_new_run_starts_running_with_zero_counters():
    tracker = RunTracker.new("full", metadata={"source": "test"})
    assert tracker.run.status == "running"
    assert tracker.run.run_type == "full"
    assert tracker.counters == RunCounters()
    assert tracker.run.metadata == {"source": "test"}


def test_record_keeps_processed_conserved():
    tracker = RunTracker.new("incremental")
    for outcome in ("added", "added", "updated", "unchanged"):
        tracker.record(outcome)
    tracker.record_validation_failure()
    tracker.record_image_processed()
    run = tracker.complete()

    c = run.counters
    assert (c.processed, c.added, c.updated, c.unchanged) == (4, 2, 1, 1)
    assert c.validation_failures == 1
    assert c.images_processed == 1
    assert c.is_conserved()
    assert run.status == "completed"
    assert run.completed_at is not None


def test_unknown_outcome_is_rejected():
    tracker = RunTracker.new("incremental")
    with pytest.raises(ValueError):
        tracker.record("deleted")
    assert tracker.counters.processed == 0


def test_terminal_run_rejects_mutation():
    tracker = RunTracker.new("incremental")
    tracker.complete()
    with pytest.raises(RunStateError):
        tracker.record("added")
    with pytest.raises(RunStateError):
        tracker.fail("late failure")
    with pytest.raises(RunStateError):
        tracker.complete()
    assert tracker.run.status == "completed"


def test_complete_with_supplied_counters():
    tracker = RunTracker.new("full")
    tracker.record("added")
    final = RunCounters(processed=3, added=1, updated=1, unchanged=1, images_processed=2)
    run = tracker.complete(final)
    assert run.counters == final


def test_fail_keeps_counters_and_message():
    tracker = RunTracker.new("incremental")
    tracker.record("added")
    tracker.record("unchanged")
    run = tracker.fail("Store upsert failed: disk I/O error")
    assert run.status == "failed"
    assert run.error_message == "Store upsert failed: disk I/O error"
    assert (run.counters.processed, run.counters.added, run.counters.unchanged) == (2, 1, 1)
    with pytest.raises(RunStateError):
        tracker.record("added")


def test_concurrent_records_are_not_lost():
    tracker = RunTracker.new("incremental")

    def _work():
        for _ in range(500):
            tracker.record("unchanged")

    threads = [threading.Thread(target=_work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert tracker.counters.processed == 2000
    assert tracker.counters.unchanged == 2000


def test_start_creates_run_in_store(store):
    tracker = RunTracker.start(store, "full", metadata={"sources": ["a.csv"]})
    assert tracker.run.id is not None
    saved = store.get_run(tracker.run.id)
    assert saved.status == "running"
    assert saved.metadata == {"sources": ["a.csv"]}
