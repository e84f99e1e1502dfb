from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from db.store import SqliteProfileStore
from models.field_change import FieldChange
from models.import_log import ImportLogEntry
from models.stored_profile import StoredProfile
from services.errors import StoreUnavailable


def _stored(make_profile, status="valid", **overrides):
    now = datetime.now(timezone.utc)
    return StoredProfile.model_validate({
        **make_profile(**overrides).model_dump(),
        "data_hash": "h1",
        "validation_status": status,
        "validation_errors": [{"field": "headline", "message": "Headline exceeds 220 characters", "severity": "warning"}],
        "created_at": now,
        "updated_at": now,
        "last_validated_at": now,
    })


def test_bootstrap_is_idempotent(tmp_path):
    db_path = str(tmp_path / "twice.db")
    SqliteProfileStore.open(db_path).close()
    s = SqliteProfileStore.open(db_path)
    try:
        names = {r[0] for r in s.conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        s.close()
    assert {"linkedin_profiles", "etl_runs", "profile_changes", "profile_images", "user_imports"} <= names


def test_upsert_round_trips_profile(store, make_profile):
    saved = store.upsert(_stored(make_profile, skills=["Ünicode", "AI"]))
    assert saved.id is not None
    loaded = store.get("jane-smith")
    assert loaded.id == saved.id
    assert loaded.skills == ["Ünicode", "AI"]
    assert loaded.experience[0].company == "AI Innovations"
    assert loaded.education[0].end_year == 2017
    assert loaded.validation_errors[0].severity == "warning"
    assert store.get("nobody") is None


def test_upsert_updates_in_place_and_keeps_created_at(store, make_profile):
    first = store.upsert(_stored(make_profile))
    first_seen = store.get("jane-smith")

    later = _stored(make_profile, headline="Director")
    later = later.model_copy(update={"created_at": first_seen.created_at + timedelta(days=1), "data_hash": "h2"})
    second = store.upsert(later)

    assert second.id == first.id
    loaded = store.get("jane-smith")
    assert loaded.headline == "Director"
    assert loaded.data_hash == "h2"
    assert loaded.created_at == first_seen.created_at


def test_validation_counts(store, make_profile):
    store.upsert(_stored(make_profile, status="valid"))
    store.upsert(_stored(make_profile, status="invalid", linkedin_id="b", profile_url="https://linkedin.com/in/b"))
    store.upsert(_stored(make_profile, status="invalid", linkedin_id="c", profile_url="https://linkedin.com/in/c"))
    assert store.validation_counts() == {"total": 3, "valid": 1, "invalid": 2, "pending": 0}


def test_runs_are_listed_newest_first(store):
    first = store.create_run("full")
    second = store.create_run("incremental", metadata={"sources": ["b.csv"]})
    runs = store.list_runs(10)
    assert [r.id for r in runs] == [second.id, first.id]
    assert runs[0].metadata == {"sources": ["b.csv"]}
    assert store.list_runs(1)[0].id == second.id


def test_update_run_persists_final_state(store):
    run = store.create_run("incremental")
    run.counters.processed = 2
    run.counters.added = 2
    run.status = "completed"
    run.completed_at = datetime.now(timezone.utc)
    store.update_run(run)
    loaded = store.get_run(run.id)
    assert loaded.status == "completed"
    assert loaded.counters.added == 2
    assert loaded.completed_at is not None


def test_changes_are_listed_by_run_and_profile(store, make_profile):
    saved = store.upsert(_stored(make_profile))
    run = store.create_run("incremental")
    now = datetime.now(timezone.utc)
    store.append_changes([
        FieldChange(profile_id=saved.id, etl_run_id=run.id, field_name="headline", old_value="PM", new_value="CPO", changed_at=now),
        FieldChange(profile_id=saved.id, etl_run_id=run.id, field_name="skills", old_value='["AI"]', new_value='["AI","ML"]', changed_at=now),
    ])
    assert [c.field_name for c in store.list_changes(run_id=run.id)] == ["headline", "skills"]
    assert len(store.list_changes(profile_id=saved.id)) == 2
    assert store.list_changes(run_id=run.id + 1) == []
    with pytest.raises(ValueError):
        store.list_changes()


def test_import_log_round_trip(store):
    store.log_import(ImportLogEntry(import_type="csv", file_name="a.csv", total_records=3, successful_records=2, failed_records=1))
    store.log_import(ImportLogEntry(import_type="json", file_name="b.json", error_message="b.json: Invalid JSON format"))
    entries = store.list_imports(10)
    assert [e.file_name for e in entries] == ["b.json", "a.csv"]
    assert entries[1].failed_records == 1
    assert entries[0].error_message == "b.json: Invalid JSON format"


def test_sqlite_errors_surface_as_store_unavailable(store, make_profile):
    store.conn.close()
    with pytest.raises(StoreUnavailable):
        store.get("jane-smith")
    # Reopen so the fixture can close cleanly
    store.conn = sqlite3.connect(":memory:")


def test_open_unreachable_path_is_store_unavailable(tmp_path):
    with pytest.raises(StoreUnavailable):
        SqliteProfileStore.open(str(tmp_path / "missing" / "dir" / "x.db"))
