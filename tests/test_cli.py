from __future__ import annotations

import csv
import json
import sys
from typing import List

import pytest

from sources.sample_profiles import SAMPLE_PROFILES


def _run_cli_with_args(args_list: List[str]) -> None:
    """Run cli.py main() with provided argv in-process (no subprocess)."""
    argv_backup = sys.argv[:]
    try:
        sys.argv = ["cli.py"] + args_list
        # Import fresh to ensure clean parser each time
        if "cli" in sys.modules:
            del sys.modules["cli"]
        import cli  # type: ignore
        cli.main()  # type: ignore[attr-defined]
    finally:
        sys.argv = argv_backup


def test_cli_bootstrap_creates_db(tmp_path, capsys):
    db_path = tmp_path / "cli.db"
    _run_cli_with_args(["--db", str(db_path), "bootstrap"])
    assert db_path.exists()
    assert "Schema ready" in capsys.readouterr().out


def test_cli_import_then_runs_and_report(tmp_path, capsys):
    db_path = tmp_path / "cli.db"
    data = tmp_path / "profiles.json"
    data.write_text(json.dumps(SAMPLE_PROFILES), encoding="utf-8")

    _run_cli_with_args(["--db", str(db_path), "import", "--input", str(data), "--kind", "full"])
    out = capsys.readouterr().out
    assert "Parsed 2 profiles from profiles.json" in out
    assert "Added: 2" in out

    changed = [dict(SAMPLE_PROFILES[0], headline="Staff Engineer at Tech Corp"), SAMPLE_PROFILES[1]]
    data.write_text(json.dumps(changed), encoding="utf-8")
    _run_cli_with_args(["--db", str(db_path), "import", "--input", str(data), "-v"])
    out = capsys.readouterr().out
    assert "Updated: 1" in out
    assert "Unchanged: 1" in out
    assert "johndoe: updated [valid] fields=headline" in out

    _run_cli_with_args(["--db", str(db_path), "runs"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].startswith("#2 incremental")
    assert lines[1].startswith("#1 full")

    _run_cli_with_args(["--db", str(db_path), "run-changes", "--run-id", "2"])
    changes = json.loads(capsys.readouterr().out)
    assert [(c["field_name"], c["new_value"]) for c in changes] == [("headline", "Staff Engineer at Tech Corp")]

    _run_cli_with_args(["--db", str(db_path), "report-profile", "--linkedin-id", "johndoe"])
    report = json.loads(capsys.readouterr().out)
    assert report["headline"] == "Staff Engineer at Tech Corp"
    assert len(report["changes"]) == 1

    _run_cli_with_args(["--db", str(db_path), "stats"])
    out = capsys.readouterr().out
    assert "Total profiles: 2" in out
    assert "json profiles.json: total=2 ok=2 failed=0" in out


def test_cli_sample_twice_is_unchanged(tmp_path, capsys):
    db_path = tmp_path / "cli.db"
    _run_cli_with_args(["--db", str(db_path), "sample"])
    assert "Added: 2" in capsys.readouterr().out
    _run_cli_with_args(["--db", str(db_path), "sample"])
    out = capsys.readouterr().out
    assert "Unchanged: 2" in out
    assert "Images Processed: 0" in out


def test_cli_export_csv_and_json(tmp_path, capsys):
    db_path = tmp_path / "cli.db"
    _run_cli_with_args(["--db", str(db_path), "sample"])
    capsys.readouterr()

    csv_out = tmp_path / "out" / "profiles.csv"
    _run_cli_with_args(["--db", str(db_path), "export", "--format", "csv", "--output", str(csv_out)])
    assert "Exported 2 profiles" in capsys.readouterr().out
    with csv_out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert {r["linkedin_id"] for r in rows} == {"johndoe", "janesmith"}

    json_out = tmp_path / "out" / "profiles.json"
    _run_cli_with_args(["--db", str(db_path), "export", "--output", str(json_out)])
    exported = json.loads(json_out.read_text(encoding="utf-8"))
    assert {p["linkedin_id"] for p in exported} == {"johndoe", "janesmith"}


def test_cli_export_empty_db(tmp_path, capsys):
    db_path = tmp_path / "cli.db"
    _run_cli_with_args(["--db", str(db_path), "export"])
    assert "No profiles to export yet" in capsys.readouterr().out


def test_cli_import_fails_when_store_breaks(tmp_path, monkeypatch):
    from db.store import SqliteProfileStore
    from services.errors import StoreUnavailable

    def _broken(self, profile, changes, images):
        raise StoreUnavailable("Store upsert failed: database is locked")

    monkeypatch.setattr(SqliteProfileStore, "save_classified", _broken)
    data = tmp_path / "profiles.json"
    data.write_text(json.dumps(SAMPLE_PROFILES), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        _run_cli_with_args(["--db", str(tmp_path / "cli.db"), "import", "--input", str(data)])
    assert exc.value.code == 1


def test_cli_sample_fails_when_run_state_cannot_be_saved(tmp_path, monkeypatch, capsys):
    from db.store import SqliteProfileStore
    from services.errors import StoreUnavailable

    def _down(self, run):
        raise StoreUnavailable("Store update_run failed: disk I/O error")

    monkeypatch.setattr(SqliteProfileStore, "update_run", _down)
    with pytest.raises(SystemExit) as exc:
        _run_cli_with_args(["--db", str(tmp_path / "cli.db"), "sample"])
    assert exc.value.code == 1
    assert "final run state could not be saved" in capsys.readouterr().out
