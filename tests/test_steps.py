from __future__ import annotations

import json

from pipelines.etl_engine import EtlEngine
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import LoadProfiles, LogImports, ParseProfileFiles, ProcessProfiles
from sources.sample_profiles import SAMPLE_PROFILES, SampleProfilesSource


def test_parse_files_records_malformed_file_and_continues(tmp_path):
    good = tmp_path / "good.json"
    good.write_text(json.dumps(SAMPLE_PROFILES), encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")

    ctx = ParseProfileFiles([good, bad]).run(RunContext())

    assert [b.file_name for b in ctx.batches] == ["good.json", "bad.json"]
    assert len(ctx.profiles) == 2
    assert ctx.batches[1].error == "bad.json: Invalid JSON format"
    assert ctx.meta["files_total"] == 2
    assert ctx.meta["files_failed"] == 1


def test_load_profiles_builds_single_batch():
    ctx = LoadProfiles(SampleProfilesSource()).run(RunContext())
    assert len(ctx.batches) == 1
    assert ctx.batches[0].file_name == "sample"
    assert ctx.batches[0].import_type == "json"
    assert len(ctx.profiles) == 2
    assert ctx.meta["source"] == "sample"
    assert "fetch_errors" not in ctx.meta


def test_full_import_pipeline_logs_each_file(tmp_path, store):
    csv_path = tmp_path / "people.csv"
    csv_path.write_text(
        "linkedin_id,full_name,profile_url\n"
        "ann,Ann Lee,https://linkedin.com/in/ann\n"
        ",Nobody,https://linkedin.com/in/nobody\n",
        encoding="utf-8",
    )
    json_path = tmp_path / "people.json"
    json_path.write_text(json.dumps(SAMPLE_PROFILES), encoding="utf-8")
    broken = tmp_path / "broken.csv"
    broken.write_text("linkedin_id\n", encoding="utf-8")

    pipeline = Pipeline([
        ParseProfileFiles([csv_path, json_path, broken]),
        ProcessProfiles(EtlEngine(store), run_kind="full"),
        LogImports(store),
    ])
    ctx = pipeline.run(RunContext())

    run = ctx.summary.run
    assert run.status == "completed"
    assert run.run_type == "full"
    assert run.counters.added == 3
    assert run.metadata["sources"] == ["people.csv", "people.json", "broken.csv"]
    assert run.metadata["files_failed"] == 1
    assert ctx.meta["run_id"] == run.id
    assert ctx.meta["imports_logged"] == 3

    logs = {e.file_name: e for e in store.list_imports(10)}
    assert (logs["people.csv"].total_records, logs["people.csv"].successful_records) == (1, 1)
    assert (logs["people.json"].total_records, logs["people.json"].successful_records) == (2, 2)
    assert logs["broken.csv"].total_records == 0
    assert logs["broken.csv"].error_message == "broken.csv: CSV file is empty"


def test_import_log_counts_invalid_records_as_failed(tmp_path, store):
    path = tmp_path / "mixed.json"
    bad = dict(SAMPLE_PROFILES[1], profile_url="not-a-url")
    path.write_text(json.dumps([SAMPLE_PROFILES[0], bad]), encoding="utf-8")

    ctx = Pipeline([
        ParseProfileFiles([path]),
        ProcessProfiles(EtlEngine(store)),
        LogImports(store),
    ]).run(RunContext())

    assert ctx.summary.run.counters.added == 2
    assert ctx.summary.run.counters.validation_failures == 1
    entry = store.list_imports(1)[0]
    assert (entry.total_records, entry.successful_records, entry.failed_records) == (2, 1, 1)
