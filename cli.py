import argparse
import json
from datetime import datetime, timezone
from pathlib import Path

from config.settings import get_settings
from db.store import SqliteProfileStore
from pipelines.etl_engine import EtlEngine
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import LoadProfiles, LogImports, ParseProfileFiles, ProcessProfiles
from services.export import export_csv, export_json
from services.profile_validator import ProfileValidator
from services.reporting import format_run_line, print_summary, print_validation_stats
from sources.registry import get_source
from utils.logging_setup import init_logging
import sources  # noqa: F401 ensure registration


def _open_store(args) -> SqliteProfileStore:
    return SqliteProfileStore.open(args.db)


def _build_engine(store: SqliteProfileStore) -> EtlEngine:
    settings = get_settings()
    validator = ProfileValidator(
        max_headline_length=settings.max_headline_length,
        max_summary_length=settings.max_summary_length,
        max_connections=settings.max_connections,
    )
    return EtlEngine(store, validator=validator)


def _finish(ctx: RunContext, args) -> None:
    print_summary(ctx.summary, fetch_errors=ctx.meta.get("fetch_errors"), show_records=getattr(args, "verbose", False))
    if not ctx.summary.succeeded:
        raise SystemExit(1)


def cmd_bootstrap(args):
    store = _open_store(args)
    store.close()
    print("Schema ready")


def cmd_import(args):
    store = _open_store(args)
    try:
        pipeline = Pipeline([
            ParseProfileFiles(args.input),
            ProcessProfiles(_build_engine(store), run_kind=args.kind),
            LogImports(store),
        ])
        ctx = pipeline.run(RunContext())
    finally:
        store.close()
    for batch in ctx.batches:
        if batch.error:
            print(f"Skipped {batch.file_name}: {batch.error}")
        else:
            print(f"Parsed {len(batch.profiles)} profiles from {batch.file_name}")
    _finish(ctx, args)


def cmd_fetch(args):
    store = _open_store(args)
    try:
        source = get_source("api", urls=args.url)
        pipeline = Pipeline([
            LoadProfiles(source),
            ProcessProfiles(_build_engine(store), run_kind=args.kind),
            LogImports(store),
        ])
        ctx = pipeline.run(RunContext())
    finally:
        store.close()
    _finish(ctx, args)


def cmd_sample(args):
    store = _open_store(args)
    try:
        pipeline = Pipeline([
            LoadProfiles(get_source("sample")),
            ProcessProfiles(_build_engine(store), run_kind=args.kind),
        ])
        ctx = pipeline.run(RunContext())
    finally:
        store.close()
    _finish(ctx, args)


def cmd_runs(args):
    store = _open_store(args)
    try:
        runs = store.list_runs(args.limit)
    finally:
        store.close()
    if not runs:
        print("No runs recorded")
        return
    for run in runs:
        print(format_run_line(run))


def cmd_run_changes(args):
    store = _open_store(args)
    try:
        changes = store.list_changes(run_id=args.run_id)
    finally:
        store.close()
    out = [c.model_dump(mode="json") for c in changes]
    print(json.dumps(out, indent=2, ensure_ascii=False))


def cmd_report_profile(args):
    store = _open_store(args)
    try:
        profile = store.get(args.linkedin_id)
        changes = store.list_changes(profile_id=profile.id) if profile else []
    finally:
        store.close()
    if not profile:
        print("No record found for profile")
        return
    result = profile.model_dump(mode="json")
    result["changes"] = [c.model_dump(mode="json") for c in changes]
    print(json.dumps(result, indent=2, ensure_ascii=False))


def cmd_stats(args):
    store = _open_store(args)
    try:
        counts = store.validation_counts()
        imports = store.list_imports(args.limit)
    finally:
        store.close()
    print_validation_stats(counts)
    if imports:
        print("Recent imports:")
        for entry in imports:
            status = f" error={entry.error_message!r}" if entry.error_message else ""
            print(
                f"  {entry.import_type} {entry.file_name}: total={entry.total_records} "
                f"ok={entry.successful_records} failed={entry.failed_records}{status}"
            )


def cmd_export(args):
    store = _open_store(args)
    try:
        profiles = store.list_profiles()
    finally:
        store.close()
    if not profiles:
        print("No profiles to export yet. Import some data first.")
        return
    settings = get_settings()
    output = args.output
    if not output:
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        output = str(Path(settings.export_dir) / f"linkedin-profiles-{stamp}.{args.format}")
    path = Path(output)
    if args.format == "csv":
        count = export_csv(profiles, path)
    else:
        count = export_json(profiles, path)
    print(f"Exported {count} profiles to {path}")


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="LinkedIn profile ETL CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    def _add_run_flags(p):
        p.add_argument("--kind", choices=["full", "incremental"], default=settings.default_run_kind, help="Run type recorded on the ETL run")
        p.add_argument("--verbose", "-v", action="store_true", help="Print the outcome of every record")

    p_imp = sub.add_parser("import", help="Import profiles from CSV/JSON files as one ETL run")
    p_imp.add_argument("--input", "-i", nargs="+", required=True, help="Paths to .csv or .json files")
    _add_run_flags(p_imp)
    p_imp.set_defaults(func=cmd_import)

    p_fetch = sub.add_parser("fetch", help="Fetch profiles from the profile API and run ETL on them")
    p_fetch.add_argument("--url", "-u", action="append", required=True, help="LinkedIn profile URL (repeatable)")
    _add_run_flags(p_fetch)
    p_fetch.set_defaults(func=cmd_fetch)

    p_sample = sub.add_parser("sample", help="Run ETL over built-in sample profiles")
    _add_run_flags(p_sample)
    p_sample.set_defaults(func=cmd_sample)

    p_runs = sub.add_parser("runs", help="List recent ETL runs, newest first")
    p_runs.add_argument("--limit", type=int, default=settings.runs_list_limit)
    p_runs.set_defaults(func=cmd_runs)

    p_rc = sub.add_parser("run-changes", help="Show field changes recorded by a run")
    p_rc.add_argument("--run-id", type=int, required=True)
    p_rc.set_defaults(func=cmd_run_changes)

    p_rp = sub.add_parser("report-profile", help="Show a stored profile with its change history")
    p_rp.add_argument("--linkedin-id", required=True)
    p_rp.set_defaults(func=cmd_report_profile)

    p_stats = sub.add_parser("stats", help="Validation status totals and recent imports")
    p_stats.add_argument("--limit", type=int, default=5, help="Number of recent imports to show")
    p_stats.set_defaults(func=cmd_stats)

    p_exp = sub.add_parser("export", help="Export stored profiles")
    p_exp.add_argument("--format", choices=["json", "csv"], default="json")
    p_exp.add_argument("--output", "-o", default=None, help="Output path (default: EXPORT_DIR/linkedin-profiles-<date>.<format>)")
    p_exp.set_defaults(func=cmd_export)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
