from __future__ import annotations

from typing import Dict, List, Optional

from models.etl_run import EtlRun
from models.run_summary import RunSummary


def format_run_line(run: EtlRun) -> str:
    c = run.counters
    completed = run.completed_at.strftime("%Y-%m-%d %H:%M:%S") if run.completed_at else "-"
    line = (
        f"#{run.id} {run.run_type:<11} {run.status:<9} started={run.started_at.strftime('%Y-%m-%d %H:%M:%S')} "
        f"completed={completed} processed={c.processed} added={c.added} updated={c.updated} "
        f"unchanged={c.unchanged} images={c.images_processed} validation_failures={c.validation_failures}"
    )
    if run.error_message:
        line += f" error={run.error_message!r}"
    return line


def print_summary(summary: RunSummary, fetch_errors: Optional[List[Dict[str, str]]] = None, show_records: bool = False) -> None:
    """Print summary of one ETL run."""
    run = summary.run
    c = run.counters

    print("\n" + "="*60)
    print("LINKEDIN PROFILE ETL - RUN SUMMARY")
    print("="*60)
    print(f"Run ID: {run.id}")
    print(f"Run Type: {run.run_type}")
    print(f"Status: {run.status}")
    print(f"Started At: {run.started_at.isoformat()}")
    print(f"Completed At: {run.completed_at.isoformat() if run.completed_at else 'N/A'}")
    print()
    print("Profile Statistics:")
    print(f"  Processed: {c.processed}")
    print(f"  Added: {c.added}")
    print(f"  Updated: {c.updated}")
    print(f"  Unchanged: {c.unchanged}")
    print(f"  Images Processed: {c.images_processed}")
    print(f"  Validation Failures: {c.validation_failures}")
    if run.error_message:
        print()
        print(f"Error: {run.error_message}")
    if not summary.persisted:
        print()
        print("Warning: final run state could not be saved; the stored run may still show as running")
    if fetch_errors:
        print()
        print("Fetch Errors:")
        for err in fetch_errors:
            print(f"  {err.get('url')}: {err.get('error')}")
    if show_records and summary.outcomes:
        print()
        print("Records:")
        for o in summary.outcomes:
            verdict = o.outcome or f"skipped ({o.error})"
            changed = f" fields={','.join(o.changed_fields)}" if o.changed_fields else ""
            print(f"  {o.linkedin_id or '<no id>'}: {verdict} [{o.validation_status}]{changed}")
    print("="*60)


def print_validation_stats(counts: Dict[str, int]) -> None:
    print(f"Total profiles: {counts.get('total', 0)}")
    print(f"  Valid: {counts.get('valid', 0)}")
    print(f"  Invalid: {counts.get('invalid', 0)}")
    print(f"  Pending: {counts.get('pending', 0)}")
