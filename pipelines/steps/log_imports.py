from __future__ import annotations

import logging

from db.store import SqliteProfileStore
from models.import_log import ImportLogEntry
from pipelines.runner import RunContext
from services.errors import StoreUnavailable


logger = logging.getLogger(__name__)


class LogImports:
    """Write one import-log row per file or fetch request.

    Outcomes are attributed back to their batch by position, since the run
    processes the concatenated batches in order.
    """

    def __init__(self, store: SqliteProfileStore) -> None:
        self.store = store

    def run(self, ctx: RunContext) -> RunContext:
        outcomes = ctx.summary.outcomes if ctx.summary else []
        offset = 0
        logged = 0
        for batch in ctx.batches:
            window = outcomes[offset:offset + len(batch.profiles)]
            offset += len(batch.profiles)
            # Stored records that failed validation count as failed imports
            successful = sum(1 for o in window if o.outcome is not None and o.validation_status == "valid")
            entry = ImportLogEntry(
                import_type=batch.import_type,
                file_name=batch.file_name,
                total_records=len(batch.profiles),
                successful_records=successful,
                failed_records=len(batch.profiles) - successful,
                error_message=batch.error,
            )
            try:
                self.store.log_import(entry)
                logged += 1
            except StoreUnavailable as e:
                logger.error("import log write failed", extra={"step": "log_imports", "status": "error", "error": str(e)})
                break
        ctx.meta["imports_logged"] = logged
        return ctx
