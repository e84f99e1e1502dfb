from __future__ import annotations

import threading
from typing import Optional

from models.etl_run import RunKind
from pipelines.etl_engine import EtlEngine
from pipelines.runner import RunContext


class ProcessProfiles:
    def __init__(self, engine: EtlEngine, run_kind: RunKind = "incremental", cancel_event: Optional[threading.Event] = None) -> None:
        self.engine = engine
        self.run_kind = run_kind
        self.cancel_event = cancel_event

    def run(self, ctx: RunContext) -> RunContext:
        metadata = {
            "sources": [b.file_name for b in ctx.batches],
        }
        if ctx.meta.get("files_failed"):
            metadata["files_failed"] = ctx.meta["files_failed"]
        ctx.summary = self.engine.process_batch(
            ctx.profiles,
            run_kind=self.run_kind,
            cancel_event=self.cancel_event,
            metadata=metadata,
        )
        ctx.meta["run_id"] = ctx.summary.run.id
        ctx.meta["run_status"] = ctx.summary.run.status
        return ctx
