from __future__ import annotations

from pipelines.runner import ImportBatch, RunContext
from ports.source import RecordSourcePort


class LoadProfiles:
    """Pull profiles from a record source (fetch API, sample data) into the context."""

    def __init__(self, source: RecordSourcePort) -> None:
        self.source = source

    def run(self, ctx: RunContext) -> RunContext:
        profiles = self.source.load()
        batch = ImportBatch(
            import_type=self.source.import_type,
            file_name=self.source.source_name,
            profiles=list(profiles),
        )
        errors = getattr(self.source, "errors", None)
        if errors:
            ctx.meta["fetch_errors"] = list(errors)
        ctx.batches.append(batch)
        ctx.profiles.extend(batch.profiles)
        ctx.meta["source"] = self.source.source_name
        return ctx
