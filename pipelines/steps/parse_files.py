from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pipelines.runner import ImportBatch, RunContext
from services.errors import MalformedInput
from sources.files import SUPPORTED_SUFFIXES, parse_profile_file


logger = logging.getLogger(__name__)


class ParseProfileFiles:
    """Parse each file into profiles; a malformed file is recorded and skipped."""

    def __init__(self, paths: Iterable[str | Path]) -> None:
        self.paths = [Path(p) for p in paths]

    def run(self, ctx: RunContext) -> RunContext:
        failed = 0
        for path in self.paths:
            import_type = SUPPORTED_SUFFIXES.get(path.suffix.lower(), "json")
            batch = ImportBatch(import_type=import_type, file_name=path.name)
            try:
                batch.profiles = parse_profile_file(path)
            except MalformedInput as e:
                batch.error = str(e)
                failed += 1
                logger.error(
                    "file could not be parsed",
                    extra={"step": "parse_files", "status": "malformed", "error": str(e)},
                )
            ctx.batches.append(batch)
            ctx.profiles.extend(batch.profiles)
        ctx.meta["files_total"] = len(self.paths)
        ctx.meta["files_failed"] = failed
        return ctx
