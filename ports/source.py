from __future__ import annotations

from typing import List, Protocol

from models.import_log import ImportType
from models.raw_profile import RawProfile


class RecordSourcePort(Protocol):
    source_name: str
    import_type: ImportType

    def load(self) -> List[RawProfile]:
        ...
