from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List

from models.stored_profile import StoredProfile


CSV_HEADERS: List[str] = [
    "linkedin_id",
    "full_name",
    "headline",
    "location",
    "summary",
    "skills",
    "connections_count",
    "profile_url",
    "validation_status",
    "updated_at",
]


def export_json(profiles: Iterable[StoredProfile], path: Path) -> int:
    """Write stored profiles as a pretty-printed JSON array; returns the count."""
    rows = [p.model_dump(mode="json") for p in profiles]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")
    return len(rows)


def export_csv(profiles: Iterable[StoredProfile], path: Path) -> int:
    """Write the flat profile columns as CSV, every cell quoted; skills are ';'-joined."""
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL)
        writer.writerow(CSV_HEADERS)
        for p in profiles:
            writer.writerow([
                p.linkedin_id,
                p.full_name,
                p.headline or "",
                p.location or "",
                p.summary or "",
                ";".join(p.skills),
                p.connections_count if p.connections_count is not None else "",
                p.profile_url,
                p.validation_status,
                p.updated_at.isoformat() if p.updated_at else "",
            ])
            count += 1
    return count
