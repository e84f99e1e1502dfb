"""
CSV and JSON profile files.

CSV columns are mapped by header name:
linkedin_id, full_name, headline, location, summary, experience (JSON),
education (JSON), skills (semicolon-joined), connections_count, profile_url,
profile_image_url, banner_image_url.
"""
from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.raw_profile import RawProfile
from services.errors import MalformedInput
from sources.base import ProfileSource, has_required_keys, to_raw_profile
from sources.registry import register
from utils.number_parsing import parse_int_shorthand


logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".csv": "csv", ".json": "json"}


def _json_cell(value: str, column: str, file_name: Optional[str]) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"column {column!r} is not valid JSON: {e.msg}", file_name) from e


def _map_csv_row(row: Dict[str, str], file_name: Optional[str]) -> Optional[RawProfile]:
    values = {k: v.strip() for k, v in row.items() if k and isinstance(v, str) and v.strip()}
    if not has_required_keys(values):
        return None

    skills_text = values.get("skills")
    mapped: Dict[str, Any] = {
        "linkedin_id": values["linkedin_id"],
        "full_name": values["full_name"],
        "headline": values.get("headline", ""),
        "location": values.get("location", ""),
        "summary": values.get("summary", ""),
        "experience": _json_cell(values["experience"], "experience", file_name) if "experience" in values else [],
        "education": _json_cell(values["education"], "education", file_name) if "education" in values else [],
        "skills": [s.strip() for s in skills_text.split(";") if s.strip()] if skills_text else [],
        "connections_count": parse_int_shorthand(values.get("connections_count")) or 0,
        "profile_url": values["profile_url"],
        "profile_image_url": values.get("profile_image_url"),
        "banner_image_url": values.get("banner_image_url"),
    }
    return to_raw_profile(mapped, file_name)


def parse_csv_text(text: str, file_name: Optional[str] = None) -> List[RawProfile]:
    """Parse CSV text into profiles; rows missing id, name or URL are dropped."""
    if len(text.strip().splitlines()) < 2:
        raise MalformedInput("CSV file is empty", file_name)

    reader = csv.DictReader(io.StringIO(text.strip()))
    reader.fieldnames = [(h or "").strip().lower() for h in (reader.fieldnames or [])]
    profiles: List[RawProfile] = []
    dropped = 0
    try:
        for row in reader:
            profile = _map_csv_row(row, file_name)
            if profile is None:
                dropped += 1
                continue
            profiles.append(profile)
    except csv.Error as e:
        raise MalformedInput(f"CSV parse error on line {reader.line_num}: {e}", file_name) from e
    if dropped:
        logger.info(f"Dropped {dropped} CSV rows without linkedin_id/full_name/profile_url", extra={"step": "parse_csv"})
    return profiles


def parse_json_text(text: str, file_name: Optional[str] = None) -> List[RawProfile]:
    """Parse a JSON array (or single object) of profiles; incomplete entries are dropped."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInput("Invalid JSON format", file_name) from e

    entries = data if isinstance(data, list) else [data]
    profiles: List[RawProfile] = []
    for entry in entries:
        if not isinstance(entry, dict) or not has_required_keys(entry):
            continue
        profiles.append(to_raw_profile(entry, file_name))
    dropped = len(entries) - len(profiles)
    if dropped:
        logger.info(f"Dropped {dropped} JSON entries without linkedin_id/full_name/profile_url", extra={"step": "parse_json"})
    return profiles


def parse_profile_file(path: Path) -> List[RawProfile]:
    """Parse a .csv or .json file; any other suffix is rejected."""
    path = Path(path)
    kind = SUPPORTED_SUFFIXES.get(path.suffix.lower())
    if kind is None:
        raise MalformedInput(f"Unsupported file type: {path.name}", path.name)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedInput(f"cannot read file: {e}", path.name) from e
    if kind == "csv":
        return parse_csv_text(text, path.name)
    return parse_json_text(text, path.name)


class CsvFileSource(ProfileSource):
    source_name = "csv"
    import_type = "csv"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> List[RawProfile]:
        return parse_profile_file(self.path)


class JsonFileSource(ProfileSource):
    source_name = "json"
    import_type = "json"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> List[RawProfile]:
        return parse_profile_file(self.path)


def source_for_file(path: str | Path) -> ProfileSource:
    kind = SUPPORTED_SUFFIXES.get(Path(path).suffix.lower())
    if kind == "csv":
        return CsvFileSource(path)
    if kind == "json":
        return JsonFileSource(path)
    raise MalformedInput(f"Unsupported file type: {Path(path).name}", Path(path).name)


def _register():
    register(CsvFileSource.source_name, CsvFileSource)
    register(JsonFileSource.source_name, JsonFileSource)


_register()
