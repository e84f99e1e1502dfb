from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.hasher'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    # Settings are cached; tests monkeypatch env between calls
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store(tmp_path):
    from db.store import SqliteProfileStore
    s = SqliteProfileStore.open(str(tmp_path / "t.db"))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def make_profile():
    from models.raw_profile import RawProfile

    def _make(**overrides):
        data = {
            "linkedin_id": "jane-smith",
            "full_name": "Jane Smith",
            "headline": "PM",
            "location": "New York, NY",
            "summary": "Builds products.",
            "experience": [{"company": "AI Innovations", "title": "Product Manager", "start_date": "2019-06"}],
            "education": [{"school": "MIT", "degree": "MBA", "start_year": 2015, "end_year": 2017}],
            "skills": ["AI"],
            "connections_count": 500,
            "profile_url": "https://linkedin.com/in/jane-smith",
        }
        data.update(overrides)
        return RawProfile.model_validate(data)

    return _make
