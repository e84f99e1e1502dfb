from __future__ import annotations

from datetime import datetime, timezone

import pytest

from models.stored_profile import StoredProfile
from services.change_classifier import ChangeClassifier
from services.errors import ClassificationError
from services.hasher import ProfileHasher


def _stored(raw, profile_id=7):
    return StoredProfile.model_validate({
        **raw.model_dump(),
        "id": profile_id,
        "data_hash": ProfileHasher().fingerprint(raw),
        "validation_status": "valid",
    })


def test_new_profile_is_added_with_empty_diff(make_profile):
    result = ChangeClassifier().classify(make_profile(), None)
    assert result.outcome == "added"
    assert result.diff == []
    assert result.new_fingerprint == ProfileHasher().fingerprint(make_profile())


def test_same_content_is_unchanged(make_profile):
    raw = make_profile()
    result = ChangeClassifier().classify(raw, _stored(raw))
    assert result.outcome == "unchanged"
    assert result.diff == []


def test_added_skill_produces_single_field_change(make_profile):
    old = make_profile(skills=["AI"])
    new = make_profile(skills=["AI", "ML"])
    now = datetime(2026, 1, 2, tzinfo=timezone.utc)
    result = ChangeClassifier().classify(new, _stored(old), run_id=3, now=now)

    assert result.outcome == "updated"
    assert result.new_fingerprint != _stored(old).data_hash
    assert len(result.diff) == 1
    change = result.diff[0]
    assert change.field_name == "skills"
    assert change.old_value == '["AI"]'
    assert change.new_value == '["AI","ML"]'
    assert change.profile_id == 7
    assert change.etl_run_id == 3
    assert change.changed_at == now


def test_scalar_changes_are_stringified(make_profile):
    old = make_profile(connections_count=500, headline=None)
    new = make_profile(connections_count=501, headline="Director")
    result = ChangeClassifier().classify(new, _stored(old))
    diffs = {c.field_name: (c.old_value, c.new_value) for c in result.diff}
    assert diffs == {"connections_count": ("500", "501"), "headline": ("", "Director")}


def test_classification_is_idempotent(make_profile):
    classifier = ChangeClassifier()
    raw = make_profile(skills=["Go"])
    previous = _stored(make_profile())
    first = classifier.classify(raw, previous)
    second = classifier.classify(raw, previous)
    assert first.outcome == second.outcome == "updated"
    assert first.new_fingerprint == second.new_fingerprint
    assert first.changed_fields == second.changed_fields == ["skills"]


def test_image_url_change_does_not_change_outcome(make_profile):
    old = make_profile(profile_image_url="https://img.example/a.jpg")
    new = make_profile(profile_image_url="https://img.example/b.jpg")
    classifier = ChangeClassifier()
    result = classifier.classify(new, _stored(old))
    assert result.outcome == "unchanged"

    images = classifier.image_changes(new, _stored(old))
    assert [(i.image_type, i.image_url) for i in images] == [("profile_photo", "https://img.example/b.jpg")]


def test_image_changes_for_new_and_same_urls(make_profile):
    classifier = ChangeClassifier()
    raw = make_profile(profile_image_url="https://img.example/a.jpg", banner_image_url="https://img.example/bn.jpg")
    assert [i.image_type for i in classifier.image_changes(raw, None)] == ["profile_photo", "banner"]
    assert classifier.image_changes(raw, _stored(raw)) == []


def test_fingerprint_failure_raises_classification_error(make_profile):
    class _BrokenHasher(ProfileHasher):
        def fingerprint(self, profile):
            raise TypeError("not serializable")

    with pytest.raises(ClassificationError):
        ChangeClassifier(hasher=_BrokenHasher()).classify(make_profile(), None)
