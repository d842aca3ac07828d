from __future__ import annotations

import pytest

from scholarmatch.normalize.schema import StudyLevel
from scholarmatch.store.memory import InMemoryProfileStore
from scholarmatch.store.profiles import update_profile


def test_update_profile_creates_with_defaults() -> None:
    store = InMemoryProfileStore()

    profile = update_profile(store, "user-9", {"academicInfo": {"gpa": 3.3}})

    assert profile.user_id == "user-9"
    assert profile.academic_info.gpa == 3.3
    assert profile.academic_info.study_level == StudyLevel.UNDERGRADUATE
    assert profile.academic_info.major is None
    assert store.get("user-9") == profile


def test_update_profile_merges_sections_key_by_key() -> None:
    store = InMemoryProfileStore()
    update_profile(
        store,
        "user-9",
        {
            "academicInfo": {"gpa": 3.3, "major": "Physics", "studyLevel": "Graduate"},
            "personalInfo": {"citizenship": "Norway", "extracurriculars": ["Chess"]},
        },
    )

    updated = update_profile(store, "user-9", {"academicInfo": {"gpa": 3.7}})

    assert updated.academic_info.gpa == 3.7
    assert updated.academic_info.major == "Physics"
    assert updated.academic_info.study_level == StudyLevel.GRADUATE
    assert updated.personal_info.citizenship == "Norway"
    assert updated.personal_info.extracurriculars == ("Chess",)


def test_update_profile_rejects_invalid_gpa_and_keeps_previous() -> None:
    store = InMemoryProfileStore()
    original = update_profile(store, "user-9", {"academicInfo": {"gpa": 3.0}})

    with pytest.raises(ValueError):
        update_profile(store, "user-9", {"academicInfo": {"gpa": 5.0}})

    assert store.get("user-9") == original


def test_update_profile_requires_user_id() -> None:
    with pytest.raises(ValueError):
        update_profile(InMemoryProfileStore(), "", {})
