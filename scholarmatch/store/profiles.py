from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from scholarmatch.normalize.schema import StudyLevel, UserProfile
from scholarmatch.store.base import ProfileStore

logger = logging.getLogger(__name__)


def _default_profile_payload() -> dict[str, Any]:
    return {
        "academicInfo": {
            "gpa": 0.0,
            "major": "",
            "studyLevel": StudyLevel.UNDERGRADUATE.value,
        },
        "personalInfo": {"citizenship": ""},
    }


def merge_profile_patch(
    existing: Optional[UserProfile], patch: Mapping[str, Any], *, user_id: str
) -> UserProfile:
    """Merge a partial camelCase profile payload over `existing` (or defaults)."""
    base = existing.to_dict() if existing is not None else _default_profile_payload()
    merged: dict[str, Any] = {"userId": user_id}
    for section in ("academicInfo", "personalInfo"):
        section_patch = patch.get(section) or {}
        if not isinstance(section_patch, Mapping):
            raise ValueError(f"Profile '{section}' must be an object.")
        merged[section] = {**base.get(section, {}), **section_patch}
    return UserProfile.from_mapping(merged)


def update_profile(store: ProfileStore, user_id: str, patch: Mapping[str, Any]) -> UserProfile:
    if not user_id:
        raise ValueError("Profile updates require a userId.")
    existing = store.get(user_id)
    profile = merge_profile_patch(existing, patch, user_id=user_id)
    store.put(profile)
    logger.info("%s profile for user %s", "Updated" if existing else "Created", user_id)
    return profile
