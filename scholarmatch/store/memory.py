from __future__ import annotations

from typing import Iterable, Optional

from scholarmatch.normalize.schema import SavedScholarship, UserProfile
from scholarmatch.store.base import ProfileStore, SavedScholarshipStore


class InMemorySavedScholarshipStore(SavedScholarshipStore):
    def __init__(self, records: Iterable[SavedScholarship] = ()) -> None:
        self._records: dict[tuple[str, str], SavedScholarship] = {}
        for record in records:
            self._records[record.key] = record

    def get(self, user_id: str, scholarship_id: str) -> Optional[SavedScholarship]:
        return self._records.get((scholarship_id, user_id))

    def put(self, record: SavedScholarship) -> None:
        self._records[record.key] = record

    def delete(self, user_id: str, scholarship_id: str) -> bool:
        return self._records.pop((scholarship_id, user_id), None) is not None

    def list_for_user(self, user_id: str) -> list[SavedScholarship]:
        return [record for record in self._records.values() if record.user_id == user_id]

    def all_records(self) -> list[SavedScholarship]:
        return list(self._records.values())


class InMemoryProfileStore(ProfileStore):
    def __init__(self, profiles: Iterable[UserProfile] = ()) -> None:
        self._profiles: dict[str, UserProfile] = {}
        for profile in profiles:
            self.put(profile)

    def get(self, user_id: str) -> Optional[UserProfile]:
        return self._profiles.get(user_id)

    def put(self, profile: UserProfile) -> None:
        if not profile.user_id:
            raise ValueError("Stored profiles require a userId.")
        self._profiles[profile.user_id] = profile
