from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from scholarmatch.normalize.schema import SavedScholarship, UserProfile


class SavedScholarshipStore(ABC):
    """Persistence for saved-scholarship records keyed by (scholarship_id, user_id)."""

    @abstractmethod
    def get(self, user_id: str, scholarship_id: str) -> Optional[SavedScholarship]:
        """Return the record for the pair, if saved."""

    @abstractmethod
    def put(self, record: SavedScholarship) -> None:
        """Insert or replace a record, keeping its original position on replace."""

    @abstractmethod
    def delete(self, user_id: str, scholarship_id: str) -> bool:
        """Remove the record; return whether one existed."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[SavedScholarship]:
        """Records for `user_id` in insertion order."""


class ProfileStore(ABC):
    @abstractmethod
    def get(self, user_id: str) -> Optional[UserProfile]:
        """Return the stored profile for `user_id`, if any."""

    @abstractmethod
    def put(self, profile: UserProfile) -> None:
        """Insert or replace a profile; `profile.user_id` must be set."""
