from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import Callable, Optional

from scholarmatch.normalize.schema import SavedScholarship, ScholarshipStatus
from scholarmatch.store.base import SavedScholarshipStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class SavedScholarshipTracker:
    """A user's saved scholarships and their application status.

    Operations for a missing user (`None` or empty id) are no-ops that report
    failure. Status changes are unordered: any status may follow any other.
    """

    def __init__(
        self,
        store: SavedScholarshipStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    def save(self, user_id: Optional[str], scholarship_id: str, *, notes: Optional[str] = None) -> bool:
        if not user_id:
            logger.info("Save of scholarship %s rejected: no signed-in user", scholarship_id)
            return False
        if self._store.get(user_id, scholarship_id) is not None:
            logger.info("Scholarship %s already saved for user %s", scholarship_id, user_id)
            return False

        record = SavedScholarship(
            scholarship_id=scholarship_id,
            user_id=user_id,
            date_added=self._clock(),
            status=ScholarshipStatus.PLANNING,
            notes=notes,
        )
        self._store.put(record)
        logger.info("Saved scholarship %s for user %s", scholarship_id, user_id)
        return True

    def remove(self, user_id: Optional[str], scholarship_id: str) -> bool:
        if not user_id:
            return False
        removed = self._store.delete(user_id, scholarship_id)
        if removed:
            logger.info("Removed scholarship %s for user %s", scholarship_id, user_id)
        return removed

    def update_status(
        self, user_id: Optional[str], scholarship_id: str, status: ScholarshipStatus | str
    ) -> bool:
        if not user_id:
            return False
        resolved = ScholarshipStatus(status)
        record = self._store.get(user_id, scholarship_id)
        if record is None:
            return False

        self._store.put(replace(record, status=resolved))
        logger.info(
            "Scholarship %s status for user %s: %s -> %s",
            scholarship_id,
            user_id,
            record.status.value,
            resolved.value,
        )
        return True

    def update_notes(self, user_id: Optional[str], scholarship_id: str, notes: Optional[str]) -> bool:
        if not user_id:
            return False
        record = self._store.get(user_id, scholarship_id)
        if record is None:
            return False
        cleaned = notes.strip() if notes else None
        self._store.put(replace(record, notes=cleaned or None))
        return True

    def is_saved(self, user_id: Optional[str], scholarship_id: str) -> bool:
        if not user_id:
            return False
        return self._store.get(user_id, scholarship_id) is not None

    def saved_ids(self, user_id: Optional[str]) -> list[str]:
        return [record.scholarship_id for record in self.list_saved(user_id)]

    def get_status(self, user_id: Optional[str], scholarship_id: str) -> Optional[ScholarshipStatus]:
        if not user_id:
            return None
        record = self._store.get(user_id, scholarship_id)
        return record.status if record is not None else None

    def list_saved(self, user_id: Optional[str]) -> list[SavedScholarship]:
        if not user_id:
            return []
        return self._store.list_for_user(user_id)
