from __future__ import annotations

from pathlib import Path

from scholarmatch.io.jsonfiles import read_json_file, write_json_atomic
from scholarmatch.normalize.schema import SavedScholarship
from scholarmatch.store.memory import InMemorySavedScholarshipStore


class JsonFileSavedScholarshipStore(InMemorySavedScholarshipStore):
    """Saved scholarships held in memory and rewritten atomically to a JSON file on every change."""

    def __init__(self, path: Path) -> None:
        self._path = path
        records: list[SavedScholarship] = []
        if path.exists():
            payload = read_json_file(path)
            if not isinstance(payload, list):
                raise ValueError(f"Saved scholarship file must contain a JSON list: {path}")
            records = [SavedScholarship.from_mapping(item) for item in payload]
        super().__init__(records)

    @property
    def path(self) -> Path:
        return self._path

    def put(self, record: SavedScholarship) -> None:
        super().put(record)
        self._flush()

    def delete(self, user_id: str, scholarship_id: str) -> bool:
        removed = super().delete(user_id, scholarship_id)
        if removed:
            self._flush()
        return removed

    def _flush(self) -> None:
        write_json_atomic([record.to_dict() for record in self.all_records()], self._path)
