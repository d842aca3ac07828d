from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from scholarmatch.io.jsonfiles import read_json_file

DEFAULT_MIN_SCORE = 50
DEADLINE_WINDOW_DAYS = 30


@dataclass(frozen=True, slots=True)
class RecommendationPolicy:
    """Caller-level policy for `recommend`.

    `min_score` is an exclusive threshold. `require_eligibility` drops scholarships
    that fail any hard constraint before thresholding; by default the match score
    is the only signal.
    """

    min_score: int = DEFAULT_MIN_SCORE
    require_eligibility: bool = False
    limit: int | None = None

    def __post_init__(self) -> None:
        if isinstance(self.min_score, bool) or not isinstance(self.min_score, int):
            raise ValueError("Recommendation 'min_score' must be an integer.")
        if self.min_score < 0 or self.min_score > 100:
            raise ValueError("Recommendation 'min_score' must be between 0 and 100.")
        if self.limit is not None and self.limit < 1:
            raise ValueError("Recommendation 'limit' must be a positive integer when set.")

    @classmethod
    def baseline(cls) -> RecommendationPolicy:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> RecommendationPolicy:
        values = payload or {}
        baseline = cls.baseline()
        limit = values.get("limit", baseline.limit)
        min_score = float(values.get("min_score", baseline.min_score))
        if not math.isfinite(min_score) or not min_score.is_integer():
            raise ValueError("Recommendation 'min_score' must be a whole number.")
        return cls(
            min_score=int(min_score),
            require_eligibility=bool(values.get("require_eligibility", baseline.require_eligibility)),
            limit=int(limit) if limit is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_score": self.min_score,
            "require_eligibility": self.require_eligibility,
            "limit": self.limit,
        }


def load_policy(config_path: Path | None) -> RecommendationPolicy:
    if config_path is None:
        return RecommendationPolicy.baseline()
    payload = read_json_file(config_path)
    if not isinstance(payload, dict):
        raise ValueError(f"Policy config must contain a JSON object: {config_path}")
    return RecommendationPolicy.from_mapping(payload.get("recommendation", payload))
