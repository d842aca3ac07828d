from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd

from scholarmatch.io.catalog import scholarships_to_frame
from scholarmatch.normalize.schema import Scholarship, UserProfile
from scholarmatch.rank.policy import RecommendationPolicy
from scholarmatch.rank.stage2_scoring import score_catalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Recommendation:
    scholarship: Scholarship
    score: Optional[int]

    def to_dict(self) -> dict:
        return {"scholarship": self.scholarship.to_dict(), "score": self.score}


def featured_scholarships(scholarships: Iterable[Scholarship]) -> list[Scholarship]:
    return [scholarship for scholarship in scholarships if scholarship.featured]


def rank_catalog(
    catalog_df: pd.DataFrame,
    profile: UserProfile,
    policy: RecommendationPolicy | None = None,
) -> pd.DataFrame:
    active_policy = policy or RecommendationPolicy.baseline()
    ranked_df = score_catalog(catalog_df, profile)

    if active_policy.require_eligibility:
        ranked_df = ranked_df[ranked_df["is_eligible"]]
    ranked_df = ranked_df[ranked_df["match_score"] > active_policy.min_score]

    # mergesort keeps catalog order among equal scores.
    ranked_df = ranked_df.sort_values(by="match_score", ascending=False, kind="mergesort")
    if active_policy.limit is not None:
        ranked_df = ranked_df.head(active_policy.limit)

    return ranked_df.reset_index(drop=True)


def recommend(
    scholarships: Iterable[Scholarship],
    profile: UserProfile | None,
    policy: RecommendationPolicy | None = None,
) -> list[Recommendation]:
    """Rank `scholarships` for `profile`; without a profile, fall back to featured ones unscored."""
    active_policy = policy or RecommendationPolicy.baseline()
    catalog = list(scholarships)

    if profile is None:
        featured = [Recommendation(scholarship=item, score=None) for item in featured_scholarships(catalog)]
        if active_policy.limit is not None:
            featured = featured[: active_policy.limit]
        logger.debug("No profile supplied; returning %d featured scholarships", len(featured))
        return featured

    ranked_df = rank_catalog(scholarships_to_frame(catalog), profile, active_policy)
    logger.debug("Recommended %d of %d scholarships", len(ranked_df), len(catalog))
    return [
        Recommendation(scholarship=row.scholarship, score=int(row.match_score))
        for row in ranked_df.itertuples(index=False)
    ]
