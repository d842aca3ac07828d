from __future__ import annotations

import numpy as np
import pandas as pd

from scholarmatch.normalize.schema import Scholarship, UserProfile
from scholarmatch.rank.stage1_eligibility import declared_rules

PERFECT_SCORE = 100


def declared_factors(scholarship: Scholarship) -> list[str]:
    return [rule.reason for rule in declared_rules(scholarship)]


def match_breakdown(scholarship: Scholarship, profile: UserProfile) -> tuple[int, int]:
    """Return `(satisfied, factors)` over the constraints the scholarship declares."""
    rules = declared_rules(scholarship)
    satisfied = sum(1 for rule in rules if rule.is_satisfied(scholarship.eligibility, profile))
    return satisfied, len(rules)


def compute_match_scores(satisfied: np.ndarray, factors: np.ndarray) -> np.ndarray:
    satisfied = np.asarray(satisfied, dtype=float)
    factors = np.asarray(factors, dtype=float)
    scores = np.full(factors.shape[0], PERFECT_SCORE, dtype=int)

    declared_mask = factors > 0
    if np.any(declared_mask):
        ratio = satisfied[declared_mask] * PERFECT_SCORE / factors[declared_mask]
        # Round half up, not numpy's round-half-to-even.
        scores[declared_mask] = np.floor(ratio + 0.5).astype(int)
    return np.clip(scores, 0, PERFECT_SCORE)


def score(scholarship: Scholarship, profile: UserProfile) -> int:
    satisfied, factors = match_breakdown(scholarship, profile)
    return int(compute_match_scores(np.array([satisfied]), np.array([factors]))[0])


def score_catalog(catalog_df: pd.DataFrame, profile: UserProfile) -> pd.DataFrame:
    scored_df = catalog_df.copy()

    breakdowns = [match_breakdown(scholarship, profile) for scholarship in scored_df["scholarship"]]
    satisfied = np.array([item[0] for item in breakdowns], dtype=int)
    factors = np.array([item[1] for item in breakdowns], dtype=int)
    failed = np.array(factors - satisfied, dtype=int)

    scored_df["satisfied"] = satisfied
    scored_df["factors"] = factors
    scored_df["match_score"] = compute_match_scores(satisfied, factors)
    scored_df["is_eligible"] = failed == 0

    return scored_df
