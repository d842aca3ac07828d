from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pandas as pd

from scholarmatch.normalize.schema import ALL_SENTINEL, Eligibility, Scholarship, UserProfile

STUDY_LEVEL_MISMATCH = "STUDY_LEVEL_MISMATCH"
GPA_BELOW_MIN = "GPA_BELOW_MIN"
NATIONALITY_NOT_ALLOWED = "NATIONALITY_NOT_ALLOWED"
FIELD_OF_STUDY_NOT_ALLOWED = "FIELD_OF_STUDY_NOT_ALLOWED"


def _is_restricted(values: tuple[str, ...] | None) -> bool:
    return bool(values) and ALL_SENTINEL not in values


def _study_level_declared(eligibility: Eligibility) -> bool:
    return bool(eligibility.study_level)


def _gpa_declared(eligibility: Eligibility) -> bool:
    return eligibility.min_gpa is not None


def _nationality_declared(eligibility: Eligibility) -> bool:
    return _is_restricted(eligibility.nationality)


def _field_of_study_declared(eligibility: Eligibility) -> bool:
    return _is_restricted(eligibility.field_of_study)


def _study_level_ok(eligibility: Eligibility, profile: UserProfile) -> bool:
    return profile.academic_info.study_level in (eligibility.study_level or ())


def _gpa_ok(eligibility: Eligibility, profile: UserProfile) -> bool:
    return profile.academic_info.gpa >= float(eligibility.min_gpa or 0.0)


def _nationality_ok(eligibility: Eligibility, profile: UserProfile) -> bool:
    # Unknown citizenship is not a failure by itself.
    citizenship = profile.personal_info.citizenship
    if not citizenship:
        return True
    return citizenship.strip() in (eligibility.nationality or ())


def _field_of_study_ok(eligibility: Eligibility, profile: UserProfile) -> bool:
    major = profile.academic_info.major
    if not major:
        return True
    normalized_major = major.strip().lower()
    return any(field.lower() == normalized_major for field in eligibility.field_of_study or ())


@dataclass(frozen=True, slots=True)
class EligibilityRule:
    reason: str
    is_declared: Callable[[Eligibility], bool]
    is_satisfied: Callable[[Eligibility, UserProfile], bool]


ELIGIBILITY_RULES: tuple[EligibilityRule, ...] = (
    EligibilityRule(STUDY_LEVEL_MISMATCH, _study_level_declared, _study_level_ok),
    EligibilityRule(GPA_BELOW_MIN, _gpa_declared, _gpa_ok),
    EligibilityRule(NATIONALITY_NOT_ALLOWED, _nationality_declared, _nationality_ok),
    EligibilityRule(FIELD_OF_STUDY_NOT_ALLOWED, _field_of_study_declared, _field_of_study_ok),
)


def declared_rules(scholarship: Scholarship) -> list[EligibilityRule]:
    return [rule for rule in ELIGIBILITY_RULES if rule.is_declared(scholarship.eligibility)]


def eligibility_reasons(scholarship: Scholarship, profile: UserProfile) -> list[str]:
    """Reason codes for every declared constraint the profile fails, in rule order."""
    eligibility = scholarship.eligibility
    return [
        rule.reason
        for rule in declared_rules(scholarship)
        if not rule.is_satisfied(eligibility, profile)
    ]


def is_eligible(scholarship: Scholarship, profile: UserProfile) -> bool:
    return not eligibility_reasons(scholarship, profile)


def apply_eligibility_filter(
    df: pd.DataFrame, profile: UserProfile
) -> tuple[pd.DataFrame, pd.DataFrame]:
    with_reasons_df = df.copy()
    with_reasons_df["reasons"] = [
        eligibility_reasons(scholarship, profile) for scholarship in with_reasons_df["scholarship"]
    ]

    is_ineligible = with_reasons_df["reasons"].map(bool).astype(bool)
    ineligible_df = with_reasons_df[is_ineligible].copy()
    eligible_df = with_reasons_df[~is_ineligible].copy()

    return eligible_df, ineligible_df
