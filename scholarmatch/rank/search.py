from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from scholarmatch.io.catalog import scholarships_to_frame
from scholarmatch.normalize.schema import Scholarship, StudyLevel, parse_enum
from scholarmatch.normalize.values import as_bool, as_float, parse_timestamp
from scholarmatch.rank.policy import DEADLINE_WINDOW_DAYS


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Free-form catalog filters.

    Amount bounds are inclusive. An unset `max_amount` means no upper bound,
    so the default criteria never drop a scholarship.
    """

    keyword: str = ""
    study_level: Optional[StudyLevel] = None
    min_amount: float = 0.0
    max_amount: Optional[float] = None
    deadline_within_30_days: bool = False
    window_days: int = DEADLINE_WINDOW_DAYS

    def __post_init__(self) -> None:
        bounds = {"min_amount": self.min_amount, "max_amount": self.max_amount}
        for field_name, value in bounds.items():
            if value is not None and not math.isfinite(float(value)):
                raise ValueError(f"Search '{field_name}' must be finite.")
        if self.max_amount is not None and self.min_amount > self.max_amount:
            raise ValueError(
                f"Search min_amount ({self.min_amount}) must not exceed max_amount ({self.max_amount})."
            )
        if self.window_days < 0:
            raise ValueError("Search 'window_days' must not be negative.")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> SearchCriteria:
        """Read the camelCase filter payload; blank or unparseable values fall back to defaults."""
        values = payload or {}
        defaults = cls()
        deadline_soon = values.get("deadlineWithin30Days", values.get("isDeadlineSoon"))
        min_amount = as_float(values.get("minAmount"))
        max_amount = as_float(values.get("maxAmount"))
        return cls(
            keyword=str(values.get("keyword") or ""),
            study_level=parse_enum(StudyLevel, values.get("studyLevel")),
            min_amount=defaults.min_amount if min_amount is None else min_amount,
            max_amount=defaults.max_amount if max_amount is None else max_amount,
            deadline_within_30_days=as_bool(deadline_soon),
        )

    def is_default(self) -> bool:
        return (
            not self.keyword.strip()
            and self.study_level is None
            and self.min_amount <= 0.0
            and self.max_amount is None
            and not self.deadline_within_30_days
        )

    @property
    def upper_amount(self) -> float:
        return math.inf if self.max_amount is None else float(self.max_amount)


def _resolve_now(now: datetime | date | None) -> pd.Timestamp:
    resolved = parse_timestamp(now) if now is not None else datetime.now(tz=UTC)
    if resolved is None:
        raise ValueError(f"Invalid reference time: {now!r}")
    return pd.Timestamp(resolved).tz_convert("UTC")


def _matches_keyword(scholarship: Scholarship, keyword: str) -> bool:
    haystacks = (scholarship.name, scholarship.provider, scholarship.description)
    return any(keyword in text.lower() for text in haystacks)


def _matches_study_level(scholarship: Scholarship, study_level: StudyLevel) -> bool:
    levels = scholarship.eligibility.study_level
    return levels is None or study_level in levels


def search_catalog(
    catalog_df: pd.DataFrame,
    criteria: SearchCriteria | None = None,
    *,
    now: datetime | date | None = None,
) -> pd.DataFrame:
    active = criteria or SearchCriteria()
    mask = pd.Series(True, index=catalog_df.index)

    keyword = active.keyword.strip().lower()
    if keyword:
        mask &= catalog_df["scholarship"].map(lambda item: _matches_keyword(item, keyword)).astype(bool)

    if active.study_level is not None:
        level = active.study_level
        mask &= catalog_df["scholarship"].map(lambda item: _matches_study_level(item, level)).astype(bool)

    amounts = pd.to_numeric(catalog_df["amount_value"], errors="coerce")
    mask &= (amounts >= active.min_amount) & (amounts <= active.upper_amount)

    if active.deadline_within_30_days:
        window_start = _resolve_now(now)
        window_end = window_start + timedelta(days=active.window_days)
        deadlines = pd.to_datetime(catalog_df["deadline"], utc=True)
        mask &= (deadlines >= window_start) & (deadlines <= window_end)

    return catalog_df[mask.astype(bool)].reset_index(drop=True)


def search(
    scholarships: Iterable[Scholarship],
    criteria: SearchCriteria | None = None,
    *,
    now: datetime | date | None = None,
) -> list[Scholarship]:
    """Filter `scholarships` by `criteria`, preserving input order."""
    filtered_df = search_catalog(scholarships_to_frame(scholarships), criteria, now=now)
    return list(filtered_df["scholarship"])
