from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Iterable

import pandas as pd

from scholarmatch.normalize.schema import AmountType, parse_enum
from scholarmatch.normalize.values import parse_timestamp
from scholarmatch.rank.stage1_eligibility import (
    FIELD_OF_STUDY_NOT_ALLOWED,
    GPA_BELOW_MIN,
    NATIONALITY_NOT_ALLOWED,
    STUDY_LEVEL_MISMATCH,
)

DEADLINE_SOON_DAYS = 14

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}

_AMOUNT_SUFFIXES = {
    AmountType.ONE_TIME: " one-time",
    AmountType.ANNUAL: " / year",
    AmountType.SEMESTER: " / semester",
}

REASON_LABELS = {
    STUDY_LEVEL_MISMATCH: "Not offered at your study level",
    GPA_BELOW_MIN: "GPA below the minimum",
    NATIONALITY_NOT_ALLOWED: "Not open to your citizenship",
    FIELD_OF_STUDY_NOT_ALLOWED: "Not open to your field of study",
}


def format_amount(value: Any, currency: str | None = "USD", amount_type: Any = AmountType.ONE_TIME) -> str:
    numeric = _coerce_float(value)
    if numeric is None:
        return "Unknown"
    code = (currency or "USD").strip().upper()
    prefix = CURRENCY_SYMBOLS.get(code, f"{code} ")
    suffix = _AMOUNT_SUFFIXES.get(parse_enum(AmountType, amount_type), "")
    return f"{prefix}{numeric:,.0f}{suffix}"


def days_remaining(deadline: Any, now: Any) -> int | None:
    deadline_ts = parse_timestamp(deadline)
    now_ts = parse_timestamp(now)
    if deadline_ts is None or now_ts is None:
        return None
    return math.ceil((deadline_ts - now_ts).total_seconds() / 86400)


def deadline_status(deadline: Any, now: datetime) -> str:
    remaining = days_remaining(deadline, now)
    if remaining is None:
        return "unknown"
    if remaining <= 0:
        return "passed"
    if remaining <= DEADLINE_SOON_DAYS:
        return "soon"
    return "open"


def explain_reasons(reasons: Iterable[str] | None) -> list[str]:
    if not reasons:
        return ["Meets every listed requirement"]
    return [REASON_LABELS.get(reason, reason) for reason in reasons]


def reasons_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value if str(item).strip())
    return str(value)


def _coerce_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(numeric):
        return None
    return numeric
