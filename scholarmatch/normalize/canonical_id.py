from __future__ import annotations

import hashlib
from datetime import UTC, date, datetime
from typing import Any, Optional

from scholarmatch.normalize.values import as_float, parse_timestamp

_KEY_SEPARATOR = "|"


def _folded(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return " ".join(value.lower().split())


def _deadline_day(value: Any) -> str:
    # Only the UTC calendar day identifies a deadline; the time of day is dropped.
    parsed = parse_timestamp(value)
    if parsed is not None:
        return parsed.astimezone(UTC).date().isoformat()
    return _folded(value)


def generate_scholarship_id(
    *,
    name: str,
    provider: Optional[str],
    amount_value: Optional[float],
    currency: Optional[str],
    deadline: Optional[date | datetime | str],
) -> str:
    """Build a deterministic scholarship id for catalog records that arrive without one."""
    amount = as_float(amount_value)
    key = _KEY_SEPARATOR.join(
        (
            _folded(name),
            _folded(provider),
            "" if amount is None else f"{amount:.2f}",
            _folded(currency),
            _deadline_day(deadline),
        )
    )
    return hashlib.sha1(key.encode("utf-8")).hexdigest()
