from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from scholarmatch.io.jsonfiles import read_json_file
from scholarmatch.normalize.schema import Scholarship, UserProfile

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = [
    "scholarship_id",
    "name",
    "provider",
    "amount_value",
    "currency",
    "deadline",
    "featured",
    "scholarship",
]


def _load_records(input_path: Path) -> pd.DataFrame:
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    if input_path.suffix.lower() == ".parquet":
        return pd.read_parquet(input_path, engine="pyarrow")
    if input_path.suffix.lower() == ".json":
        return pd.read_json(input_path, orient="records", dtype=False, convert_dates=False)

    raise ValueError("Unsupported input format. Use .parquet or .json")


def records_to_scholarships(records: pd.DataFrame) -> list[Scholarship]:
    scholarships: list[Scholarship] = []
    for index, record in enumerate(records.to_dict(orient="records")):
        try:
            scholarships.append(Scholarship.from_mapping(record))
        except ValueError as exc:
            logger.warning("Skipping catalog record %d: %s", index, exc)
    return scholarships


def scholarships_to_frame(scholarships: Iterable[Scholarship]) -> pd.DataFrame:
    rows = [
        {
            "scholarship_id": scholarship.scholarship_id,
            "name": scholarship.name,
            "provider": scholarship.provider,
            "amount_value": scholarship.amount.value,
            "currency": scholarship.amount.currency,
            "deadline": pd.Timestamp(scholarship.deadline).tz_convert("UTC"),
            "featured": scholarship.featured,
            "scholarship": scholarship,
        }
        for scholarship in scholarships
    ]
    return pd.DataFrame(rows, columns=CATALOG_COLUMNS)


def load_catalog(input_path: Path) -> list[Scholarship]:
    records = _load_records(input_path)
    scholarships = records_to_scholarships(records)
    logger.info("Loaded %d of %d catalog records from %s", len(scholarships), len(records), input_path)
    return scholarships


def load_catalog_df(input_path: Path) -> pd.DataFrame:
    return scholarships_to_frame(load_catalog(input_path))


def load_profile(input_path: Path) -> UserProfile:
    payload = read_json_file(input_path)
    if not isinstance(payload, dict):
        raise ValueError(f"Profile file must contain a JSON object: {input_path}")
    return UserProfile.from_mapping(payload)
