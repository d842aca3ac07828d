from __future__ import annotations

import json
from pathlib import Path

import pytest

from scholarmatch.rank.policy import RecommendationPolicy, load_policy


def test_policy_rejects_out_of_range_threshold() -> None:
    with pytest.raises(ValueError):
        RecommendationPolicy(min_score=120)
    with pytest.raises(ValueError):
        RecommendationPolicy(min_score=-1)


def test_policy_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        RecommendationPolicy(limit=0)


def test_from_mapping_falls_back_to_baseline() -> None:
    policy = RecommendationPolicy.from_mapping({"require_eligibility": True})

    assert policy.min_score == 50
    assert policy.require_eligibility is True
    assert policy.limit is None
    assert RecommendationPolicy.from_mapping(None) == RecommendationPolicy.baseline()


def test_from_mapping_rejects_fractional_threshold() -> None:
    with pytest.raises(ValueError):
        RecommendationPolicy.from_mapping({"min_score": 50.5})


def test_load_policy_reads_recommendation_section(tmp_path: Path) -> None:
    config_path = tmp_path / "policy.json"
    config_path.write_text(
        json.dumps({"recommendation": {"min_score": 60, "limit": 5}}),
        encoding="utf-8",
    )

    policy = load_policy(config_path)

    assert policy.to_dict() == {"min_score": 60, "require_eligibility": False, "limit": 5}
    assert load_policy(None) == RecommendationPolicy.baseline()


def test_load_policy_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_policy(tmp_path / "missing.json")
