from __future__ import annotations

from datetime import UTC, datetime

import pytest

from scholarmatch.io.catalog import scholarships_to_frame
from scholarmatch.normalize.schema import (
    AcademicInfo,
    Amount,
    Eligibility,
    PersonalInfo,
    Scholarship,
    StudyLevel,
    UserProfile,
)
from scholarmatch.rank.policy import RecommendationPolicy
from scholarmatch.rank.stage3_recommend import rank_catalog, recommend

PROFILE = UserProfile(
    academic_info=AcademicInfo(gpa=3.4, study_level=StudyLevel.GRADUATE, major="Economics"),
    personal_info=PersonalInfo(citizenship="Germany"),
)


def _scholarship(
    scholarship_id: str,
    eligibility: Eligibility | None = None,
    *,
    featured: bool = False,
) -> Scholarship:
    return Scholarship(
        scholarship_id=scholarship_id,
        name=f"Scholarship {scholarship_id}",
        provider="Test Foundation",
        description="",
        eligibility=eligibility or Eligibility(),
        amount=Amount(value=5000.0),
        deadline=datetime(2026, 6, 1, tzinfo=UTC),
        featured=featured,
    )


@pytest.fixture()
def catalog() -> list[Scholarship]:
    return [
        # 1 of 2 satisfied: 50, excluded by the strict threshold.
        _scholarship("half", Eligibility(min_gpa=3.0, nationality=("France",))),
        # 3 of 4 satisfied: 75.
        _scholarship(
            "three-quarters",
            Eligibility(
                nationality=("Germany",),
                min_gpa=3.0,
                field_of_study=("Economics",),
                study_level=(StudyLevel.DOCTORATE,),
            ),
        ),
        _scholarship("open", featured=True),
        # 2 of 3 satisfied: 67.
        _scholarship(
            "two-thirds",
            Eligibility(min_gpa=3.8, field_of_study=("economics",), study_level=(StudyLevel.GRADUATE,)),
        ),
        _scholarship("all-sentinels", Eligibility(nationality=("All",), field_of_study=("All",))),
        _scholarship("zero", Eligibility(min_gpa=3.9), featured=True),
    ]


def test_recommend_orders_by_score_and_drops_fifty_and_below(catalog: list[Scholarship]) -> None:
    results = recommend(catalog, PROFILE)

    assert [(item.scholarship.scholarship_id, item.score) for item in results] == [
        ("open", 100),
        ("all-sentinels", 100),
        ("three-quarters", 75),
        ("two-thirds", 67),
    ]
    assert all(item.score > 50 for item in results)


def test_recommend_keeps_catalog_order_among_equal_scores() -> None:
    catalog = [_scholarship(f"s{index}") for index in range(6)]

    results = recommend(catalog, PROFILE)

    assert [item.scholarship.scholarship_id for item in results] == [f"s{index}" for index in range(6)]
    assert {item.score for item in results} == {100}


def test_recommend_without_profile_returns_featured_unscored(catalog: list[Scholarship]) -> None:
    results = recommend(catalog, None)

    assert [item.scholarship.scholarship_id for item in results] == ["open", "zero"]
    assert all(item.score is None for item in results)


def test_require_eligibility_policy_drops_partial_matches(catalog: list[Scholarship]) -> None:
    policy = RecommendationPolicy(require_eligibility=True)

    results = recommend(catalog, PROFILE, policy)

    assert [item.scholarship.scholarship_id for item in results] == ["open", "all-sentinels"]


def test_recommend_applies_limit_after_sorting(catalog: list[Scholarship]) -> None:
    results = recommend(catalog, PROFILE, RecommendationPolicy(limit=3))

    assert [item.scholarship.scholarship_id for item in results] == [
        "open",
        "all-sentinels",
        "three-quarters",
    ]


def test_recommend_handles_empty_catalog() -> None:
    assert recommend([], PROFILE) == []
    assert recommend([], None) == []


def test_rank_catalog_returns_scored_frame(catalog: list[Scholarship]) -> None:
    ranked_df = rank_catalog(scholarships_to_frame(catalog), PROFILE)

    assert ranked_df["match_score"].tolist() == [100, 100, 75, 67]
    assert ranked_df.index.tolist() == [0, 1, 2, 3]


def test_recommendation_to_dict_includes_score(catalog: list[Scholarship]) -> None:
    payload = recommend(catalog, PROFILE)[0].to_dict()

    assert payload["score"] == 100
    assert payload["scholarship"]["id"] == "open"
