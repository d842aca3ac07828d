from __future__ import annotations

import json
from pathlib import Path

import pytest

from scripts.find_scholarships import main


def _write_json(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def catalog_path(tmp_path: Path) -> Path:
    return _write_json(
        tmp_path / "catalog.json",
        [
            {
                "id": "open",
                "name": "Open Horizons Award",
                "provider": "Civic Trust",
                "description": "No restrictions.",
                "eligibility": {},
                "amount": {"value": 3000, "currency": "USD", "type": "one-time"},
                "deadline": "2026-10-10T00:00:00Z",
                "featured": True,
            },
            {
                "id": "grad",
                "name": "Graduate STEM Fellowship",
                "provider": "Science Fund",
                "description": "For graduate researchers.",
                "eligibility": {"minGPA": 3.0, "studyLevel": ["Graduate"]},
                "amount": {"value": 20000, "currency": "USD", "type": "annual"},
                "deadline": "2027-01-15T00:00:00Z",
            },
        ],
    )


@pytest.fixture()
def profile_path(tmp_path: Path) -> Path:
    return _write_json(
        tmp_path / "profile.json",
        {
            "academicInfo": {"gpa": 3.8, "major": "Biology", "studyLevel": "Undergraduate"},
            "personalInfo": {"citizenship": "Ireland"},
        },
    )


def _run_json(capsys: pytest.CaptureFixture[str], argv: list[str]) -> list[dict]:
    assert main(argv) == 0
    return json.loads(capsys.readouterr().out)


def test_recommend_command_ranks_for_profile(
    capsys: pytest.CaptureFixture[str], catalog_path: Path, profile_path: Path
) -> None:
    rows = _run_json(
        capsys,
        ["--catalog", str(catalog_path), "--json", "--today", "2026-10-01", "recommend", "--profile", str(profile_path)],
    )

    assert [(row["id"], row["score"]) for row in rows] == [("open", 100)]
    assert rows[0]["amount"] == "$3,000 one-time"
    assert rows[0]["deadline_status"] == "soon"


def test_recommend_command_lowered_threshold_includes_half_match(
    capsys: pytest.CaptureFixture[str], catalog_path: Path, profile_path: Path
) -> None:
    rows = _run_json(
        capsys,
        [
            "--catalog",
            str(catalog_path),
            "--json",
            "recommend",
            "--profile",
            str(profile_path),
            "--min-score",
            "49",
        ],
    )

    assert [(row["id"], row["score"]) for row in rows] == [("open", 100), ("grad", 50)]


def test_recommend_command_without_profile_lists_featured(
    capsys: pytest.CaptureFixture[str], catalog_path: Path
) -> None:
    rows = _run_json(capsys, ["--catalog", str(catalog_path), "--json", "recommend"])

    assert [(row["id"], row["score"]) for row in rows] == [("open", None)]


def test_search_command_filters_by_keyword(capsys: pytest.CaptureFixture[str], catalog_path: Path) -> None:
    rows = _run_json(capsys, ["--catalog", str(catalog_path), "--json", "search", "--keyword", "stem"])

    assert [row["id"] for row in rows] == ["grad"]
    assert rows[0]["amount"] == "$20,000 / year"


def test_eligibility_command_reports_reasons(
    capsys: pytest.CaptureFixture[str], catalog_path: Path, profile_path: Path
) -> None:
    rows = _run_json(
        capsys,
        ["--catalog", str(catalog_path), "--json", "eligibility", "--profile", str(profile_path)],
    )

    by_id = {row["id"]: row for row in rows}
    assert by_id["open"]["eligible"] is True
    assert by_id["grad"]["reasons"] == ["STUDY_LEVEL_MISMATCH"]
    assert by_id["grad"]["explanation"] == ["Not offered at your study level"]


def test_text_output_prints_one_line_per_result(
    capsys: pytest.CaptureFixture[str], catalog_path: Path, profile_path: Path
) -> None:
    assert main(["--catalog", str(catalog_path), "recommend", "--profile", str(profile_path)]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("100% Open Horizons Award (Civic Trust)")


def test_search_command_applies_explicit_max_amount(
    capsys: pytest.CaptureFixture[str], catalog_path: Path
) -> None:
    rows = _run_json(capsys, ["--catalog", str(catalog_path), "--json", "search", "--max-amount", "10000"])
    assert [row["id"] for row in rows] == ["open"]

    rows = _run_json(capsys, ["--catalog", str(catalog_path), "--json", "search", "--min-amount", "5000"])
    assert [row["id"] for row in rows] == ["grad"]
