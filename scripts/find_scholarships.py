from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.helpers import deadline_status, explain_reasons, format_amount, reasons_to_text
from scholarmatch.io.catalog import load_catalog, load_profile, scholarships_to_frame
from scholarmatch.normalize.schema import Scholarship, StudyLevel
from scholarmatch.rank.policy import load_policy
from scholarmatch.rank.search import SearchCriteria, search
from scholarmatch.rank.stage1_eligibility import apply_eligibility_filter
from scholarmatch.rank.stage3_recommend import recommend

logger = logging.getLogger("find_scholarships")

DEFAULT_CATALOG_PATH = ROOT_DIR / "data" / "scholarships.json"


def _coerce_today(value: str | None) -> datetime:
    if value is None:
        return datetime.now(tz=UTC)
    parsed = date.fromisoformat(value)
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=UTC)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recommend, search and check eligibility over a scholarship catalog.")
    parser.add_argument(
        "--catalog",
        type=Path,
        default=DEFAULT_CATALOG_PATH,
        help="Scholarship catalog (.json or .parquet).",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of text.")
    parser.add_argument(
        "--today",
        type=str,
        default=None,
        help="Reference date in YYYY-MM-DD format. Defaults to the current UTC time.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    recommend_parser = subparsers.add_parser("recommend", help="Rank scholarships for a profile.")
    recommend_parser.add_argument(
        "--profile",
        type=Path,
        default=None,
        help="Profile JSON. Without one, featured scholarships are listed.",
    )
    recommend_parser.add_argument("--config", type=Path, default=None, help="Policy JSON file.")
    recommend_parser.add_argument("--min-score", type=int, default=None)
    recommend_parser.add_argument(
        "--require-eligibility",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Drop scholarships that fail any hard constraint.",
    )
    recommend_parser.add_argument("--limit", type=int, default=None)

    search_parser = subparsers.add_parser("search", help="Filter the catalog.")
    search_parser.add_argument("--keyword", type=str, default="")
    search_parser.add_argument(
        "--study-level",
        type=str,
        default=None,
        choices=[level.value for level in StudyLevel],
    )
    search_parser.add_argument("--min-amount", type=float, default=0.0)
    search_parser.add_argument("--max-amount", type=float, default=None)
    search_parser.add_argument("--deadline-soon", action="store_true")

    eligibility_parser = subparsers.add_parser("eligibility", help="Explain eligibility for a profile.")
    eligibility_parser.add_argument("--profile", type=Path, required=True)

    return parser.parse_args(argv)


def _describe(scholarship: Scholarship, today: datetime) -> dict[str, Any]:
    return {
        "id": scholarship.scholarship_id,
        "name": scholarship.name,
        "provider": scholarship.provider,
        "amount": format_amount(
            scholarship.amount.value, scholarship.amount.currency, scholarship.amount.type
        ),
        "deadline_status": deadline_status(scholarship.deadline, today),
    }


def run_recommend(args: argparse.Namespace, catalog: list[Scholarship], today: datetime) -> list[dict[str, Any]]:
    policy = load_policy(args.config)
    overrides: dict[str, Any] = {}
    if args.min_score is not None:
        overrides["min_score"] = args.min_score
    if args.require_eligibility is not None:
        overrides["require_eligibility"] = args.require_eligibility
    if args.limit is not None:
        overrides["limit"] = args.limit
    if overrides:
        policy = replace(policy, **overrides)

    profile = load_profile(args.profile) if args.profile is not None else None
    logger.info("Recommending with policy %s", policy.to_dict())
    return [
        {**_describe(item.scholarship, today), "score": item.score}
        for item in recommend(catalog, profile, policy)
    ]


def run_search(args: argparse.Namespace, catalog: list[Scholarship], today: datetime) -> list[dict[str, Any]]:
    payload: dict[str, Any] = {
        "keyword": args.keyword,
        "studyLevel": args.study_level,
        "minAmount": args.min_amount,
        "deadlineWithin30Days": args.deadline_soon,
    }
    if args.max_amount is not None:
        payload["maxAmount"] = args.max_amount
    criteria = SearchCriteria.from_mapping(payload)
    return [_describe(item, today) for item in search(catalog, criteria, now=today)]


def run_eligibility(args: argparse.Namespace, catalog: list[Scholarship], today: datetime) -> list[dict[str, Any]]:
    profile = load_profile(args.profile)
    eligible_df, ineligible_df = apply_eligibility_filter(scholarships_to_frame(catalog), profile)
    rows: list[dict[str, Any]] = []
    for frame, eligible in ((eligible_df, True), (ineligible_df, False)):
        for _, row in frame.iterrows():
            rows.append(
                {
                    **_describe(row["scholarship"], today),
                    "eligible": eligible,
                    "reasons": list(row["reasons"]),
                    "explanation": explain_reasons(row["reasons"]),
                }
            )
    return rows


def _print_text(command: str, rows: list[dict[str, Any]]) -> None:
    if not rows:
        print("No scholarships matched.")
        return
    for row in rows:
        line = f"{row['name']} ({row['provider']}) - {row['amount']} [{row['deadline_status']}]"
        if command == "recommend" and row.get("score") is not None:
            line = f"{row['score']:>3}% {line}"
        if command == "eligibility":
            status = "eligible" if row["eligible"] else f"ineligible: {reasons_to_text(row['reasons'])}"
            line = f"{line} - {status}"
        print(line)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    today = _coerce_today(args.today)
    catalog = load_catalog(args.catalog)
    handlers = {
        "recommend": run_recommend,
        "search": run_search,
        "eligibility": run_eligibility,
    }
    rows = handlers[args.command](args, catalog, today)

    if args.json:
        print(json.dumps(rows, indent=2))
    else:
        _print_text(args.command, rows)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
