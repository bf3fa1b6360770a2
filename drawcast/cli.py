"""
DrawCast command line — JSON in, JSON out.

Usage:
    drawcast dispatch --event event.json --snapshot plan.json --current-year 2026
    drawcast scan-purge --snapshot plan.json
    drawcast liquidity --snapshot plan.json --limit 1500

Results go to stdout; logs go to stderr. Load failures exit with code 2.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from drawcast import __version__
from drawcast.cascade.dispatcher import CascadeDispatcher
from drawcast.cascade.scanners import scan_liquidity, scan_purge_risk
from drawcast.config import settings
from drawcast.errors import DrawCastError, ErrorCode, SnapshotLoadError
from drawcast.observability import configure_logging
from drawcast.rules.defaults import DEFAULT_RULEBOOK
from drawcast.rules.tables import RuleBook
from drawcast.schemas.events import CascadeContext, CascadeEvent
from drawcast.schemas.plan import PlanSnapshot
from drawcast.schemas.results import PurgeAlert

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_LOAD_ERROR = 2

_event_adapter: TypeAdapter = TypeAdapter(CascadeEvent)
_purge_adapter: TypeAdapter = TypeAdapter(list[PurgeAlert])


def _read_json(path: str, code: ErrorCode) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SnapshotLoadError(f"Cannot read {path}: {e}", code=code, details={"path": path}) from e


def load_snapshot(path: str) -> PlanSnapshot:
    raw = _read_json(path, ErrorCode.INVALID_SNAPSHOT)
    try:
        return PlanSnapshot.model_validate(raw)
    except ValidationError as e:
        raise SnapshotLoadError(
            f"Invalid plan snapshot {path}",
            details={"path": path, "errors": e.errors(include_url=False)},
        ) from e


def load_event(path: str) -> CascadeEvent:
    raw = _read_json(path, ErrorCode.INVALID_EVENT)
    try:
        return _event_adapter.validate_python(raw)
    except ValidationError as e:
        raise SnapshotLoadError(
            f"Invalid event {path}",
            code=ErrorCode.INVALID_EVENT,
            details={"path": path, "errors": e.errors(include_url=False)},
        ) from e


def load_rulebook(path: Optional[str]) -> RuleBook:
    return RuleBook.from_json_file(path) if path else DEFAULT_RULEBOOK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drawcast",
        description="Fiduciary cascade engine for draw-based licensing portfolios",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    parser.add_argument("--log-format", choices=["console", "json"], default=None, help="Override LOG_FORMAT")
    sub = parser.add_subparsers(dest="command", required=True)

    dispatch = sub.add_parser("dispatch", help="Compute the cascade for one event")
    dispatch.add_argument("--event", "-e", required=True, help="Event JSON file")
    dispatch.add_argument("--snapshot", "-s", required=True, help="Plan snapshot JSON file")
    dispatch.add_argument("--rules", "-r", default=None, help="Rule book JSON file (default: shipped tables)")
    dispatch.add_argument("--current-year", type=int, required=True, help="Planning year of the event")
    dispatch.add_argument("--budget", type=float, required=True, help="Annual activity budget")
    dispatch.add_argument("--days", type=int, default=0, help="Available activity days per year")

    purge = sub.add_parser("scan-purge", help="List positions at risk of an inactivity purge")
    purge.add_argument("--snapshot", "-s", required=True, help="Plan snapshot JSON file")
    purge.add_argument("--rules", "-r", default=None, help="Rule book JSON file (default: shipped tables)")
    purge.add_argument("--start", type=int, default=None, help="First year to scan (default: first plan year)")
    purge.add_argument("--end", type=int, default=None, help="Last year to scan (default: last plan year)")

    liquidity = sub.add_parser("liquidity", help="Peak concurrent capital float across commitments")
    liquidity.add_argument("--snapshot", "-s", required=True, help="Plan snapshot JSON file")
    liquidity.add_argument("--limit", type=float, required=True, help="Float limit")

    return parser


def run(args: argparse.Namespace) -> str:
    """Execute a parsed command and return its JSON output."""
    snapshot = load_snapshot(args.snapshot)

    if args.command == "dispatch":
        rulebook = load_rulebook(args.rules)
        event = load_event(args.event)
        context = CascadeContext(
            current_year=args.current_year,
            annual_activity_budget=args.budget,
            available_days=args.days,
        )
        result = CascadeDispatcher.from_settings(settings, rulebook).dispatch(event, snapshot, context)
        return result.model_dump_json(indent=2)

    if args.command == "scan-purge":
        rulebook = load_rulebook(args.rules)
        window = None
        if args.start is not None or args.end is not None:
            years = [y.year for y in snapshot.years] or [args.start or args.end]
            window = (
                args.start if args.start is not None else min(years),
                args.end if args.end is not None else max(years),
            )
        alerts = scan_purge_risk(snapshot, rulebook, window)
        return _purge_adapter.dump_json(alerts, indent=2).decode()

    # liquidity
    exposure = scan_liquidity(snapshot, args.limit)
    return exposure.model_dump_json(indent=2)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    try:
        output = run(args)
    except DrawCastError as e:
        logger.error("cli_load_failed", command=args.command, **e.to_dict())
        return EXIT_LOAD_ERROR

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
