"""
Portfolio Scanners — standing checks run outside of any single event.

These are the periodic sweeps a store runs on a schedule (or on load):
- Commitments whose deadline passed without completion
- Years where awarded hunts outrun the activity budget
- Positions heading for an inactivity purge
- Peak capital float across commitments

Each scanner is a pure function of its arguments; ``today`` and the plan
window are always passed in.
"""

from datetime import date
from typing import Optional

import structlog

from drawcast.engine.liquidity import LiquidityScheduler, float_events_from_commitments
from drawcast.engine.purge import InactivityPurgeScanner, PurgePosition
from drawcast.rules.tables import RuleBook
from drawcast.schemas.events import DeadlineMissedEvent, EventKind
from drawcast.schemas.plan import ActionKind, Commitment, DrawOutcome, PlanSnapshot
from drawcast.schemas.results import AlertSeverity, CascadeAlert, LiquidityExposure, PurgeAlert

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

DAYS_PER_HUNT: int = 6


def detect_missed_deadlines(commitments: list[Commitment], today: date) -> list[DeadlineMissedEvent]:
    """Open apply commitments (no completion, no draw result) due strictly before ``today``."""
    missed = [
        DeadlineMissedEvent(
            jurisdiction=c.jurisdiction,
            category=c.category,
            year=c.year,
            deadline=c.due_date,
            commitment_id=c.commitment_id,
        )
        for c in commitments
        if c.kind == ActionKind.APPLY
        and not c.completed
        and c.draw_outcome is None
        and c.due_date is not None
        and c.due_date < today
    ]
    if missed:
        logger.info("missed_deadlines_detected", count=len(missed), today=today.isoformat())
    return missed


def detect_success_disaster(
    commitments: list[Commitment],
    annual_activity_budget: float,
    available_days: int,
    year: int,
    days_per_hunt: int = DAYS_PER_HUNT,
) -> list[CascadeAlert]:
    """
    Check a year's awarded draws against money and time.

    Only applications already marked awarded count, and a single award is
    never a disaster; pending results are ignored.
    """
    awarded = [
        c for c in commitments
        if c.year == year
        and c.kind == ActionKind.APPLY
        and c.draw_outcome == DrawOutcome.AWARDED
    ]
    if len(awarded) <= 1:
        return []

    alerts: list[CascadeAlert] = []
    total_cost = sum(c.total_cost for c in awarded)
    names = ", ".join(f"{c.jurisdiction} {c.category}" for c in awarded)

    if total_cost > annual_activity_budget:
        over = total_cost - annual_activity_budget
        alerts.append(CascadeAlert(
            alert_id=f"success-disaster-budget-{year}",
            severity=AlertSeverity.CRITICAL,
            title=f"Success Disaster: {len(awarded)} Draws Over Budget",
            description=(
                f"You drew {len(awarded)} tags in {year} ({names}). Total cost ~${total_cost:,.0f} "
                f"exceeds your ${annual_activity_budget:,.0f} activity budget by ${over:,.0f}."
            ),
            recommendation="Consider deferring one hunt or returning a tag where the jurisdiction allows it.",
            event_kind=EventKind.DRAW_OUTCOME,
        ))

    days_needed = len(awarded) * days_per_hunt
    if available_days > 0 and days_needed > available_days:
        alerts.append(CascadeAlert(
            alert_id=f"success-disaster-days-{year}",
            severity=AlertSeverity.WARNING,
            title="Time Conflict: Not Enough Days",
            description=(
                f"{len(awarded)} awarded hunts in {year} need ~{days_needed} days, "
                f"but you have {available_days} available."
            ),
            recommendation="Check season dates for overlap; some hunts may be combinable in one trip.",
            event_kind=EventKind.DRAW_OUTCOME,
        ))

    return alerts


def scan_purge_risk(
    snapshot: PlanSnapshot,
    rulebook: RuleBook,
    window: Optional[tuple[int, int]] = None,
    scanner: Optional[InactivityPurgeScanner] = None,
) -> list[PurgeAlert]:
    """
    Run the inactivity scanner over every balance in the snapshot.

    The window defaults to the first through last plan year; an empty
    plan with no explicit window has nothing to walk.
    """
    if window is None:
        if not snapshot.years:
            return []
        plan_years = [y.year for y in snapshot.years]
        window = (min(plan_years), max(plan_years))

    positions = [
        PurgePosition(
            jurisdiction=b.jurisdiction,
            category=b.category,
            points=b.points,
            annual_cost=rulebook.annual_cost(b.jurisdiction, b.category),
        )
        for b in snapshot.points
    ]
    return (scanner or InactivityPurgeScanner()).scan(
        positions, rulebook.forfeiture_rules(), snapshot.years, window
    )


def scan_liquidity(
    snapshot: PlanSnapshot,
    float_limit: float,
    scheduler: Optional[LiquidityScheduler] = None,
) -> LiquidityExposure:
    """Peak float exposure across the snapshot's commitments."""
    events = float_events_from_commitments(snapshot.commitments)
    return (scheduler or LiquidityScheduler()).find_peak_exposure(events, float_limit)
