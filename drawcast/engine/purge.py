"""
Inactivity-Purge Scanner — "use it or lose it" forfeiture.

Walks every plan year from the start of the window and counts consecutive
years with no qualifying activity (apply, buy a point, hunt) for each
position that holds points. Forfeiture is terminal: the first year the
counter reaches the jurisdiction threshold is the purge year.
"""

from dataclasses import dataclass

import structlog

from drawcast.rules.tables import ForfeitureRule
from drawcast.schemas.plan import QUALIFYING_ACTIVITY, PlanYear
from drawcast.schemas.results import AlertSeverity, PurgeAlert

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PurgePosition:
    jurisdiction: str
    category: str
    points: float
    annual_cost: float = 0.0


def active_years(plan: list[PlanYear], jurisdiction: str, category: str) -> set[int]:
    """Years with any qualifying activity for the position."""
    return {
        yr.year
        for yr in plan
        for action in yr.actions
        if action.jurisdiction == jurisdiction
        and action.category == category
        and action.kind in QUALIFYING_ACTIVITY
    }


class InactivityPurgeScanner:
    """Simulate forfeiture timers over a plan window."""

    def scan(
        self,
        positions: list[PurgePosition],
        rules: dict[str, ForfeitureRule],
        plan: list[PlanYear],
        window: tuple[int, int],
    ) -> list[PurgeAlert]:
        """
        Args:
            positions: Positions to check (zero-point positions are skipped)
            rules: Forfeiture rule per jurisdiction (missing = skip)
            plan: Plan years used to find activity
            window: Inclusive (start_year, end_year) to walk

        Returns:
            One alert per position that is forfeited (critical) or one
            inactive year away from forfeiture (warning), in input order
        """
        start_year, end_year = window
        alerts: list[PurgeAlert] = []

        for pos in positions:
            if pos.points <= 0:
                continue
            rule = rules.get(pos.jurisdiction)
            if rule is None:
                continue

            active = active_years(plan, pos.jurisdiction, pos.category)
            threshold = rule.max_inactive_years

            inactive = 0
            purge_year = None
            for year in range(start_year, end_year + 1):
                if year in active:
                    inactive = 0
                    continue
                inactive += 1
                if inactive >= threshold:
                    purge_year = year
                    break

            value_at_risk = pos.points * pos.annual_cost

            if purge_year is not None:
                alerts.append(PurgeAlert(
                    jurisdiction=pos.jurisdiction,
                    category=pos.category,
                    points=pos.points,
                    value_at_risk=value_at_risk,
                    consecutive_inactive_years=threshold,
                    threshold=threshold,
                    purge_year=purge_year,
                    severity=AlertSeverity.CRITICAL,
                    message=(
                        f"Point deletion imminent: skipping {pos.jurisdiction} {pos.category} for "
                        f"{threshold} consecutive year(s) permanently deletes {pos.points:g} points "
                        f"(value at risk ${value_at_risk:,.0f}). Points are purged in {purge_year}."
                    ),
                ))
            elif inactive > 0 and inactive >= threshold - 1:
                alerts.append(PurgeAlert(
                    jurisdiction=pos.jurisdiction,
                    category=pos.category,
                    points=pos.points,
                    value_at_risk=value_at_risk,
                    consecutive_inactive_years=inactive,
                    threshold=threshold,
                    purge_year=None,
                    severity=AlertSeverity.WARNING,
                    message=(
                        f"Point abandonment risk: {pos.points:g} points in {pos.jurisdiction} "
                        f"{pos.category} are one year from forfeiture "
                        f"({inactive} of {threshold} inactive years used)."
                    ),
                ))

        if alerts:
            logger.info(
                "purge_risk_detected",
                n_alerts=len(alerts),
                n_critical=sum(1 for a in alerts if a.severity == AlertSeverity.CRITICAL),
                window=f"{start_year}-{end_year}",
            )

        return alerts
