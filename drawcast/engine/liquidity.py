"""
Liquidity Scheduler — peak concurrent capital float.

Annual totals can fit a float limit while a two-week window where several
upfront fees overlap does not. This sweeps every window boundary and
reports the worst moment.

Implements a differencing sweep over sorted boundaries: O(n log n).
"""

from collections import defaultdict
from datetime import date
from typing import Optional

import structlog

from drawcast.schemas.plan import Commitment
from drawcast.schemas.portfolio import FloatEvent
from drawcast.schemas.results import LiquidityExposure, LiquiditySeverity

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

# Deficit above this share of the limit is critical
CRITICAL_DEFICIT_RATIO: float = 0.25

# A later boundary must beat the running peak by more than this to replace it
PEAK_TOLERANCE: float = 1e-9


class LiquidityScheduler:
    """Find peak concurrent exposure across [start, end) float windows."""

    def __init__(self, critical_ratio: float = CRITICAL_DEFICIT_RATIO):
        self.critical_ratio = critical_ratio

    def find_peak_exposure(self, events: list[FloatEvent], limit: float) -> LiquidityExposure:
        if not events:
            return LiquidityExposure(limit=limit)

        deltas: dict[date, float] = defaultdict(float)
        for ev in events:
            if ev.start < ev.end:
                deltas[ev.start] += ev.amount
                deltas[ev.end] -= ev.amount
            else:
                # Empty window: contributes a boundary but never any float
                deltas[ev.start] += 0.0

        peak_at: Optional[date] = None
        peak_amount = 0.0
        running = 0.0
        for boundary in sorted(deltas):
            running += deltas[boundary]
            # Summation drift must not let an equal later total win
            if running > peak_amount + PEAK_TOLERANCE:
                peak_amount = running
                peak_at = boundary

        overlapping = (
            [ev for ev in events if ev.start <= peak_at < ev.end]
            if peak_at is not None else []
        )
        # Recompute from the overlapping set so float drift cannot leak in
        if overlapping:
            peak_amount = sum(ev.amount for ev in overlapping)

        deficit = max(0.0, peak_amount - limit)
        severity = self.classify(deficit, limit)

        if severity != LiquiditySeverity.OK:
            logger.info(
                "liquidity_bottleneck_detected",
                peak=str(peak_at),
                peak_amount=peak_amount,
                limit=limit,
                deficit=deficit,
                severity=severity.value,
            )

        return LiquidityExposure(
            peak_timestamp=peak_at,
            peak_amount=peak_amount,
            limit=limit,
            deficit=deficit,
            overlapping=overlapping,
            severity=severity,
        )

    def classify(self, deficit: float, limit: float) -> LiquiditySeverity:
        if deficit <= 0:
            return LiquiditySeverity.OK
        if deficit > limit * self.critical_ratio:
            return LiquiditySeverity.CRITICAL
        return LiquiditySeverity.WARNING


def float_events_from_commitments(commitments: list[Commitment]) -> list[FloatEvent]:
    """Commitments with a complete float window, in input order."""
    events: list[FloatEvent] = []
    for c in commitments:
        if c.float_amount > 0 and c.float_start is not None and c.float_end is not None:
            events.append(
                FloatEvent(
                    jurisdiction=c.jurisdiction,
                    category=c.category,
                    amount=c.float_amount,
                    start=c.float_start,
                    end=c.float_end,
                    recoverable=c.refundable,
                )
            )
    return events
