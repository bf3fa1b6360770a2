"""
Group-Draw Averager.

Party applications draw on the average of their members' points, but each
jurisdiction rounds that average differently. Feeding 3.5 into the odds
model for a floor jurisdiction overstates the party's chances; the
effective value is 3.
"""

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

import structlog

from drawcast.schemas.results import GroupAverage, GroupRounding

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

LOSS_WARNING_THRESHOLD: float = 0.5
SEVERE_DROP: float = 3.0
MODERATE_DROP: float = 1.0


class DropImpact(StrEnum):
    SEVERE = "severe"
    MODERATE = "moderate"
    MINIMAL = "minimal"


@dataclass(frozen=True)
class MemberRemovalImpact:
    old_group_size: int
    new_group_size: int
    old_effective_points: float
    new_effective_points: float
    points_drop: float
    impact: DropImpact
    old_average: GroupAverage
    new_average: GroupAverage


def apply_rounding(value: float, method: GroupRounding) -> float:
    match method:
        case GroupRounding.FLOOR:
            return float(math.floor(value))
        case GroupRounding.CEILING:
            return float(math.ceil(value))
        case GroupRounding.ROUND:
            # Half rounds up (3.5 → 4), not to even
            return float(math.floor(value + 0.5))
        case GroupRounding.EXACT:
            return value


class GroupDrawAverager:
    """Compute effective party points under per-jurisdiction rounding."""

    def __init__(
        self,
        rounding_policy: dict[str, GroupRounding],
        default_method: GroupRounding = GroupRounding.FLOOR,
        loss_warning_threshold: float = LOSS_WARNING_THRESHOLD,
    ):
        self.rounding_policy = rounding_policy
        self.default_method = default_method
        self.loss_warning_threshold = loss_warning_threshold

    def method_for(self, jurisdiction: str) -> GroupRounding:
        return self.rounding_policy.get(jurisdiction, self.default_method)

    def average(self, jurisdiction: str, member_points: list[float]) -> GroupAverage:
        method = self.method_for(jurisdiction)
        if not member_points:
            return GroupAverage(jurisdiction=jurisdiction, method=method)

        raw_average = sum(member_points) / len(member_points)
        effective = apply_rounding(raw_average, method)
        point_loss = raw_average - effective

        warning: Optional[str] = None
        if point_loss >= self.loss_warning_threshold:
            warning = (
                f"Group rounding in {jurisdiction} costs {point_loss:.2f} effective points. "
                f"{jurisdiction} uses {method.value} rounding: your party average of "
                f"{raw_average:.2f} becomes {effective:g} effective points."
            )

        return GroupAverage(
            jurisdiction=jurisdiction,
            member_points=list(member_points),
            raw_average=raw_average,
            effective_points=effective,
            method=method,
            point_loss=point_loss,
            warning=warning,
        )

    def compare(
        self,
        jurisdiction: str,
        old_points: list[float],
        new_points: list[float],
    ) -> MemberRemovalImpact:
        """Effective-point change between two party compositions."""
        old = self.average(jurisdiction, old_points)
        new = self.average(jurisdiction, new_points)
        drop = old.effective_points - new.effective_points

        if drop >= SEVERE_DROP:
            impact = DropImpact.SEVERE
        elif drop >= MODERATE_DROP:
            impact = DropImpact.MODERATE
        else:
            impact = DropImpact.MINIMAL

        if impact != DropImpact.MINIMAL:
            logger.info(
                "party_points_dropped",
                jurisdiction=jurisdiction,
                old_size=len(old_points),
                new_size=len(new_points),
                drop=drop,
                impact=impact.value,
            )

        return MemberRemovalImpact(
            old_group_size=len(old_points),
            new_group_size=len(new_points),
            old_effective_points=old.effective_points,
            new_effective_points=new.effective_points,
            points_drop=drop,
            impact=impact,
            old_average=old,
            new_average=new,
        )

    def remove_member(
        self,
        jurisdiction: str,
        member_points: list[float],
        removed_index: int,
    ) -> MemberRemovalImpact:
        """Recompute the party average with one member gone."""
        remaining = [p for i, p in enumerate(member_points) if i != removed_index]
        return self.compare(jurisdiction, member_points, remaining)
