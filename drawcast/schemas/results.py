"""
Cascade Result Schemas — the engine's only output.

Every field a presentation layer binds to lives here, so these shapes are
the engine's protocol. List fields always default to empty lists so
callers can iterate without checks.
"""

from datetime import date
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from drawcast.schemas.events import EventKind
from drawcast.schemas.portfolio import FloatEvent, PortfolioAsset


class CapitalClass(StrEnum):
    RECOVERABLE = "recoverable"     # floated, returned if unsuccessful
    COMMITTED = "committed"         # sunk


class InvalidationAction(StrEnum):
    REMOVE = "remove"
    RECALCULATE = "recalculate"


class AlertSeverity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class ConflictType(StrEnum):
    ACTIVITY_OVERLAP = "activity_overlap"
    SUCCESS_DISASTER = "success_disaster"
    DAYS_SHORTFALL = "days_shortfall"


class LiquiditySeverity(StrEnum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class GroupRounding(StrEnum):
    FLOOR = "floor"
    CEILING = "ceiling"
    ROUND = "round"
    EXACT = "exact"


# ── Mutations ─────────────────────────────────────────────────────────


class PointMutation(BaseModel):
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    new_points: float = Field(ge=0)
    delta: float
    reason: str


class CapitalReclassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    from_class: CapitalClass
    to_class: CapitalClass
    amount: float
    reason: str


class PlanInvalidation(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    jurisdiction: str
    category: str
    action: InvalidationAction
    reason: str


class CascadeAlert(BaseModel):
    model_config = ConfigDict(frozen=True)

    alert_id: str                   # deterministic, derived from the event
    severity: AlertSeverity
    title: str
    description: str
    recommendation: Optional[str] = None
    jurisdiction: Optional[str] = None
    category: Optional[str] = None
    event_kind: EventKind


class ScheduleConflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    conflict_type: ConflictType
    severity: AlertSeverity
    message: str
    affected_year: Optional[int] = None


# ── Component results ─────────────────────────────────────────────────


class AllocationResult(BaseModel):
    """Outcome of a budget-constrained liquidation."""
    model_config = ConfigDict(frozen=True)

    kept: list[PortfolioAsset] = Field(default_factory=list)
    pruned: list[PortfolioAsset] = Field(default_factory=list)
    total_saved: float = 0.0
    reasoning: list[str] = Field(default_factory=list)


class LiquidityExposure(BaseModel):
    """Peak concurrent capital float across overlapping commitments."""
    model_config = ConfigDict(frozen=True)

    peak_timestamp: Optional[date] = None
    peak_amount: float = 0.0
    limit: float = 0.0
    deficit: float = 0.0
    overlapping: list[FloatEvent] = Field(default_factory=list)
    severity: LiquiditySeverity = LiquiditySeverity.OK


class PurgeAlert(BaseModel):
    """Forfeiture risk for one position over the plan window."""
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    points: float
    value_at_risk: float            # points × annual cost
    consecutive_inactive_years: int
    threshold: int
    purge_year: Optional[int] = None    # None = not (yet) forfeited
    severity: AlertSeverity
    message: str


class PostAwardReset(BaseModel):
    """Eligibility consequences of a successful draw."""
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    award_year: int
    points_zeroed: float
    ban_years: int = 0
    next_eligible_year: Optional[int] = None
    fresh_start_year: int = Field(
        description="Year point accumulation restarts; far past any plan horizon after a permanent ban",
    )
    affected_years: list[int] = Field(default_factory=list)
    is_permanent_ban: bool = False


class GroupAverage(BaseModel):
    """Effective standing of a party application."""
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    member_points: list[float] = Field(default_factory=list)
    raw_average: float = 0.0
    effective_points: float = 0.0
    method: GroupRounding = GroupRounding.FLOOR
    point_loss: float = 0.0
    warning: Optional[str] = None


# ── Cascade result ────────────────────────────────────────────────────


class CascadeResult(BaseModel):
    """
    Every consequence of one event, ready for the store to apply atomically.

    Component results are attached for audit when the event ran them.
    """
    model_config = ConfigDict(frozen=True)

    event_kind: EventKind
    point_mutations: list[PointMutation] = Field(default_factory=list)
    capital_reclassifications: list[CapitalReclassification] = Field(default_factory=list)
    plan_invalidations: list[PlanInvalidation] = Field(default_factory=list)
    alerts: list[CascadeAlert] = Field(default_factory=list)
    schedule_conflicts: list[ScheduleConflict] = Field(default_factory=list)

    post_award_reset: Optional[PostAwardReset] = None
    group_average: Optional[GroupAverage] = None
    allocation: Optional[AllocationResult] = None
    liquidity: Optional[LiquidityExposure] = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.point_mutations
            or self.capital_reclassifications
            or self.plan_invalidations
            or self.alerts
            or self.schedule_conflicts
        )
