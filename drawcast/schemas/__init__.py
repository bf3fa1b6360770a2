"""Pydantic models shared across the engine."""

from drawcast.schemas.events import (
    BudgetChangeEvent,
    CascadeContext,
    CascadeEvent,
    DeadlineMissedEvent,
    DrawOutcomeEvent,
    EventKind,
    PartyChangeEvent,
    ProfileChangeEvent,
    ProfileField,
)
from drawcast.schemas.plan import (
    ActionKind,
    Commitment,
    DrawOutcome,
    PlanAction,
    PlanSnapshot,
    PlanYear,
    PointBalance,
)
from drawcast.schemas.portfolio import DrawType, FloatEvent, PortfolioAsset
from drawcast.schemas.results import (
    AlertSeverity,
    AllocationResult,
    CapitalClass,
    CapitalReclassification,
    CascadeAlert,
    CascadeResult,
    ConflictType,
    GroupAverage,
    GroupRounding,
    InvalidationAction,
    LiquidityExposure,
    LiquiditySeverity,
    PlanInvalidation,
    PointMutation,
    PostAwardReset,
    PurgeAlert,
    ScheduleConflict,
)

__all__ = [
    "ActionKind",
    "AlertSeverity",
    "AllocationResult",
    "BudgetChangeEvent",
    "CapitalClass",
    "CapitalReclassification",
    "CascadeAlert",
    "CascadeContext",
    "CascadeEvent",
    "CascadeResult",
    "Commitment",
    "ConflictType",
    "DeadlineMissedEvent",
    "DrawOutcome",
    "DrawOutcomeEvent",
    "DrawType",
    "EventKind",
    "FloatEvent",
    "GroupAverage",
    "GroupRounding",
    "InvalidationAction",
    "LiquidityExposure",
    "LiquiditySeverity",
    "PartyChangeEvent",
    "PlanAction",
    "PlanInvalidation",
    "PlanSnapshot",
    "PlanYear",
    "PointBalance",
    "PointMutation",
    "PortfolioAsset",
    "PostAwardReset",
    "ProfileChangeEvent",
    "ProfileField",
    "PurgeAlert",
    "ScheduleConflict",
]
