"""
Plan Snapshot Schemas — read-only inputs owned by the calling store.

A snapshot is everything the engine is allowed to look at:
- Plan years and their scheduled actions
- Current point balances
- Commitments (milestones) with optional capital float windows
"""

from datetime import date
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ActionKind(StrEnum):
    APPLY = "apply"
    BUY_POINT = "buy_point"
    HUNT = "hunt"              # converting points into an award
    SCOUT = "scout"


# Actions that keep a position alive for forfeiture purposes
QUALIFYING_ACTIVITY: frozenset[ActionKind] = frozenset(
    {ActionKind.APPLY, ActionKind.BUY_POINT, ActionKind.HUNT}
)


class DrawOutcome(StrEnum):
    AWARDED = "awarded"
    NOT_AWARDED = "not_awarded"


class PlanAction(BaseModel):
    """One scheduled action for a jurisdiction + category in a plan year."""
    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    jurisdiction: str
    category: str
    cost: float = 0.0
    due_date: Optional[date] = None
    description: str = ""


class PlanYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    actions: list[PlanAction] = Field(default_factory=list)

    def references(self, jurisdiction: str, category: str) -> bool:
        return any(
            a.jurisdiction == jurisdiction and a.category == category
            for a in self.actions
        )


class PointBalance(BaseModel):
    """Accumulated standing for one position. Never negative."""
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    points: float = Field(default=0.0, ge=0)


class Commitment(BaseModel):
    """
    A milestone in the external calendar.

    The optional float window describes capital that leaves on
    ``float_start`` and (if refundable) returns on ``float_end``.
    """
    model_config = ConfigDict(frozen=True)

    commitment_id: str
    kind: ActionKind = ActionKind.APPLY
    jurisdiction: str
    category: str
    year: int
    due_date: Optional[date] = None
    completed: bool = False
    draw_outcome: Optional[DrawOutcome] = None
    total_cost: float = 0.0

    float_amount: float = 0.0
    float_start: Optional[date] = None
    float_end: Optional[date] = None
    refundable: bool = True


class PlanSnapshot(BaseModel):
    """Read-only view of the plan handed to the dispatcher."""
    model_config = ConfigDict(frozen=True)

    years: list[PlanYear] = Field(default_factory=list)
    points: list[PointBalance] = Field(default_factory=list)
    commitments: list[Commitment] = Field(default_factory=list)

    def points_for(self, jurisdiction: str, category: str) -> float:
        for balance in self.points:
            if balance.jurisdiction == jurisdiction and balance.category == category:
                return balance.points
        return 0.0

    def has_year(self, year: int) -> bool:
        return any(y.year == year for y in self.years)

    def actions_in(self, year: int) -> list[PlanAction]:
        return [a for y in self.years if y.year == year for a in y.actions]

    def years_referencing(self, jurisdiction: str, category: str) -> list[int]:
        """Plan years (in snapshot order) with any action for the position."""
        return [y.year for y in self.years if y.references(jurisdiction, category)]

    def positions(self) -> list[tuple[str, str]]:
        """Distinct jurisdiction+category pairs in plan order, first occurrence wins."""
        seen: dict[tuple[str, str], None] = {}
        for y in self.years:
            for a in y.actions:
                seen.setdefault((a.jurisdiction, a.category), None)
        return list(seen)
