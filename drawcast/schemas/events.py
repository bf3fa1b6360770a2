"""
Cascade Event Schemas — the closed set of life events the engine handles.

Every event carries a ``kind`` literal; ``CascadeEvent`` is the tagged
union used by the dispatcher. Adding a kind here without handling it in
``CascadeDispatcher.dispatch`` fails the exhaustiveness check.
"""

from datetime import date
from enum import StrEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from drawcast.schemas.plan import DrawOutcome


class EventKind(StrEnum):
    DRAW_OUTCOME = "draw_outcome"
    BUDGET_CHANGE = "budget_change"
    PROFILE_CHANGE = "profile_change"
    DEADLINE_MISSED = "deadline_missed"
    PARTY_CHANGE = "party_change"


class ProfileField(StrEnum):
    PLANNING_HORIZON = "planning_horizon"
    PHYSICAL_HORIZON = "physical_horizon"
    CAPITAL_FLOAT_TOLERANCE = "capital_float_tolerance"
    ACTIVITY_STYLE = "activity_style"    # weapon / method of take
    PARTY_SIZE = "party_size"


class DrawOutcomeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["draw_outcome"] = "draw_outcome"
    outcome: DrawOutcome
    jurisdiction: str
    category: str
    year: int
    commitment_id: Optional[str] = None
    # Falls back to the snapshot balance when omitted
    current_points: Optional[float] = Field(default=None, ge=0)


class BudgetChangeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["budget_change"] = "budget_change"
    old_budget: float = Field(ge=0)
    new_budget: float = Field(ge=0)


class ProfileChangeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["profile_change"] = "profile_change"
    field: ProfileField
    old_value: Any = None
    new_value: Any = None


class DeadlineMissedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["deadline_missed"] = "deadline_missed"
    jurisdiction: str
    category: str
    year: int
    deadline: date
    commitment_id: Optional[str] = None


class PartyChangeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["party_change"] = "party_change"
    jurisdiction: str
    category: str
    member_points: list[float] = Field(default_factory=list)
    previous_member_points: Optional[list[float]] = None


CascadeEvent = Annotated[
    Union[
        DrawOutcomeEvent,
        BudgetChangeEvent,
        ProfileChangeEvent,
        DeadlineMissedEvent,
        PartyChangeEvent,
    ],
    Field(discriminator="kind"),
]


class CascadeContext(BaseModel):
    """
    Caller-supplied facts the engine must not look up itself.

    ``current_year`` replaces any reading of the system clock.
    """
    model_config = ConfigDict(frozen=True)

    current_year: int
    annual_activity_budget: float = Field(default=0.0, ge=0)
    available_days: int = Field(default=0, ge=0)
