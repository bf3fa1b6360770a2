"""
Portfolio Schemas — per-call working records built from a snapshot.
"""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class DrawType(StrEnum):
    PREFERENCE = "preference"
    LOTTERY = "lottery"
    BONUS = "bonus"


class PortfolioAsset(BaseModel):
    """One jurisdiction + category position, valued for liquidation ranking."""
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    points: float = 0.0
    annual_cost: float = 0.0
    sunk_cost: float = 0.0          # cumulative historical spend
    draw_type: DrawType = DrawType.PREFERENCE
    expected_award_year: int
    near_award: bool = False        # award within the imminent horizon


class FloatEvent(BaseModel):
    """Capital committed over the half-open window [start, end)."""
    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    category: str
    amount: float
    start: date
    end: date
    recoverable: bool = True
