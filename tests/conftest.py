"""
Shared fixtures for DrawCast tests.

Builders return plain pydantic models; no fixture touches the clock,
the filesystem, or the settings singleton.
"""

import pytest

from drawcast.cascade.dispatcher import CascadeDispatcher
from drawcast.rules.defaults import DEFAULT_RULEBOOK
from drawcast.schemas.events import CascadeContext
from drawcast.schemas.plan import ActionKind, PlanAction, PlanSnapshot, PlanYear, PointBalance


def _action(kind: ActionKind, jurisdiction: str, category: str, cost: float = 0.0) -> PlanAction:
    return PlanAction(kind=kind, jurisdiction=jurisdiction, category=category, cost=cost)


@pytest.fixture
def rulebook():
    return DEFAULT_RULEBOOK


@pytest.fixture
def dispatcher():
    return CascadeDispatcher()


@pytest.fixture
def make_action():
    return _action


@pytest.fixture
def make_year():
    def _year(year: int, *actions: PlanAction) -> PlanYear:
        return PlanYear(year=year, actions=list(actions))
    return _year


@pytest.fixture
def make_snapshot():
    def _snapshot(years=(), points=None, commitments=()) -> PlanSnapshot:
        balances = [
            PointBalance(jurisdiction=j, category=c, points=p)
            for (j, c), p in (points or {}).items()
        ]
        return PlanSnapshot(years=list(years), points=balances, commitments=list(commitments))
    return _snapshot


@pytest.fixture
def context():
    return CascadeContext(current_year=2026, annual_activity_budget=5000, available_days=20)


@pytest.fixture
def sample_snapshot():
    """Three-year, four-position plan used across cascade tests."""
    years = [
        PlanYear(year=2026, actions=[
            _action(ActionKind.APPLY, "CO", "elk", 210),
            _action(ActionKind.BUY_POINT, "WY", "moose", 165),
            _action(ActionKind.APPLY, "NV", "elk", 180),
            _action(ActionKind.APPLY, "ID", "elk", 850),
        ]),
        PlanYear(year=2027, actions=[
            _action(ActionKind.HUNT, "CO", "elk", 1500),
            _action(ActionKind.APPLY, "WY", "moose", 165),
            _action(ActionKind.APPLY, "NV", "elk", 180),
        ]),
        PlanYear(year=2028, actions=[
            _action(ActionKind.APPLY, "WY", "moose", 165),
            _action(ActionKind.APPLY, "NV", "elk", 180),
            _action(ActionKind.APPLY, "CO", "elk", 210),
        ]),
    ]
    points = [
        PointBalance(jurisdiction="CO", category="elk", points=4),
        PointBalance(jurisdiction="WY", category="moose", points=6),
        PointBalance(jurisdiction="NV", category="elk", points=3),
    ]
    return PlanSnapshot(years=years, points=points)
