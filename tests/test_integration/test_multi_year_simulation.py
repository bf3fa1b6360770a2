"""
Multi-Year, Multi-Actor Simulation.

Replays a fixed sequence of life events for several planners, applying
each CascadeResult the way a store would, and asserts that two runs
produce byte-identical JSON.
"""

from datetime import date

from drawcast.cascade.dispatcher import CascadeDispatcher
from drawcast.cascade.scanners import detect_missed_deadlines, scan_purge_risk
from drawcast.rules.defaults import DEFAULT_RULEBOOK
from drawcast.schemas.events import (
    BudgetChangeEvent,
    CascadeContext,
    DeadlineMissedEvent,
    DrawOutcomeEvent,
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
from drawcast.schemas.results import CascadeResult, InvalidationAction

POSITIONS = [("CO", "elk"), ("WY", "moose"), ("NV", "deer"), ("AZ", "bighorn_sheep"), ("ID", "elk")]


def _initial_snapshot(seed: int) -> PlanSnapshot:
    years = [
        PlanYear(year=year, actions=[
            PlanAction(
                kind=ActionKind.HUNT if (year + seed + i) % 5 == 0 else ActionKind.APPLY,
                jurisdiction=j,
                category=c,
                cost=DEFAULT_RULEBOOK.annual_cost(j, c),
            )
            for i, (j, c) in enumerate(POSITIONS)
        ])
        for year in range(2026, 2032)
    ]
    points = [
        PointBalance(jurisdiction=j, category=c, points=float((seed + i) % 7))
        for i, (j, c) in enumerate(POSITIONS)
    ]
    commitments = [
        Commitment(
            commitment_id=f"{seed}-{j}-{c}",
            jurisdiction=j,
            category=c,
            year=2026,
            due_date=date(2026, 3, 1 + i),
            completed=i % 2 == 0,
        )
        for i, (j, c) in enumerate(POSITIONS)
    ]
    return PlanSnapshot(years=years, points=points, commitments=commitments)


def _apply(snapshot: PlanSnapshot, result: CascadeResult) -> PlanSnapshot:
    """Apply mutations and removals the way the calling store would."""
    balances = {(b.jurisdiction, b.category): b.points for b in snapshot.points}
    for m in result.point_mutations:
        balances[(m.jurisdiction, m.category)] = m.new_points

    removed = {
        (i.year, i.jurisdiction, i.category)
        for i in result.plan_invalidations
        if i.action == InvalidationAction.REMOVE
    }
    years = [
        PlanYear(year=y.year, actions=[
            a for a in y.actions if (y.year, a.jurisdiction, a.category) not in removed
        ])
        for y in snapshot.years
    ]
    return PlanSnapshot(
        years=years,
        points=[PointBalance(jurisdiction=j, category=c, points=p) for (j, c), p in balances.items()],
        commitments=snapshot.commitments,
    )


def _script(seed: int) -> list:
    return [
        DrawOutcomeEvent(outcome=DrawOutcome.NOT_AWARDED, jurisdiction="CO", category="elk", year=2026),
        DrawOutcomeEvent(outcome=DrawOutcome.AWARDED, jurisdiction="WY", category="moose", year=2026),
        BudgetChangeEvent(old_budget=1500, new_budget=400 + 50 * seed),
        PartyChangeEvent(
            jurisdiction="CO", category="elk",
            member_points=[5, 4, seed % 4], previous_member_points=[5, 4, 3, 2],
        ),
        ProfileChangeEvent(field=ProfileField.PLANNING_HORIZON, old_value=6, new_value=3),
        DrawOutcomeEvent(outcome=DrawOutcome.AWARDED, jurisdiction="AZ", category="bighorn_sheep", year=2027),
        DrawOutcomeEvent(outcome=DrawOutcome.NOT_AWARDED, jurisdiction="ID", category="elk", year=2027),
    ]


def _run_simulation(n_actors: int = 4) -> str:
    dispatcher = CascadeDispatcher()
    transcript: list[str] = []

    for seed in range(n_actors):
        snapshot = _initial_snapshot(seed)
        context = CascadeContext(current_year=2026, annual_activity_budget=1500, available_days=14)

        events = list(_script(seed))
        events.extend(detect_missed_deadlines(snapshot.commitments, today=date(2026, 4, 1)))

        for event in events:
            result = dispatcher.dispatch(event, snapshot, context)
            transcript.append(result.model_dump_json())
            snapshot = _apply(snapshot, result)

        for alert in scan_purge_risk(snapshot, DEFAULT_RULEBOOK):
            transcript.append(alert.model_dump_json())
        transcript.append(snapshot.model_dump_json())

    return "\n".join(transcript)


class TestMultiYearSimulation:
    def test_byte_identical_across_runs(self):
        assert _run_simulation() == _run_simulation()

    def test_balances_never_negative(self):
        dispatcher = CascadeDispatcher()
        snapshot = _initial_snapshot(3)
        context = CascadeContext(current_year=2026, annual_activity_budget=1500)
        for event in _script(3):
            result = dispatcher.dispatch(event, snapshot, context)
            snapshot = _apply(snapshot, result)
            assert all(b.points >= 0 for b in snapshot.points)

    def test_permanent_ban_clears_position(self):
        dispatcher = CascadeDispatcher()
        snapshot = _initial_snapshot(0)
        context = CascadeContext(current_year=2026, annual_activity_budget=1500)
        event = DrawOutcomeEvent(
            outcome=DrawOutcome.AWARDED, jurisdiction="AZ", category="bighorn_sheep", year=2027
        )
        snapshot = _apply(snapshot, dispatcher.dispatch(event, snapshot, context))

        later = [
            a for y in snapshot.years if y.year > 2027
            for a in y.actions if (a.jurisdiction, a.category) == ("AZ", "bighorn_sheep")
        ]
        assert later == []
        assert snapshot.points_for("AZ", "bighorn_sheep") == 0

    def test_missed_deadlines_cascade(self):
        snapshot = _initial_snapshot(1)
        missed = detect_missed_deadlines(snapshot.commitments, today=date(2026, 4, 1))
        assert [(m.jurisdiction, m.category) for m in missed] == [("WY", "moose"), ("AZ", "bighorn_sheep")]
        assert all(isinstance(m, DeadlineMissedEvent) for m in missed)

        result = CascadeDispatcher().dispatch(missed[0], snapshot, CascadeContext(current_year=2026))
        assert len(result.plan_invalidations) == 1
