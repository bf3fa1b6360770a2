"""
Property-Based Tests for the Cascade Engine.

Uses Hypothesis to test invariants that must hold for ALL inputs:
- Allocator: deterministic, complete partition, within budget
- Allocator: a lone near-award position that fits is never pruned
- Cumulative odds: bounded and non-decreasing
- Draw outcomes: always at least one mutation, balances never negative
- Group averages: effective points never above the raw average for floor
"""

from datetime import date, timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from drawcast.cascade.dispatcher import CascadeDispatcher
from drawcast.engine.allocator import AssetPreservationAllocator
from drawcast.engine.group import GroupDrawAverager
from drawcast.engine.liquidity import LiquidityScheduler
from drawcast.engine.odds import DrawOddsModel
from drawcast.rules.defaults import DEFAULT_RULEBOOK
from drawcast.schemas.events import BudgetChangeEvent, CascadeContext, DrawOutcomeEvent
from drawcast.schemas.plan import ActionKind, DrawOutcome, PlanAction, PlanSnapshot, PlanYear, PointBalance
from drawcast.schemas.portfolio import DrawType, FloatEvent, PortfolioAsset
from drawcast.schemas.results import GroupRounding

JURISDICTIONS = sorted(DEFAULT_RULEBOOK.jurisdictions)
CATEGORIES = ["elk", "deer", "moose", "bighorn_sheep"]

money = st.floats(min_value=0, max_value=5000, allow_nan=False, allow_infinity=False)
points = st.floats(min_value=0, max_value=30, allow_nan=False, allow_infinity=False)


@st.composite
def assets(draw, near_award=None):
    cost = draw(money)
    pts = draw(points)
    near = draw(st.booleans()) if near_award is None else near_award
    return PortfolioAsset(
        jurisdiction=draw(st.sampled_from(JURISDICTIONS)),
        category=draw(st.sampled_from(CATEGORIES)),
        points=pts,
        annual_cost=cost,
        sunk_cost=pts * cost,
        draw_type=draw(st.sampled_from(list(DrawType))),
        expected_award_year=2027 if near else 2035,
        near_award=near,
    )


@st.composite
def snapshots(draw):
    years = []
    for year in range(2026, 2026 + draw(st.integers(min_value=0, max_value=4))):
        actions = draw(st.lists(
            st.builds(
                PlanAction,
                kind=st.sampled_from(list(ActionKind)),
                jurisdiction=st.sampled_from(JURISDICTIONS),
                category=st.sampled_from(CATEGORIES),
                cost=money,
            ),
            max_size=5,
        ))
        years.append(PlanYear(year=year, actions=actions))
    balances = draw(st.lists(
        st.builds(
            PointBalance,
            jurisdiction=st.sampled_from(JURISDICTIONS),
            category=st.sampled_from(CATEGORIES),
            points=points,
        ),
        max_size=6,
    ))
    return PlanSnapshot(years=years, points=balances)


# ── Allocator Properties ──────────────────────────────────────────────


class TestAllocatorProperties:
    @given(portfolio=st.lists(assets(), max_size=8), budget=money)
    @settings(max_examples=100)
    def test_partition_within_budget(self, portfolio, budget):
        result = AssetPreservationAllocator().allocate(portfolio, budget)
        assert len(result.kept) + len(result.pruned) == len(portfolio)
        assert sum(a.annual_cost for a in result.kept) <= budget + 1e-6

    @given(portfolio=st.lists(assets(), max_size=8), budget=money)
    @settings(max_examples=50)
    def test_deterministic(self, portfolio, budget):
        allocator = AssetPreservationAllocator()
        assert allocator.allocate(portfolio, budget) == allocator.allocate(portfolio, budget)

    @given(
        others=st.lists(assets(near_award=False), max_size=6),
        near=assets(near_award=True),
        budget=money,
    )
    @settings(max_examples=100)
    def test_near_award_never_pruned_when_it_fits(self, others, near, budget):
        result = AssetPreservationAllocator().allocate(others + [near], budget)
        if near.annual_cost <= budget:
            assert near in result.kept
        else:
            assert near in result.pruned

    @given(portfolio=st.lists(assets(), min_size=1, max_size=8))
    @settings(max_examples=50)
    def test_budget_covering_everything_prunes_nothing(self, portfolio):
        total = sum(a.annual_cost for a in portfolio) + 1.0
        assert AssetPreservationAllocator().allocate(portfolio, total).pruned == []


# ── Odds Properties ───────────────────────────────────────────────────


class TestCumulativeOddsProperties:
    @given(
        p=st.floats(min_value=-1, max_value=2, allow_nan=False),
        horizon=st.integers(min_value=0, max_value=40),
    )
    @settings(max_examples=100)
    def test_bounded_and_non_decreasing(self, p, horizon):
        result = DrawOddsModel().cumulative_odds(p, horizon)
        values = [y.cumulative for y in result.year_by_year]
        assert all(0.0 <= v <= 1.0 for v in values)
        assert all(a <= b for a, b in zip(values, values[1:]))
        assert len(values) == horizon


# ── Liquidity Properties ──────────────────────────────────────────────


def _first_peak_by_boundary_scan(events: list[FloatEvent]):
    """Total the open windows at every boundary; the first strict maximum wins."""
    boundaries = sorted({e.start for e in events} | {e.end for e in events if e.start < e.end})
    peak_at, peak = None, 0.0
    for boundary in boundaries:
        total = sum(e.amount for e in events if e.start <= boundary < e.end)
        if total > peak + 1e-6:
            peak_at, peak = boundary, total
    return peak_at, peak


class TestLiquidityProperties:
    @given(
        windows=st.lists(
            st.tuples(
                # Whole tenths: distinct totals differ by at least 0.1
                st.integers(min_value=0, max_value=50_000).map(lambda tenths: tenths / 10),
                st.integers(min_value=0, max_value=300),
                st.integers(min_value=0, max_value=120),
            ),
            max_size=10,
        ),
        limit=money,
    )
    @settings(max_examples=200)
    def test_peak_matches_boundary_scan(self, windows, limit):
        origin = date(2026, 1, 1)
        events = [
            FloatEvent(
                jurisdiction="CO", category="elk", amount=amount,
                start=origin + timedelta(days=offset),
                end=origin + timedelta(days=offset + length),
            )
            for amount, offset, length in windows
        ]
        result = LiquidityScheduler().find_peak_exposure(events, limit)

        expected_at, expected_amount = _first_peak_by_boundary_scan(events)
        assert abs(result.peak_amount - expected_amount) < 1e-6
        assert result.peak_timestamp == expected_at
        assert result.deficit >= 0

    @given(
        windows=st.lists(
            st.tuples(
                st.sampled_from([0.1, 0.2, 0.3, 0.7]),
                st.integers(min_value=0, max_value=20),
                st.integers(min_value=1, max_value=10),
            ),
            max_size=12,
        ),
    )
    @settings(max_examples=300)
    def test_decimal_fees_peak_date_is_stable(self, windows):
        origin = date(2026, 1, 1)
        events = [
            FloatEvent(
                jurisdiction="CO", category="elk", amount=amount,
                start=origin + timedelta(days=offset),
                end=origin + timedelta(days=offset + length),
            )
            for amount, offset, length in windows
        ]
        result = LiquidityScheduler().find_peak_exposure(events, limit=100)
        expected_at, _ = _first_peak_by_boundary_scan(events)
        assert result.peak_timestamp == expected_at


# ── Group Properties ──────────────────────────────────────────────────


class TestGroupProperties:
    @given(members=st.lists(points, min_size=1, max_size=6))
    @settings(max_examples=100)
    def test_floor_never_exceeds_raw(self, members):
        result = GroupDrawAverager({}, default_method=GroupRounding.FLOOR).average("CO", members)
        assert result.effective_points <= result.raw_average + 1e-9
        assert result.point_loss >= -1e-9


# ── Cascade Properties ────────────────────────────────────────────────


class TestCascadeProperties:
    @given(
        snapshot=snapshots(),
        jurisdiction=st.sampled_from(JURISDICTIONS + ["ZZ"]),
        category=st.sampled_from(CATEGORIES),
        outcome=st.sampled_from(list(DrawOutcome)),
        year=st.integers(min_value=2026, max_value=2030),
        budget=money,
        days=st.integers(min_value=0, max_value=60),
    )
    @settings(max_examples=100)
    def test_draw_outcome_always_mutates(self, snapshot, jurisdiction, category, outcome, year, budget, days):
        event = DrawOutcomeEvent(outcome=outcome, jurisdiction=jurisdiction, category=category, year=year)
        context = CascadeContext(current_year=2026, annual_activity_budget=budget, available_days=days)
        result = CascadeDispatcher().dispatch(event, snapshot, context)

        assert len(result.point_mutations) >= 1
        assert all(m.new_points >= 0 for m in result.point_mutations)
        if outcome == DrawOutcome.AWARDED:
            assert result.point_mutations[0].new_points == 0

    @given(snapshot=snapshots(), old=money, new=money)
    @settings(max_examples=100)
    def test_budget_increase_never_removes(self, snapshot, old, new):
        context = CascadeContext(current_year=2026)
        result = CascadeDispatcher().dispatch(
            BudgetChangeEvent(old_budget=min(old, new), new_budget=max(old, new)), snapshot, context
        )
        assert result.plan_invalidations == []

    @given(snapshot=snapshots(), budget=money)
    @settings(max_examples=50)
    def test_dispatch_is_pure(self, snapshot, budget):
        before = snapshot.model_dump_json()
        context = CascadeContext(current_year=2026)
        event = BudgetChangeEvent(old_budget=budget + 1, new_budget=budget)
        first = CascadeDispatcher().dispatch(event, snapshot, context)
        second = CascadeDispatcher().dispatch(event, snapshot, context)
        assert first.model_dump_json() == second.model_dump_json()
        assert snapshot.model_dump_json() == before
