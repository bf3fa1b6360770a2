"""
Asset-Preservation Allocator Tests.
"""

import pytest

from drawcast.engine.allocator import AssetPreservationAllocator
from drawcast.schemas.portfolio import DrawType, PortfolioAsset


def _asset(
    jurisdiction: str,
    category: str = "elk",
    points: float = 0,
    annual_cost: float = 100,
    draw_type: DrawType = DrawType.PREFERENCE,
    near_award: bool = False,
) -> PortfolioAsset:
    return PortfolioAsset(
        jurisdiction=jurisdiction,
        category=category,
        points=points,
        annual_cost=annual_cost,
        sunk_cost=points * annual_cost,
        draw_type=draw_type,
        expected_award_year=2027 if near_award else 2035,
        near_award=near_award,
    )


class TestPreservationScore:
    def setup_method(self):
        self.allocator = AssetPreservationAllocator()

    def test_preference_score(self):
        """sunk 1000·0.5 + 10·50 equity + (1000/100)·10 efficiency."""
        assert self.allocator.preservation_score(_asset("CO", points=10)) == pytest.approx(1100)

    def test_bonus_equity_is_lower(self):
        pref = _asset("CO", points=5, draw_type=DrawType.PREFERENCE)
        bonus = _asset("AZ", points=5, draw_type=DrawType.BONUS)
        assert self.allocator.preservation_score(pref) > self.allocator.preservation_score(bonus)

    def test_lottery_with_no_history_scores_zero(self):
        assert self.allocator.preservation_score(_asset("ID", draw_type=DrawType.LOTTERY)) == 0

    def test_near_award_bonus(self):
        assert self.allocator.preservation_score(_asset("ID", near_award=True)) == pytest.approx(1000)

    def test_free_position_has_no_efficiency_term(self):
        free = _asset("NM", points=0, annual_cost=0, draw_type=DrawType.LOTTERY)
        assert self.allocator.preservation_score(free) == 0


class TestAllocate:
    def setup_method(self):
        self.allocator = AssetPreservationAllocator()
        self.pref = _asset("CO", points=10, annual_cost=100)
        self.bonus = _asset("AZ", points=2, annual_cost=50, draw_type=DrawType.BONUS)
        self.lottery = _asset("ID", points=0, annual_cost=200, draw_type=DrawType.LOTTERY)

    def test_weakest_pruned_first(self):
        result = self.allocator.allocate([self.lottery, self.pref, self.bonus], new_budget=160)
        assert result.kept == [self.pref, self.bonus]
        assert result.pruned == [self.lottery]
        assert result.total_saved == pytest.approx(200)

    def test_budget_covers_everything(self):
        result = self.allocator.allocate([self.lottery, self.pref, self.bonus], new_budget=1000)
        assert result.pruned == []
        assert len(result.kept) == 3
        assert result.total_saved == pytest.approx(0)

    def test_zero_budget_prunes_paid_positions(self):
        result = self.allocator.allocate([self.pref, self.bonus], new_budget=0)
        assert result.kept == []
        assert len(result.pruned) == 2

    def test_near_award_offered_budget_first(self):
        near = _asset("WY", category="moose", annual_cost=300, draw_type=DrawType.LOTTERY, near_award=True)
        result = self.allocator.allocate([self.pref, near], new_budget=300)
        assert near in result.kept
        assert self.pref in result.pruned

    def test_near_award_outranks_any_score(self):
        """A near-award position with zero history still beats a heavy one."""
        heavy = _asset("CO", points=25, annual_cost=100)
        near = _asset("NV", points=0, annual_cost=100, near_award=True)
        result = self.allocator.allocate([heavy, near], new_budget=100)
        assert result.kept == [near]

    def test_partition_is_complete(self):
        assets = [self.lottery, self.pref, self.bonus]
        result = self.allocator.allocate(assets, new_budget=120)
        assert len(result.kept) + len(result.pruned) == len(assets)
        assert sum(a.annual_cost for a in result.kept) <= 120

    def test_skips_unaffordable_but_keeps_cheaper(self):
        """Greedy fill continues past an asset that does not fit."""
        big = _asset("CO", points=20, annual_cost=500)
        small = _asset("AZ", points=1, annual_cost=40, draw_type=DrawType.BONUS)
        result = self.allocator.allocate([big, small], new_budget=100)
        assert result.kept == [small]
        assert result.pruned == [big]

    def test_reasoning_traces_every_decision(self):
        near = _asset("WY", category="moose", near_award=True)
        result = self.allocator.allocate([self.pref, near], new_budget=100)
        assert any("PROTECTED" in line for line in result.reasoning)
        assert sum(line.startswith(("KEPT", "PRUNED")) for line in result.reasoning) == 2

    def test_deterministic(self):
        assets = [self.lottery, self.pref, self.bonus]
        first = self.allocator.allocate(assets, new_budget=160)
        second = self.allocator.allocate(assets, new_budget=160)
        assert first == second

    def test_empty_portfolio(self):
        result = self.allocator.allocate([], new_budget=500)
        assert result.kept == []
        assert result.pruned == []
        assert result.total_saved == 0
