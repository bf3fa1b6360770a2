"""
Asset-Preservation Allocator — budget cut → liquidation order.

Preservation hierarchy:
1. Positions within the imminent award horizon are protected
2. Sunk cost raises the floor (every dollar invested counts)
3. Preference equity compounds; bonus equity less so; lottery has none
4. Cheap-to-maintain positions with long history are efficient

Positions are ranked by preservation score and the budget is filled
greedily from the strongest position down. Every decision is traced.
"""

from dataclasses import dataclass

import structlog

from drawcast.schemas.portfolio import DrawType, PortfolioAsset
from drawcast.schemas.results import AllocationResult

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

NEAR_AWARD_BONUS: float = 1000.0
SUNK_COST_WEIGHT: float = 0.5
EFFICIENCY_WEIGHT: float = 10.0
EQUITY_PER_POINT: dict[DrawType, float] = {
    DrawType.PREFERENCE: 50.0,
    DrawType.BONUS: 20.0,
    DrawType.LOTTERY: 0.0,
}


@dataclass(frozen=True)
class ScoredAsset:
    asset: PortfolioAsset
    preservation_score: float


class AssetPreservationAllocator:
    """Decide which positions survive a reduced annual budget."""

    def __init__(
        self,
        near_award_bonus: float = NEAR_AWARD_BONUS,
        sunk_cost_weight: float = SUNK_COST_WEIGHT,
        efficiency_weight: float = EFFICIENCY_WEIGHT,
        equity_per_point: dict[DrawType, float] | None = None,
    ):
        self.near_award_bonus = near_award_bonus
        self.sunk_cost_weight = sunk_cost_weight
        self.efficiency_weight = efficiency_weight
        self.equity_per_point = equity_per_point or EQUITY_PER_POINT.copy()

    def preservation_score(self, asset: PortfolioAsset) -> float:
        """
        score = near-award bonus + sunk·0.5 + equity(category, points) + efficiency

        efficiency = (sunk / annual cost)·10, or 0 for free positions.
        """
        score = self.near_award_bonus if asset.near_award else 0.0
        score += asset.sunk_cost * self.sunk_cost_weight
        score += asset.points * self.equity_per_point.get(asset.draw_type, 0.0)
        if asset.annual_cost > 0:
            score += (asset.sunk_cost / asset.annual_cost) * self.efficiency_weight
        return score

    def allocate(self, assets: list[PortfolioAsset], new_budget: float) -> AllocationResult:
        """
        Partition assets into kept / pruned under ``new_budget``.

        Ranking is weakest-first by (near_award, score); ties keep input
        order before the reversal so the partition is deterministic. Filling
        walks the reversed ranking, so near-award positions are offered
        the budget before anything else.

        ``total_saved`` is Σcost − new_budget + leftover, i.e. the annual
        cost of everything pruned.
        """
        reasoning: list[str] = []

        scored: list[ScoredAsset] = []
        for asset in assets:
            if asset.near_award:
                reasoning.append(
                    f"{asset.jurisdiction} {asset.category}: PROTECTED, within award horizon "
                    f"(expected {asset.expected_award_year})"
                )
            scored.append(ScoredAsset(asset=asset, preservation_score=self.preservation_score(asset)))

        scored.sort(key=lambda s: (s.asset.near_award, s.preservation_score))

        kept: list[PortfolioAsset] = []
        pruned: list[PortfolioAsset] = []
        remaining = new_budget

        for item in reversed(scored):
            asset = item.asset
            if remaining >= asset.annual_cost:
                kept.append(asset)
                remaining -= asset.annual_cost
                reasoning.append(
                    f"KEPT: {asset.jurisdiction} {asset.category} "
                    f"(score {item.preservation_score:.1f}, ${asset.annual_cost:,.0f}/yr), "
                    f"${remaining:,.0f} budget remaining"
                )
            else:
                pruned.append(asset)
                reasoning.append(
                    f"PRUNED: {asset.jurisdiction} {asset.category} "
                    f"({asset.draw_type.value}, {asset.points:g} pts, ${asset.annual_cost:,.0f}/yr), "
                    f"insufficient budget"
                )

        total_saved = sum(a.annual_cost for a in assets) - new_budget + remaining

        logger.info(
            "assets_allocated",
            n_assets=len(assets),
            n_kept=len(kept),
            n_pruned=len(pruned),
            new_budget=new_budget,
            total_saved=round(total_saved, 2),
        )

        return AllocationResult(
            kept=kept,
            pruned=pruned,
            total_saved=total_saved,
            reasoning=reasoning,
        )
