"""
Draw Odds Model.

Estimates the probability of drawing this year under each point system
and projects it over a multi-year horizon.

Implements:
- Preference / hybrid / dual: rank-based pool plus a random remainder
- Bonus and bonus-squared: weighted lottery, chances = (points+1)^k
- Random: uniform lottery, no accrual
- Cumulative odds: C = 1 - (1-p)^n
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from drawcast.rules.tables import JurisdictionRules, PointSystem
from drawcast.schemas.portfolio import DrawType

# ── Configuration ─────────────────────────────────────────────────────────

DEFAULT_PREFERENCE_SHARE: dict[PointSystem, float] = {
    PointSystem.PREFERENCE: 0.80,
    PointSystem.HYBRID: 0.75,
    PointSystem.DUAL: 0.75,
}

# Tag quota assumed when the caller has none
DEFAULT_QUOTA: dict[PointSystem, int] = {
    PointSystem.PREFERENCE: 50,
    PointSystem.HYBRID: 50,
    PointSystem.DUAL: 50,
    PointSystem.BONUS_SQUARED: 5,
    PointSystem.BONUS: 15,
    PointSystem.RANDOM: 50,
}

# Estimated applicants per tag
BONUS_SQUARED_FIELD: int = 20
BONUS_FIELD: int = 15
RANDOM_FIELD: int = 10

PREFERENCE_NR_DRAWN_ODDS: float = 0.90
PREFERENCE_NR_WAITING_ODDS: float = 0.05

LIKELY_AWARD_ODDS: float = 0.5
MAX_SIMULATION_YEARS: int = 30
UNREACHABLE_YEARS: int = 99


@dataclass(frozen=True)
class OddsEstimate:
    """Single-year draw estimate for one position."""
    odds_this_year: float           # 0-1
    years_to_likely_award: int
    points_at_award: float
    system: Optional[PointSystem]
    explanation: str = ""


@dataclass(frozen=True)
class YearOdds:
    year: int                       # 1-based offset into the horizon
    cumulative: float


@dataclass(frozen=True)
class CumulativeOdds:
    single_year_odds: float
    cumulative_odds: float
    horizon_years: int
    year_by_year: list[YearOdds] = field(default_factory=list)
    median_award_year: Optional[int] = None     # first year with C >= 0.5


def classify_draw_type(system: Optional[PointSystem]) -> DrawType:
    """Collapse every point system into preference / lottery / bonus."""
    if system == PointSystem.RANDOM:
        return DrawType.LOTTERY
    if system in (PointSystem.BONUS, PointSystem.BONUS_SQUARED):
        return DrawType.BONUS
    return DrawType.PREFERENCE


def is_lottery_play(system: Optional[PointSystem]) -> bool:
    """Pure lotteries have no trajectory; they can never be 'stalled'."""
    return system == PointSystem.RANDOM


def accrues_points(system: Optional[PointSystem]) -> bool:
    return system != PointSystem.RANDOM


class DrawOddsModel:
    """
    Per-system draw probability.

    Preference shares can be overridden per system; otherwise the
    published splits in DEFAULT_PREFERENCE_SHARE are used.
    """

    def __init__(self, preference_shares: Optional[dict[PointSystem, float]] = None):
        self.preference_shares = preference_shares or DEFAULT_PREFERENCE_SHARE.copy()

    def compute_odds(
        self,
        system: Optional[PointSystem],
        user_points: float,
        required: float,
        quota: int = 0,
        preference_share: Optional[float] = None,
    ) -> OddsEstimate:
        """Estimate this year's odds and the years until odds are likely (>= 50%)."""
        if system is None:
            return OddsEstimate(0.0, UNREACHABLE_YEARS, 0.0, None, "Unknown point system")

        tags = quota if quota > 0 else DEFAULT_QUOTA.get(system, 50)
        share = preference_share
        if share is None:
            share = self.preference_shares.get(system, DEFAULT_PREFERENCE_SHARE[PointSystem.PREFERENCE])

        match system:
            case PointSystem.PREFERENCE | PointSystem.DUAL:
                return self._preference(system, user_points, required, tags, share)
            case PointSystem.HYBRID:
                return self._hybrid(user_points, required, tags, share)
            case PointSystem.PREFERENCE_NR:
                return self._preference_nr(user_points, required)
            case PointSystem.BONUS_SQUARED:
                return self._weighted(system, user_points, required, tags, 2, BONUS_SQUARED_FIELD)
            case PointSystem.BONUS:
                return self._weighted(system, user_points, required, tags, 1, BONUS_FIELD)
            case PointSystem.RANDOM:
                return self._random(tags)

    def compute_for(
        self,
        rules: Optional[JurisdictionRules],
        user_points: float,
        required: float,
        quota: int = 0,
    ) -> OddsEstimate:
        """Odds under a jurisdiction's own rules; its preference share beats the defaults."""
        if rules is None:
            return self.compute_odds(None, user_points, required, quota)
        return self.compute_odds(
            rules.point_system,
            user_points,
            required,
            quota,
            preference_share=rules.preference_share,
        )

    def cumulative_odds(self, single_year_odds: float, horizon_years: int) -> CumulativeOdds:
        """
        Project single-year odds over a horizon: C(n) = 1 - (1-p)^n.

        The running survival product only ever shrinks, so the cumulative
        sequence is non-decreasing.
        """
        p = min(1.0, max(0.0, single_year_odds))
        horizon = max(0, horizon_years)

        year_by_year: list[YearOdds] = []
        median: Optional[int] = None
        survival = 1.0
        for year in range(1, horizon + 1):
            survival *= 1.0 - p
            cumulative = 1.0 - survival
            year_by_year.append(YearOdds(year=year, cumulative=cumulative))
            if median is None and cumulative >= LIKELY_AWARD_ODDS:
                median = year

        return CumulativeOdds(
            single_year_odds=p,
            cumulative_odds=year_by_year[-1].cumulative if year_by_year else 0.0,
            horizon_years=horizon,
            year_by_year=year_by_year,
            median_award_year=median,
        )

    # ── Systems ──────────────────────────────────────────────────────────

    def _preference(
        self,
        system: PointSystem,
        user_points: float,
        required: float,
        tags: int,
        share: float,
    ) -> OddsEstimate:
        if user_points >= required:
            return OddsEstimate(
                odds_this_year=share,
                years_to_likely_award=0,
                points_at_award=user_points,
                system=system,
                explanation=(
                    f"Enough points ({user_points:g} >= {required:g}). "
                    f"{share:.0%} chance in the preference pool."
                ),
            )
        years_needed = math.ceil(required - user_points)
        random_odds = (1.0 - share) / tags
        return OddsEstimate(
            odds_this_year=random_odds,
            years_to_likely_award=years_needed,
            points_at_award=required,
            system=system,
            explanation=(
                f"Need {years_needed} more year(s) to reach {required:g} points. "
                f"{random_odds:.2%} random chance each year."
            ),
        )

    def _hybrid(self, user_points: float, required: float, tags: int, share: float) -> OddsEstimate:
        random_share = 1.0 - share
        if user_points >= required:
            return OddsEstimate(
                odds_this_year=min(1.0, share + random_share / tags),
                years_to_likely_award=0,
                points_at_award=user_points,
                system=PointSystem.HYBRID,
                explanation=f"Enough points ({user_points:g} >= {required:g}). Preference pool plus random chance.",
            )
        years_needed = math.ceil(required - user_points)
        random_odds = random_share / tags
        return OddsEstimate(
            odds_this_year=random_odds,
            years_to_likely_award=years_needed,
            points_at_award=required,
            system=PointSystem.HYBRID,
            explanation=f"Need {years_needed} more year(s). {random_odds:.2%} random chance each year.",
        )

    def _preference_nr(self, user_points: float, required: float) -> OddsEstimate:
        if user_points >= required:
            return OddsEstimate(
                PREFERENCE_NR_DRAWN_ODDS, 0, user_points, PointSystem.PREFERENCE_NR,
                f"Enough preference points ({user_points:g} >= {required:g}).",
            )
        years_needed = math.ceil(required - user_points)
        return OddsEstimate(
            PREFERENCE_NR_WAITING_ODDS, years_needed, required, PointSystem.PREFERENCE_NR,
            f"Need {years_needed} more year(s) of nonresident preference points.",
        )

    def _weighted(
        self,
        system: PointSystem,
        user_points: float,
        required: float,
        tags: int,
        exponent: int,
        field_multiplier: int,
    ) -> OddsEstimate:
        """Weighted lottery: each applicant holds (points+1)^exponent chances."""
        est_applicants = tags * field_multiplier
        avg_chances = (required / 2 + 1) ** exponent
        total_chances = max(est_applicants * avg_chances, 1.0)

        def odds_at(points: float) -> float:
            return min(1.0, ((points + 1) ** exponent) * tags / total_chances)

        odds = odds_at(user_points)

        years = 0
        points = user_points
        while years < MAX_SIMULATION_YEARS and odds_at(points) < LIKELY_AWARD_ODDS:
            points += 1
            years += 1

        return OddsEstimate(
            odds_this_year=odds,
            years_to_likely_award=years,
            points_at_award=points,
            system=system,
            explanation=(
                f"({user_points:g}+1)^{exponent} = {(user_points + 1) ** exponent:g} chances. "
                f"{odds:.1%} estimated odds this year."
            ),
        )

    def _random(self, tags: int) -> OddsEstimate:
        odds = tags / max(tags * RANDOM_FIELD, 1)
        return OddsEstimate(
            odds_this_year=odds,
            years_to_likely_award=math.ceil(1 / max(odds, 0.01)),
            points_at_award=0.0,
            system=PointSystem.RANDOM,
            explanation=f"{odds:.1%} chance every year. No points; equal odds for all.",
        )
