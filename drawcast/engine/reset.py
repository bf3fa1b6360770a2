"""
Post-Award Reset Resolver.

A successful draw zeroes the position and may bar re-entry: permanently
for once-only categories (ban length 0), or for a cool-down of N years.
Every later plan year that still references the position is reported so
the dispatcher can invalidate it.
"""

import structlog

from drawcast.rules.tables import BanRule
from drawcast.schemas.plan import PlanYear
from drawcast.schemas.results import PostAwardReset

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

# Fresh-start offset after a permanent ban: beyond any planning horizon
PERMANENT_BAN_HORIZON: int = 100


class PostAwardResetResolver:
    """Resolve eligibility after an award."""

    def __init__(self, ban_rules: dict[str, BanRule]):
        self.ban_rules = ban_rules

    def resolve(
        self,
        jurisdiction: str,
        category: str,
        award_year: int,
        prior_points: float,
        plan: list[PlanYear],
    ) -> PostAwardReset:
        rule = self.ban_rules.get(jurisdiction)
        is_restricted = rule is not None and category in rule.categories
        ban_years = rule.ban_years if is_restricted else 0
        is_permanent = is_restricted and ban_years == 0

        next_eligible = None if is_permanent else award_year + 1 + ban_years
        fresh_start = next_eligible if next_eligible is not None else award_year + PERMANENT_BAN_HORIZON

        affected = sorted({
            yr.year
            for yr in plan
            if yr.year > award_year and yr.references(jurisdiction, category)
        })

        if is_restricted:
            logger.info(
                "eligibility_ban_applied",
                position=f"{jurisdiction}/{category}",
                award_year=award_year,
                ban_years=ban_years,
                permanent=is_permanent,
                n_affected_years=len(affected),
            )

        return PostAwardReset(
            jurisdiction=jurisdiction,
            category=category,
            award_year=award_year,
            points_zeroed=prior_points,
            ban_years=ban_years,
            next_eligible_year=next_eligible,
            fresh_start_year=fresh_start,
            affected_years=affected,
            is_permanent_ban=is_permanent,
        )
