"""
DrawCast Computation Engine — pure, deterministic leaf computations.

Components:
- odds: per-system draw probability and multi-year cumulative odds
- allocator: rule-ranked liquidation of positions under a reduced budget
- liquidity: peak concurrent capital float across overlapping commitments
- purge: inactivity forfeiture simulation over the plan horizon
- reset: eligibility bans and cool-downs after a successful draw
- group: jurisdiction-specific rounding of party point averages
"""
