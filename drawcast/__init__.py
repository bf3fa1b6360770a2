"""
DrawCast — Fiduciary Cascade Engine for draw-based licensing portfolios.

Architecture:
    drawcast/
    ├── rules/           # Immutable per-jurisdiction rule tables (RuleBook)
    ├── schemas/         # Pydantic models (plan snapshot, events, results)
    ├── engine/          # Leaf computations (odds, allocator, liquidity, purge, reset, group)
    ├── cascade/         # Event dispatcher + whole-plan scanners
    ├── config.py        # Tunable thresholds (pydantic-settings)
    └── cli.py           # JSON in / JSON out entry point

Module Boundaries:
    - The engine COMPUTES effects, it never applies them
    - No I/O, no clock reads, no state between calls
    - Every number in a result traces to a rule table or an input field
    - Callers serialize writes (single-writer discipline upstream)

Data Flow:
    Store → Event + PlanSnapshot → CascadeDispatcher → CascadeResult → Store

Version: 1.0.0
"""

__version__ = "1.0.0"
