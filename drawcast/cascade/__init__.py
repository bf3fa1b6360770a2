"""
Cascade layer — event dispatch and standing portfolio scans.
"""

from drawcast.cascade.dispatcher import CascadeDispatcher
from drawcast.cascade.scanners import (
    detect_missed_deadlines,
    detect_success_disaster,
    scan_liquidity,
    scan_purge_risk,
)

__all__ = [
    "CascadeDispatcher",
    "detect_missed_deadlines",
    "detect_success_disaster",
    "scan_liquidity",
    "scan_purge_risk",
]
