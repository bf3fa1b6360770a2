"""Per-jurisdiction rule tables."""

from drawcast.rules.defaults import DEFAULT_RULEBOOK, RULEBOOK_VERSION
from drawcast.rules.tables import (
    BanRule,
    FeeSchedule,
    ForfeitureRule,
    JurisdictionRules,
    PointSystem,
    RuleBook,
)

__all__ = [
    "BanRule",
    "DEFAULT_RULEBOOK",
    "FeeSchedule",
    "ForfeitureRule",
    "JurisdictionRules",
    "PointSystem",
    "RULEBOOK_VERSION",
    "RuleBook",
]
