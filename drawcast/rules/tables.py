"""
Jurisdiction Rule Tables.

Static, version-controlled configuration. A ``RuleBook`` is built once and
injected into the engines; nothing in the engine reads rules from module
globals at computation time.

Lookups never fail: an unknown jurisdiction (or a jurisdiction with no rule
of the requested kind) returns ``None`` and callers skip it.
"""

import json
from enum import StrEnum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from drawcast.errors import RuleBookError
from drawcast.schemas.results import GroupRounding


class PointSystem(StrEnum):
    PREFERENCE = "preference"           # deterministic by rank
    PREFERENCE_NR = "preference_nr"     # nonresident-only preference pool
    HYBRID = "hybrid"                   # preference share + random share
    DUAL = "dual"                       # preference (general) + bonus (special) tracks
    BONUS = "bonus"                     # linear-weighted lottery
    BONUS_SQUARED = "bonus_squared"     # quadratic-weighted lottery
    RANDOM = "random"                   # uniform lottery, no accrual


class ForfeitureRule(BaseModel):
    """Consecutive inactive years after which points are deleted."""
    model_config = ConfigDict(frozen=True)

    max_inactive_years: int = Field(ge=1)
    description: str = ""


class BanRule(BaseModel):
    """
    Once-only / cool-down restriction after a successful draw.

    ``ban_years == 0`` means the ban is permanent.
    """
    model_config = ConfigDict(frozen=True)

    categories: tuple[str, ...] = ()
    ban_years: int = Field(default=0, ge=0)
    description: str = ""


class FeeSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    point_costs: dict[str, float] = Field(default_factory=dict)
    tag_costs: dict[str, float] = Field(default_factory=dict)
    application_fee: float = 0.0
    qualifying_license: float = 0.0
    upfront_refundable: bool = False    # tag fee charged at application, refunded if unsuccessful

    def annual_cost(self, category: str) -> float:
        """Cost to keep a position alive for one year."""
        return self.point_costs.get(category, 0.0) + self.application_fee + self.qualifying_license

    def tag_cost(self, category: str) -> float:
        return self.tag_costs.get(category, 0.0)


class JurisdictionRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str = ""
    point_system: PointSystem
    preference_share: Optional[float] = Field(default=None, ge=0, le=1)
    fees: FeeSchedule = Field(default_factory=FeeSchedule)
    forfeiture: Optional[ForfeitureRule] = None
    ban: Optional[BanRule] = None
    group_rounding: GroupRounding = GroupRounding.FLOOR


class RuleBook(BaseModel):
    """All jurisdiction rules, keyed by jurisdiction code."""
    model_config = ConfigDict(frozen=True)

    version: str = "unversioned"
    jurisdictions: dict[str, JurisdictionRules] = Field(default_factory=dict)

    def get(self, jurisdiction: str) -> Optional[JurisdictionRules]:
        return self.jurisdictions.get(jurisdiction)

    def point_system(self, jurisdiction: str) -> Optional[PointSystem]:
        rules = self.get(jurisdiction)
        return rules.point_system if rules else None

    def forfeiture_rules(self) -> dict[str, ForfeitureRule]:
        return {
            code: rules.forfeiture
            for code, rules in self.jurisdictions.items()
            if rules.forfeiture is not None
        }

    def ban_rules(self) -> dict[str, BanRule]:
        return {
            code: rules.ban
            for code, rules in self.jurisdictions.items()
            if rules.ban is not None
        }

    def rounding_policy(self) -> dict[str, GroupRounding]:
        return {code: rules.group_rounding for code, rules in self.jurisdictions.items()}

    def annual_cost(self, jurisdiction: str, category: str) -> float:
        rules = self.get(jurisdiction)
        return rules.fees.annual_cost(category) if rules else 0.0

    def tag_cost(self, jurisdiction: str, category: str) -> float:
        rules = self.get(jurisdiction)
        return rules.fees.tag_cost(category) if rules else 0.0

    @classmethod
    def from_json_file(cls, path: str | Path) -> "RuleBook":
        """Load a rule book from a JSON file (same shape as ``model_dump``)."""
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            return cls.model_validate(raw)
        except (OSError, json.JSONDecodeError) as e:
            raise RuleBookError(f"Cannot read rule book {path}: {e}") from e
        except ValidationError as e:
            raise RuleBookError(
                f"Invalid rule book {path}",
                details={"errors": e.errors(include_url=False)},
            ) from e
