"""
Shipped rule tables for the western-US big-game draws.

Sources (agency regulations at time of writing):
- WY: points expire after missing 2 consecutive application cycles
- CO: points expire after 10 consecutive years of not applying
- NV, UT, OR, KS: must apply or buy a point every year
- MT, AZ: no expiration
- ID, NM, AK: random draws, no point accrual
"""

from drawcast.rules.tables import (
    BanRule,
    FeeSchedule,
    ForfeitureRule,
    JurisdictionRules,
    PointSystem,
    RuleBook,
)
from drawcast.schemas.results import GroupRounding

RULEBOOK_VERSION = "2026.1"

_SHEEP_GOAT_MOOSE = ("moose", "bighorn_sheep", "mountain_goat")


DEFAULT_JURISDICTIONS: list[JurisdictionRules] = [
    JurisdictionRules(
        code="CO",
        name="Colorado",
        point_system=PointSystem.PREFERENCE,
        preference_share=0.80,
        fees=FeeSchedule(
            point_costs={"elk": 100.0, "deer": 100.0, "antelope": 100.0,
                         "moose": 100.0, "bighorn_sheep": 100.0, "mountain_goat": 100.0},
            tag_costs={"elk": 750.0, "deer": 500.0, "antelope": 500.0,
                       "moose": 2600.0, "bighorn_sheep": 2600.0, "mountain_goat": 2600.0},
            application_fee=10.0,
            qualifying_license=100.0,
        ),
        forfeiture=ForfeitureRule(
            max_inactive_years=10,
            description="Colorado deletes all preference points after 10 consecutive years of not applying.",
        ),
        ban=BanRule(
            categories=_SHEEP_GOAT_MOOSE,
            ban_years=5,
            description="Colorado bans re-application for moose/sheep/goat for 5 years after drawing.",
        ),
        group_rounding=GroupRounding.FLOOR,
    ),
    JurisdictionRules(
        code="WY",
        name="Wyoming",
        point_system=PointSystem.HYBRID,
        preference_share=0.75,
        fees=FeeSchedule(
            point_costs={"elk": 52.0, "deer": 41.0, "antelope": 31.0,
                         "moose": 150.0, "bighorn_sheep": 150.0},
            tag_costs={"elk": 692.0, "deer": 374.0, "antelope": 326.0,
                       "moose": 2758.0, "bighorn_sheep": 3046.0, "mountain_goat": 3046.0,
                       "bison": 4402.0},
            application_fee=15.0,
            upfront_refundable=True,
        ),
        forfeiture=ForfeitureRule(
            max_inactive_years=2,
            description="Wyoming deletes all preference points after missing 2 consecutive application cycles.",
        ),
        ban=BanRule(
            categories=_SHEEP_GOAT_MOOSE + ("bison",),
            ban_years=3,
            description="Wyoming enforces a 3-year waiting period after drawing moose/sheep/goat/bison.",
        ),
        group_rounding=GroupRounding.EXACT,
    ),
    JurisdictionRules(
        code="MT",
        name="Montana",
        point_system=PointSystem.DUAL,
        fees=FeeSchedule(
            point_costs={"elk": 50.0, "deer": 50.0, "moose": 50.0, "bighorn_sheep": 50.0},
            tag_costs={"elk": 1250.0, "deer": 1150.0, "moose": 1250.0, "bighorn_sheep": 1250.0},
            application_fee=15.0,
        ),
        ban=BanRule(
            categories=_SHEEP_GOAT_MOOSE,
            ban_years=7,
            description="Montana enforces a 7-year waiting period after drawing moose/sheep/goat.",
        ),
        group_rounding=GroupRounding.FLOOR,
    ),
    JurisdictionRules(
        code="NV",
        name="Nevada",
        point_system=PointSystem.BONUS_SQUARED,
        fees=FeeSchedule(
            point_costs={"elk": 10.0, "deer": 10.0, "antelope": 10.0, "bighorn_sheep": 10.0},
            tag_costs={"elk": 1200.0, "deer": 300.0, "antelope": 300.0, "bighorn_sheep": 1200.0},
            application_fee=15.0,
            qualifying_license=155.0,
        ),
        forfeiture=ForfeitureRule(
            max_inactive_years=1,
            description="Nevada deletes all bonus points if you fail to apply or buy points in any single year.",
        ),
        group_rounding=GroupRounding.EXACT,
    ),
    JurisdictionRules(
        code="AZ",
        name="Arizona",
        point_system=PointSystem.BONUS,
        fees=FeeSchedule(
            point_costs={"elk": 15.0, "deer": 15.0, "antelope": 15.0,
                         "bighorn_sheep": 15.0, "bison": 15.0},
            tag_costs={"elk": 650.0, "deer": 300.0, "antelope": 600.0,
                       "bighorn_sheep": 1800.0, "bison": 5400.0},
            application_fee=15.0,
            qualifying_license=160.0,
        ),
        ban=BanRule(
            categories=("bighorn_sheep", "bison"),
            ban_years=0,
            description="Arizona once-in-a-lifetime: you are permanently ineligible after drawing.",
        ),
        group_rounding=GroupRounding.FLOOR,
    ),
    JurisdictionRules(
        code="UT",
        name="Utah",
        point_system=PointSystem.DUAL,
        fees=FeeSchedule(
            point_costs={"elk": 75.0, "deer": 75.0, "moose": 75.0, "bighorn_sheep": 75.0},
            tag_costs={"elk": 800.0, "deer": 550.0, "moose": 2000.0, "bighorn_sheep": 2000.0},
            application_fee=10.0,
            qualifying_license=65.0,
        ),
        forfeiture=ForfeitureRule(
            max_inactive_years=1,
            description="Utah deletes all bonus/preference points if you fail to apply or buy points in any single year.",
        ),
        group_rounding=GroupRounding.FLOOR,
    ),
    JurisdictionRules(
        code="OR",
        name="Oregon",
        point_system=PointSystem.HYBRID,
        preference_share=0.75,
        fees=FeeSchedule(
            point_costs={"elk": 8.0, "deer": 8.0, "antelope": 8.0},
            tag_costs={"elk": 590.0, "deer": 445.0, "antelope": 445.0},
            application_fee=8.0,
            qualifying_license=172.0,
        ),
        forfeiture=ForfeitureRule(
            max_inactive_years=1,
            description="Oregon deletes all preference points if you don't apply or buy points annually.",
        ),
        group_rounding=GroupRounding.FLOOR,
    ),
    JurisdictionRules(
        code="KS",
        name="Kansas",
        point_system=PointSystem.PREFERENCE_NR,
        fees=FeeSchedule(
            point_costs={"deer": 100.0},
            tag_costs={"deer": 450.0},
            application_fee=35.0,
        ),
        forfeiture=ForfeitureRule(
            max_inactive_years=1,
            description="Kansas deletes NR deer preference points if you don't apply annually.",
        ),
        group_rounding=GroupRounding.FLOOR,
    ),
    JurisdictionRules(
        code="ID",
        name="Idaho",
        point_system=PointSystem.RANDOM,
        fees=FeeSchedule(
            tag_costs={"elk": 650.0, "deer": 450.0, "moose": 2200.0,
                       "bighorn_sheep": 2200.0, "mountain_goat": 2200.0},
            application_fee=15.0,
            qualifying_license=185.0,
            upfront_refundable=True,
        ),
        ban=BanRule(
            categories=_SHEEP_GOAT_MOOSE,
            ban_years=0,
            description="Idaho once-in-a-lifetime tags are permanent; you can never draw again for that species.",
        ),
        group_rounding=GroupRounding.EXACT,
    ),
    JurisdictionRules(
        code="NM",
        name="New Mexico",
        point_system=PointSystem.RANDOM,
        fees=FeeSchedule(
            tag_costs={"elk": 780.0, "deer": 380.0, "antelope": 280.0, "bighorn_sheep": 4000.0},
            application_fee=13.0,
            qualifying_license=65.0,
            upfront_refundable=True,
        ),
        group_rounding=GroupRounding.EXACT,
    ),
    JurisdictionRules(
        code="AK",
        name="Alaska",
        point_system=PointSystem.RANDOM,
        fees=FeeSchedule(
            tag_costs={"moose": 800.0, "bighorn_sheep": 1300.0, "mountain_goat": 600.0},
            application_fee=5.0,
            qualifying_license=160.0,
        ),
    ),
]


DEFAULT_RULEBOOK = RuleBook(
    version=RULEBOOK_VERSION,
    jurisdictions={rules.code: rules for rules in DEFAULT_JURISDICTIONS},
)
