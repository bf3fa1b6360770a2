"""
Cascade Dispatcher — one life event in, every consequence out.

Pipeline per event kind:
- draw_outcome (awarded): zero points → eligibility reset → invalidate later
  years → recoverable fee becomes committed → schedule checks
- draw_outcome (not awarded): accrue a point → refund upfront fee → keep the
  pursuit alive next year → trajectory check
- budget_change: rank positions → liquidate under the new budget
- profile_change: horizon cutoffs, float tolerance, activity style
- deadline_missed: inactive-year alerts → recalculate the year
- party_change: group rounding loss, point spread, member removal

The dispatcher is a pure function of (event, snapshot, context). It never
mutates its inputs, reads no clock, and always returns a fully populated
CascadeResult. Applying the result is the caller's job.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, assert_never

import structlog

from drawcast.config import Settings
from drawcast.engine.allocator import AssetPreservationAllocator
from drawcast.engine.group import DropImpact, GroupDrawAverager
from drawcast.engine.liquidity import LiquidityScheduler, float_events_from_commitments
from drawcast.engine.odds import accrues_points, classify_draw_type, is_lottery_play
from drawcast.engine.reset import PostAwardResetResolver
from drawcast.rules.defaults import DEFAULT_RULEBOOK
from drawcast.rules.tables import RuleBook
from drawcast.schemas.events import (
    BudgetChangeEvent,
    CascadeContext,
    CascadeEvent,
    DeadlineMissedEvent,
    DrawOutcomeEvent,
    EventKind,
    PartyChangeEvent,
    ProfileChangeEvent,
    ProfileField,
)
from drawcast.schemas.plan import ActionKind, DrawOutcome, PlanSnapshot
from drawcast.schemas.portfolio import PortfolioAsset
from drawcast.schemas.results import (
    AlertSeverity,
    AllocationResult,
    CapitalClass,
    CapitalReclassification,
    CascadeAlert,
    CascadeResult,
    ConflictType,
    GroupAverage,
    InvalidationAction,
    LiquidityExposure,
    LiquiditySeverity,
    PlanInvalidation,
    PointMutation,
    PostAwardReset,
    ScheduleConflict,
)

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

SUCCESS_DISASTER_RATIO: float = 1.2
DAYS_PER_HUNT: int = 6
CREEP_CHECK_POINTS: int = 5
NEAR_AWARD_YEARS: int = 2
DEFAULT_AWARD_LOOKAHEAD: int = 10
PARTY_SPREAD_WARNING: int = 3

_IMPACT_SEVERITY: dict[DropImpact, AlertSeverity] = {
    DropImpact.SEVERE: AlertSeverity.CRITICAL,
    DropImpact.MODERATE: AlertSeverity.WARNING,
    DropImpact.MINIMAL: AlertSeverity.INFO,
}


@dataclass
class _Cascade:
    """Mutable accumulator, frozen into a CascadeResult at the end."""
    kind: EventKind
    point_mutations: list[PointMutation] = field(default_factory=list)
    capital_reclassifications: list[CapitalReclassification] = field(default_factory=list)
    plan_invalidations: list[PlanInvalidation] = field(default_factory=list)
    alerts: list[CascadeAlert] = field(default_factory=list)
    schedule_conflicts: list[ScheduleConflict] = field(default_factory=list)
    post_award_reset: Optional[PostAwardReset] = None
    group_average: Optional[GroupAverage] = None
    allocation: Optional[AllocationResult] = None
    liquidity: Optional[LiquidityExposure] = None

    def alert(
        self,
        alert_id: str,
        severity: AlertSeverity,
        title: str,
        description: str,
        recommendation: Optional[str] = None,
        jurisdiction: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        self.alerts.append(CascadeAlert(
            alert_id=alert_id,
            severity=severity,
            title=title,
            description=description,
            recommendation=recommendation,
            jurisdiction=jurisdiction,
            category=category,
            event_kind=self.kind,
        ))

    def invalidate(
        self,
        year: int,
        jurisdiction: str,
        category: str,
        action: InvalidationAction,
        reason: str,
    ) -> None:
        self.plan_invalidations.append(PlanInvalidation(
            year=year,
            jurisdiction=jurisdiction,
            category=category,
            action=action,
            reason=reason,
        ))

    def build(self) -> CascadeResult:
        return CascadeResult(
            event_kind=self.kind,
            point_mutations=self.point_mutations,
            capital_reclassifications=self.capital_reclassifications,
            plan_invalidations=self.plan_invalidations,
            alerts=self.alerts,
            schedule_conflicts=self.schedule_conflicts,
            post_award_reset=self.post_award_reset,
            group_average=self.group_average,
            allocation=self.allocation,
            liquidity=self.liquidity,
        )


def _as_number(value: Any) -> Optional[float]:
    """Profile values arrive untyped; anything non-numeric means 'unset'."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _money(amount: float) -> str:
    return f"${amount:,.0f}"


class CascadeDispatcher:
    """
    Single entry point for fiduciary events.

    Sub-engines are built from the injected RuleBook once; every
    ``dispatch`` call is independent of every other.
    """

    def __init__(
        self,
        rulebook: RuleBook = DEFAULT_RULEBOOK,
        success_disaster_ratio: float = SUCCESS_DISASTER_RATIO,
        days_per_hunt: int = DAYS_PER_HUNT,
        creep_check_points: int = CREEP_CHECK_POINTS,
        near_award_years: int = NEAR_AWARD_YEARS,
        default_award_lookahead: int = DEFAULT_AWARD_LOOKAHEAD,
        party_spread_warning: int = PARTY_SPREAD_WARNING,
        allocator: Optional[AssetPreservationAllocator] = None,
        liquidity: Optional[LiquidityScheduler] = None,
        group_averager: Optional[GroupDrawAverager] = None,
    ):
        self.rulebook = rulebook
        self.success_disaster_ratio = success_disaster_ratio
        self.days_per_hunt = days_per_hunt
        self.creep_check_points = creep_check_points
        self.near_award_years = near_award_years
        self.default_award_lookahead = default_award_lookahead
        self.party_spread_warning = party_spread_warning

        self.allocator = allocator or AssetPreservationAllocator()
        self.liquidity = liquidity or LiquidityScheduler()
        self.group_averager = group_averager or GroupDrawAverager(rulebook.rounding_policy())
        self.reset_resolver = PostAwardResetResolver(rulebook.ban_rules())

    @classmethod
    def from_settings(cls, cfg: Settings, rulebook: RuleBook = DEFAULT_RULEBOOK) -> "CascadeDispatcher":
        return cls(
            rulebook=rulebook,
            success_disaster_ratio=cfg.success_disaster_ratio,
            days_per_hunt=cfg.days_per_hunt,
            creep_check_points=cfg.creep_check_points,
            near_award_years=cfg.near_award_years,
            default_award_lookahead=cfg.default_award_lookahead,
            party_spread_warning=cfg.party_spread_warning,
            liquidity=LiquidityScheduler(critical_ratio=cfg.liquidity_critical_ratio),
            group_averager=GroupDrawAverager(
                rulebook.rounding_policy(),
                loss_warning_threshold=cfg.group_loss_warning,
            ),
        )

    def dispatch(
        self,
        event: CascadeEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> CascadeResult:
        """Compute every consequence of ``event`` against ``snapshot``."""
        match event:
            case DrawOutcomeEvent():
                result = self.on_draw_outcome(event, snapshot, context)
            case BudgetChangeEvent():
                result = self.on_budget_change(event, snapshot, context)
            case ProfileChangeEvent():
                result = self.on_profile_change(event, snapshot, context)
            case DeadlineMissedEvent():
                result = self.on_deadline_missed(event, snapshot, context)
            case PartyChangeEvent():
                result = self.on_party_change(event, snapshot, context)
            case _:
                assert_never(event)

        logger.info(
            "cascade_dispatched",
            event_kind=result.event_kind.value,
            n_point_mutations=len(result.point_mutations),
            n_reclassifications=len(result.capital_reclassifications),
            n_invalidations=len(result.plan_invalidations),
            n_alerts=len(result.alerts),
            n_conflicts=len(result.schedule_conflicts),
        )
        return result

    # ── 1. Draw outcome ──────────────────────────────────────────────────

    def on_draw_outcome(
        self,
        event: DrawOutcomeEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> CascadeResult:
        points = event.current_points
        if points is None:
            points = snapshot.points_for(event.jurisdiction, event.category)

        if event.outcome == DrawOutcome.AWARDED:
            return self._awarded(event, points, snapshot, context)
        return self._not_awarded(event, points, snapshot)

    def _awarded(
        self,
        event: DrawOutcomeEvent,
        points: float,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> CascadeResult:
        j, c, year = event.jurisdiction, event.category, event.year
        out = _Cascade(kind=EventKind.DRAW_OUTCOME)

        # ── 1. Zero the position ────────────────────────────────────
        out.point_mutations.append(PointMutation(
            jurisdiction=j,
            category=c,
            new_points=0.0,
            delta=-points,
            reason=f"Drew {j} {c} in {year}; points zeroed",
        ))

        # ── 2. Eligibility reset ────────────────────────────────────
        reset = self.reset_resolver.resolve(j, c, year, points, snapshot.years)
        out.post_award_reset = reset

        # ── 3. Invalidate later years ───────────────────────────────
        for affected in reset.affected_years:
            if reset.is_permanent_ban:
                reason = f"Permanently ineligible for {j} {c} (once-only category)"
            elif reset.ban_years > 0:
                reason = f"{reset.ban_years}-year waiting period after drawing {j} {c}"
            else:
                reason = "Points reset to 0; recalculate timeline"
            out.invalidate(
                affected, j, c,
                InvalidationAction.REMOVE if reset.is_permanent_ban else InvalidationAction.RECALCULATE,
                reason,
            )

        if reset.is_permanent_ban:
            out.alert(
                f"ban-permanent-{j}-{c}",
                AlertSeverity.CRITICAL,
                f"{j} {c}: Once-Only Tag Drawn",
                f"You drew a once-only tag for {j} {c} and are permanently ineligible to apply "
                f"for this category in this jurisdiction again.",
                recommendation=f"All future {c} entries for {j} have been removed from the plan.",
                jurisdiction=j,
                category=c,
            )
        elif reset.ban_years > 0:
            out.alert(
                f"ban-wait-{j}-{c}",
                AlertSeverity.WARNING,
                f"{j} {c}: {reset.ban_years}-Year Waiting Period",
                f"After drawing {j} {c} you cannot re-apply until {reset.next_eligible_year}.",
                recommendation="Focus on other positions during the waiting period.",
                jurisdiction=j,
                category=c,
            )

        # ── 4. Recoverable fee becomes committed ────────────────────
        tag_cost = self.rulebook.tag_cost(j, c)
        if tag_cost > 0:
            out.capital_reclassifications.append(CapitalReclassification(
                jurisdiction=j,
                category=c,
                from_class=CapitalClass.RECOVERABLE,
                to_class=CapitalClass.COMMITTED,
                amount=tag_cost,
                reason=f"Drew tag; {_money(tag_cost)} tag fee is now committed",
            ))

        # ── 5. Schedule checks ──────────────────────────────────────
        self._schedule_checks(out, event, snapshot, context)

        return out.build()

    def _schedule_checks(
        self,
        out: _Cascade,
        event: DrawOutcomeEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> None:
        j, c, year = event.jurisdiction, event.category, event.year
        actions = snapshot.actions_in(year)

        # 5a. Overlap with other scheduled hunts that year
        other_hunts = [
            a for a in actions
            if a.kind == ActionKind.HUNT and a.jurisdiction != j
        ]
        if other_hunts:
            names = ", ".join(f"{a.jurisdiction} {a.category}" for a in other_hunts)
            out.schedule_conflicts.append(ScheduleConflict(
                jurisdiction=j,
                category=c,
                conflict_type=ConflictType.ACTIVITY_OVERLAP,
                severity=AlertSeverity.WARNING,
                message=(
                    f"You drew {j} {c} and also have hunts planned for {names} in {year}. "
                    f"Verify your time off can accommodate both."
                ),
                affected_year=year,
            ))

        # 5b. Success disaster: the year's cost blows through the activity budget
        budget = context.annual_activity_budget
        year_cost = sum(a.cost for a in actions if a.kind in (ActionKind.HUNT, ActionKind.APPLY))
        if year_cost > budget * self.success_disaster_ratio:
            over_pct = f" by {round((year_cost / budget - 1) * 100)}%" if budget > 0 else ""
            out.schedule_conflicts.append(ScheduleConflict(
                jurisdiction=j,
                category=c,
                conflict_type=ConflictType.SUCCESS_DISASTER,
                severity=AlertSeverity.CRITICAL,
                message=(
                    f"Success disaster: drawing {j} {c} pushes {year} costs to ~{_money(year_cost)}, "
                    f"exceeding your {_money(budget)} activity budget{over_pct}."
                ),
                affected_year=year,
            ))
            out.alert(
                f"success-disaster-{j}-{c}-{year}",
                AlertSeverity.CRITICAL,
                "Success Disaster: Over Budget",
                f"Drawing {j} {c} puts you ~{_money(year_cost - budget)} over your activity budget.",
                recommendation=f"Review the {year} schedule and consider deferring lower-priority hunts.",
                jurisdiction=j,
                category=c,
            )

        # 5c. Not enough days
        hunts = [a for a in actions if a.kind == ActionKind.HUNT]
        days_needed = len(hunts) * self.days_per_hunt
        if context.available_days > 0 and days_needed > context.available_days:
            out.schedule_conflicts.append(ScheduleConflict(
                jurisdiction=j,
                category=c,
                conflict_type=ConflictType.DAYS_SHORTFALL,
                severity=AlertSeverity.WARNING,
                message=(
                    f"With {len(hunts)} hunts planned in {year} you need ~{days_needed} days "
                    f"but only have {context.available_days} available."
                ),
                affected_year=year,
            ))

    def _not_awarded(
        self,
        event: DrawOutcomeEvent,
        points: float,
        snapshot: PlanSnapshot,
    ) -> CascadeResult:
        j, c, year = event.jurisdiction, event.category, event.year
        out = _Cascade(kind=EventKind.DRAW_OUTCOME)

        system = self.rulebook.point_system(j)
        increment = 1.0 if accrues_points(system) else 0.0
        new_points = points + increment

        # ── 1. Accrue ───────────────────────────────────────────────
        out.point_mutations.append(PointMutation(
            jurisdiction=j,
            category=c,
            new_points=new_points,
            delta=increment,
            reason=(
                f"Didn't draw {j} {c}; earned +1 point (now {new_points:g})"
                if increment else
                f"{j} is a random draw; no point accumulation"
            ),
        ))

        # ── 2. Refund an upfront fee ────────────────────────────────
        rules = self.rulebook.get(j)
        tag_cost = self.rulebook.tag_cost(j, c)
        if rules is not None and rules.fees.upfront_refundable and tag_cost > 0:
            out.capital_reclassifications.append(CapitalReclassification(
                jurisdiction=j,
                category=c,
                from_class=CapitalClass.COMMITTED,
                to_class=CapitalClass.RECOVERABLE,
                amount=tag_cost,
                reason=f"Didn't draw; {_money(tag_cost)} upfront tag fee refunded",
            ))

        # ── 3. Keep the pursuit alive ───────────────────────────────
        next_year = year + 1
        if not snapshot.has_year(next_year):
            out.invalidate(
                next_year, j, c, InvalidationAction.RECALCULATE,
                f"Didn't draw in {year}; plan needs a {next_year} entry for continued pursuit",
            )

        # ── 4. Trajectory check (never for pure lotteries) ──────────
        if points >= self.creep_check_points and not is_lottery_play(system):
            out.alert(
                f"creep-check-{j}-{c}",
                AlertSeverity.INFO,
                f"{j} {c}: {new_points:g} Points Accumulated",
                f"You now have {new_points:g} points in {j} {c}. Check whether point creep "
                f"is eroding your position.",
                recommendation="Verify your projected award year hasn't shifted.",
                jurisdiction=j,
                category=c,
            )

        return out.build()

    # ── 2. Budget change ─────────────────────────────────────────────────

    def build_assets(self, snapshot: PlanSnapshot, current_year: int) -> list[PortfolioAsset]:
        """One asset per distinct position in the plan; unknown jurisdictions are skipped."""
        assets: list[PortfolioAsset] = []
        for j, c in snapshot.positions():
            rules = self.rulebook.get(j)
            if rules is None:
                continue

            points = snapshot.points_for(j, c)
            annual_cost = rules.fees.annual_cost(c)
            award_year = next(
                (
                    yr.year for yr in snapshot.years
                    if any(
                        a.jurisdiction == j and a.category == c and a.kind == ActionKind.HUNT
                        for a in yr.actions
                    )
                ),
                current_year + self.default_award_lookahead,
            )
            assets.append(PortfolioAsset(
                jurisdiction=j,
                category=c,
                points=points,
                annual_cost=annual_cost,
                sunk_cost=points * annual_cost,
                draw_type=classify_draw_type(rules.point_system),
                expected_award_year=award_year,
                near_award=award_year - current_year <= self.near_award_years,
            ))
        return assets

    def on_budget_change(
        self,
        event: BudgetChangeEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> CascadeResult:
        out = _Cascade(kind=EventKind.BUDGET_CHANGE)
        old, new = event.old_budget, event.new_budget

        if new >= old:
            if new > old:
                out.alert(
                    "budget-increase",
                    AlertSeverity.INFO,
                    "Budget Increased",
                    f"Annual budget increased from {_money(old)} to {_money(new)}. "
                    f"Review the plan for new opportunities.",
                    recommendation="Consider adding lottery plays or accelerating your timeline.",
                )
            return out.build()

        assets = self.build_assets(snapshot, context.current_year)
        if not assets:
            return out.build()

        allocation = self.allocator.allocate(assets, new)
        out.allocation = allocation

        for asset in allocation.pruned:
            j, c = asset.jurisdiction, asset.category
            for year in snapshot.years_referencing(j, c):
                out.invalidate(
                    year, j, c, InvalidationAction.REMOVE,
                    f"Budget pruned: {j} {c} ({asset.draw_type.value}, {asset.points:g} pts)",
                )

            if asset.points > 0:
                out.alert(
                    f"prune-{j}-{c}",
                    AlertSeverity.WARNING,
                    f"Pruned: {j} {c}",
                    f"{j} {c} removed from the plan to meet the new budget. You have "
                    f"{asset.points:g} points invested; keep the position active to avoid forfeiture.",
                    recommendation=(
                        f"Buy a point ({_money(asset.annual_cost)}/yr) to preserve your "
                        f"{asset.points:g}-point investment."
                    ),
                    jurisdiction=j,
                    category=c,
                )
            else:
                out.alert(
                    f"prune-{j}-{c}",
                    AlertSeverity.INFO,
                    f"Pruned: {j} {c}",
                    f"{j} {c} ({asset.draw_type.value}) removed from the plan to meet the new budget.",
                    jurisdiction=j,
                    category=c,
                )

        n_pruned, n_kept = len(allocation.pruned), len(allocation.kept)
        out.alert(
            "budget-prune-summary",
            AlertSeverity.CRITICAL if n_pruned else AlertSeverity.INFO,
            f"Budget Cut: {n_pruned} Position{'s' if n_pruned != 1 else ''} Pruned",
            f"Budget reduced from {_money(old)} to {_money(new)}. Removed {n_pruned} "
            f"position{'s' if n_pruned != 1 else ''}, saving {_money(allocation.total_saved)}/yr. "
            f"{n_kept} position{'s' if n_kept != 1 else ''} preserved.",
            recommendation="Confirm the preserved positions match your priorities.",
        )

        logger.info(
            "budget_cut_cascaded",
            old_budget=old,
            new_budget=new,
            n_pruned=n_pruned,
            n_kept=n_kept,
            total_saved=round(allocation.total_saved, 2),
        )
        return out.build()

    # ── 3. Profile change ────────────────────────────────────────────────

    def on_profile_change(
        self,
        event: ProfileChangeEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> CascadeResult:
        out = _Cascade(kind=EventKind.PROFILE_CHANGE)

        match event.field:
            case ProfileField.PLANNING_HORIZON | ProfileField.PHYSICAL_HORIZON:
                self._horizon_change(out, event, snapshot, context)
            case ProfileField.CAPITAL_FLOAT_TOLERANCE:
                self._float_tolerance_change(out, event, snapshot)
            case ProfileField.ACTIVITY_STYLE:
                if event.new_value != event.old_value:
                    out.alert(
                        "activity-style-change",
                        AlertSeverity.INFO,
                        f"Activity Style Changed to {event.new_value}",
                        f"Switching to {event.new_value} changes season availability and draw odds. "
                        f"The plan may need rebuilding for {event.new_value}-specific seasons.",
                        recommendation="Rebuild suggested: regenerate the plan for the new activity style.",
                    )
            case ProfileField.PARTY_SIZE:
                # Party composition is handled by party_change events
                pass
            case _:
                assert_never(event.field)

        return out.build()

    def _horizon_change(
        self,
        out: _Cascade,
        event: ProfileChangeEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> None:
        old = _as_number(event.old_value)
        new = _as_number(event.new_value)
        # An unset old horizon means unlimited
        if new is None or (old is not None and new >= old):
            return

        cutoff = context.current_year + int(new)
        label = "planning" if event.field == ProfileField.PLANNING_HORIZON else "physical"
        seen: set[tuple[int, str, str]] = set()
        for yr in snapshot.years:
            if yr.year <= cutoff:
                continue
            for action in yr.actions:
                key = (yr.year, action.jurisdiction, action.category)
                if key in seen:
                    continue
                seen.add(key)
                out.invalidate(
                    yr.year, action.jurisdiction, action.category, InvalidationAction.REMOVE,
                    f"Beyond new {new:g}-year {label} horizon (cutoff: {cutoff})",
                )

        if out.plan_invalidations:
            n = len(out.plan_invalidations)
            out.alert(
                f"horizon-prune-{label}",
                AlertSeverity.WARNING,
                f"Horizon Shortened: {n} Entries Affected",
                f"The {label} horizon changed from {'unlimited' if old is None else f'{old:g}'} to "
                f"{new:g} years. {n} plan entries fall beyond the {cutoff} cutoff.",
                recommendation="Review removed positions; some long-term plays may still work as lottery plays.",
            )

    def _float_tolerance_change(
        self,
        out: _Cascade,
        event: ProfileChangeEvent,
        snapshot: PlanSnapshot,
    ) -> None:
        old = _as_number(event.old_value)
        new = _as_number(event.new_value)
        if new is None or old is None or new >= old:
            return

        description = (
            f"Reducing capital float tolerance from {_money(old)} to {_money(new)} may trigger "
            f"liquidity bottlenecks during application season."
        )
        float_events = float_events_from_commitments(snapshot.commitments)
        if float_events:
            exposure = self.liquidity.find_peak_exposure(float_events, new)
            out.liquidity = exposure
            if exposure.severity != LiquiditySeverity.OK:
                description += (
                    f" Current commitments peak at {_money(exposure.peak_amount)} on "
                    f"{exposure.peak_timestamp}, {_money(exposure.deficit)} over the new limit "
                    f"({exposure.severity.value})."
                )

        out.alert(
            "float-tolerance-reduced",
            AlertSeverity.WARNING,
            f"Float Tolerance Reduced to {_money(new)}",
            description,
            recommendation="Run the liquidity bottleneck analysis on your commitments.",
        )

    # ── 4. Deadline missed ───────────────────────────────────────────────

    def on_deadline_missed(
        self,
        event: DeadlineMissedEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> CascadeResult:
        j, c, year = event.jurisdiction, event.category, event.year
        out = _Cascade(kind=EventKind.DEADLINE_MISSED)

        rules = self.rulebook.get(j)
        forfeiture = rules.forfeiture if rules else None
        points = snapshot.points_for(j, c)
        at_risk = points > 0

        description = (
            f"The {j} {c} application deadline ({event.deadline.isoformat()}) passed without "
            f"an application recorded."
        )
        if at_risk:
            description += f" You have {points:g} points at risk."

        out.alert(
            f"missed-deadline-{j}-{c}-{year}",
            AlertSeverity.CRITICAL if at_risk else AlertSeverity.WARNING,
            f"Missed Deadline: {j} {c}",
            description,
            recommendation=(
                f"This counts as an inactive year for {j}. {forfeiture.description}"
                if at_risk and forfeiture else
                "Update the milestone if you did apply, or adjust the plan."
            ),
            jurisdiction=j,
            category=c,
        )

        if forfeiture and at_risk:
            out.alert(
                f"purge-risk-{j}-{c}",
                AlertSeverity.CRITICAL,
                f"Inactivity Counter: {j} {c}",
                f"Missing the {year} application counts toward the "
                f"{forfeiture.max_inactive_years}-year inactivity purge threshold. {forfeiture.description}",
                recommendation="Apply or buy a point before the next deadline to reset the inactivity counter.",
                jurisdiction=j,
                category=c,
            )

        out.invalidate(
            year, j, c, InvalidationAction.RECALCULATE,
            f"Deadline missed; cannot apply for {j} {c} in {year}",
        )
        return out.build()

    # ── 5. Party change ──────────────────────────────────────────────────

    def on_party_change(
        self,
        event: PartyChangeEvent,
        snapshot: PlanSnapshot,
        context: CascadeContext,
    ) -> CascadeResult:
        j, c = event.jurisdiction, event.category
        out = _Cascade(kind=EventKind.PARTY_CHANGE)

        group = self.group_averager.average(j, event.member_points)
        out.group_average = group

        if group.warning:
            out.alert(
                f"group-rounding-{j}-{c}",
                AlertSeverity.WARNING,
                f"Group Draw Rounding: {j} {c}",
                group.warning,
                recommendation=(
                    f"{j} uses {group.method.value} rounding. Effective points are "
                    f"{group.effective_points:g} (raw average {group.raw_average:.2f})."
                ),
                jurisdiction=j,
                category=c,
            )

        if len(event.member_points) > 1:
            high, low = max(event.member_points), min(event.member_points)
            spread = high - low
            if spread >= self.party_spread_warning:
                out.alert(
                    f"party-spread-{j}-{c}",
                    AlertSeverity.WARNING,
                    "Large Point Spread in Party",
                    f"Your party has a {spread:g}-point spread ({low:g} to {high:g} points). In {j} "
                    f"this reduces your effective points from {high:g} to {group.effective_points:g}.",
                    recommendation=f"Consider applying solo in {j} if you are the high-point member.",
                    jurisdiction=j,
                    category=c,
                )

        if event.previous_member_points is not None:
            impact = self.group_averager.compare(j, event.previous_member_points, event.member_points)
            severe = impact.impact == DropImpact.SEVERE
            out.alert(
                f"party-composition-{j}-{c}",
                _IMPACT_SEVERITY[impact.impact],
                f"Group Dynamics Altered: {j} {c}",
                f"Party changed from {impact.old_group_size} to {impact.new_group_size} members. "
                f"Effective points moved from {impact.old_effective_points:g} to "
                f"{impact.new_effective_points:g} (drop {impact.points_drop:g}).",
                recommendation=(
                    f"Rebalance before the deadline. Consider applying solo to keep individual "
                    f"points ({max(event.member_points, default=0):g})."
                    if severe else
                    f"Monitor group composition. Effective points are now {impact.new_effective_points:g}."
                ),
                jurisdiction=j,
                category=c,
            )

        return out.build()
