"""Engagement engine: applies actions against the injected stores."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from random import Random

from danger_close.domain.actions import (
    Action,
    AdjustMomentum,
    ApplyAdvanceOutcome,
    ApplyTactic,
    BumpStat,
    CompleteExchange,
    CycleStatus,
    EnterDefenseObjective,
    RandomizeMission,
    RandomizeSector,
    ResolveIncomingFire,
    SelectSector,
    SetAdvanceRolls,
    SetCustomModifier,
    SetHardTargetHits,
    SetIntent,
    SetOffenseOverride,
    SetPosition,
    SetWeather,
    StartAdvanceRoll,
    StartDiceRoll,
    StartTacticRoll,
    ToggleAtRisk,
)
from danger_close.domain.events import LogEvent, TerrainAlert
from danger_close.domain.reports import SectorUpdate
from danger_close.domain.types import (
    Combatant,
    EngagementStatus,
    IntentKind,
    ModifierSet,
    OffensePool,
    Sector,
    deployed,
)
from danger_close.rules.ruleset import Ruleset
from danger_close.sim.rng import stream_rng
from danger_close.sim.roll import RollAnimationController, RollPhase
from danger_close.sim.scheduler import Scheduler
from danger_close.sim.stores import LogSink, MissionStore, RosterStore
from danger_close.systems import hard_targets, momentum, positions, roster as roster_ops, sector_gen
from danger_close.systems.advance import (
    AdvanceDice,
    AdvanceResult,
    advance_log_text,
    resolve_advance,
    sample_advance_dice,
)
from danger_close.systems.dice import DicePoolResult, roll_pool
from danger_close.systems.modifiers import compute_advance_modifiers
from danger_close.systems.offense import OffensePoolOverride, compute_offense_pool
from danger_close.systems.tactics import TacticRoll, apply_tactic, resolve_tactic, sample_tactic_draw

logger = logging.getLogger(__name__)

STAGING_AREA = "Staging Area"
UNNAMED_SQUAD = "Unnamed Squad"


@dataclass()
class ActionResult:
    ok: bool
    message: str | None
    message_kind: str | None
    events: list[LogEvent] = field(default_factory=list)
    alerts: list[TerrainAlert] = field(default_factory=list)


class EngagementEngine:
    def __init__(
        self,
        roster: RosterStore,
        missions: MissionStore,
        log: LogSink,
        *,
        scheduler: Scheduler,
        rules: Ruleset | None = None,
        seed: int = 1,
    ) -> None:
        self.roster = roster
        self.missions = missions
        self.log = log
        self.rules = rules or Ruleset.default()
        self.seed = seed
        self.action_seq = 0

        self.advance_rolls = 0
        self.custom_modifier = 0
        self.offense_override = OffensePoolOverride()

        timing = self.rules.timing
        self.advance_roll: RollAnimationController[AdvanceDice, AdvanceResult] = RollAnimationController(
            scheduler,
            sample_advance_dice,
            tick_ms=timing.tick_ms,
            duration_ms=timing.advance_duration_ms,
            name="advance roll",
        )
        self.tactic_roll: RollAnimationController[int, TacticRoll] = RollAnimationController(
            scheduler,
            sample_tactic_draw,
            tick_ms=timing.tick_ms,
            duration_ms=timing.tactic_duration_ms,
            name="tactic roll",
        )
        self._dice_count = self.rules.dice_pool.default_dice
        self.dice_roll: RollAnimationController[tuple[int, ...], DicePoolResult] = RollAnimationController(
            scheduler,
            lambda rng: roll_pool(rng, self._dice_count),
            tick_ms=timing.tick_ms,
            duration_ms=timing.dice_duration_ms,
            name="dice roll",
        )
        self._applied_advance: AdvanceResult | None = None
        self._applied_tactic: TacticRoll | None = None
        self._last_selected_id = missions.selected_sector_id()

    # -- queries ---------------------------------------------------------

    def rng(self, stream: str, purpose: str) -> Random:
        return stream_rng(self.seed, action_seq=self.action_seq, stream=stream, purpose=purpose)

    def squad_name(self) -> str:
        return self.roster.squad_name().strip() or UNNAMED_SQUAD

    def engageable_sectors(self) -> tuple[Sector, ...]:
        return tuple(s for s in self.missions.sectors() if s.engageable)

    def selected_sector(self) -> Sector | None:
        selected_id = self.missions.selected_sector_id()
        for sector in self.engageable_sectors():
            if sector.id == selected_id:
                return sector
        return None

    def modifiers(self) -> ModifierSet:
        return compute_advance_modifiers(
            self.roster.get(), self.selected_sector(), self.advance_rolls, self.custom_modifier
        )

    def offense_pool(self) -> OffensePool:
        return compute_offense_pool(self.roster.get(), self.selected_sector())

    def offense_dice(self) -> int:
        self.offense_override = self.offense_override.reconcile(self.offense_pool().total)
        return self.offense_override.value

    def terrain_alerts(self) -> list[TerrainAlert]:
        return positions.terrain_alerts(self.roster.get(), self.selected_sector())

    def injury_threshold(self, combatant_id: int) -> int | None:
        combatant = roster_ops.find_combatant(self.roster.get(), combatant_id)
        return positions.injury_threshold(combatant) if combatant is not None else None

    def threat_label(self) -> str | None:
        sector = self.selected_sector()
        threat = sector.threat_level if sector is not None else None
        return threat.label if threat is not None else None

    def loadout_summary(self, combatant_id: int) -> str | None:
        combatant = roster_ops.find_combatant(self.roster.get(), combatant_id)
        if combatant is None:
            return None
        return self.rules.gear_summary(combatant.weapon, combatant.armor, combatant.special_gear)

    def loadout_notes(self, combatant_id: int) -> list[str]:
        combatant = roster_ops.find_combatant(self.roster.get(), combatant_id)
        if combatant is None:
            return []
        return self.rules.loadout_notes(combatant.weapon, combatant.armor, combatant.special_gear)

    def requisition_cost(self) -> int:
        """Requisition points spent on the deployed squad's loadouts."""
        return sum(
            self.rules.requisition_cost(c.weapon, c.armor, c.special_gear) for c in deployed(self.roster.get())
        )

    def engagement_status(self) -> EngagementStatus | None:
        sector = self.selected_sector()
        return momentum.engagement_status(sector) if sector is not None else None

    # -- lifecycle -------------------------------------------------------

    def close(self) -> None:
        """Cancel every in-flight roll; nothing scheduled fires afterwards."""
        self._teardown_rolls()

    def _teardown_rolls(self) -> None:
        self.advance_roll.cancel()
        self.tactic_roll.cancel()
        self.dice_roll.cancel()
        self._applied_advance = None
        self._applied_tactic = None

    def _sync_selection(self) -> None:
        current = self.missions.selected_sector_id()
        if current != self._last_selected_id:
            self._teardown_rolls()
            self.custom_modifier = 0
            self._last_selected_id = current

    def _still_resolved(self, controller: RollAnimationController) -> bool:
        """Pick up a selection change made straight on the store; False if it tore the roll down."""
        self._sync_selection()
        return controller.phase == RollPhase.RESOLVED

    # -- helpers ---------------------------------------------------------

    def _emit(self, events: list[LogEvent] | tuple[LogEvent, ...]) -> None:
        for event in events:
            self.log.append(event.text, event.source)

    def _write_sector(self, sector: Sector) -> None:
        self.missions.replace_sectors(lambda sectors: tuple(sector if s.id == sector.id else s for s in sectors))

    def _write_roster(self, updated: tuple[Combatant, ...]) -> None:
        self.roster.replace_all(lambda _: updated)

    # -- reducer ---------------------------------------------------------

    def apply(self, action: Action) -> ActionResult:
        self._sync_selection()
        events: list[LogEvent] = []

        def ok(message: str | None, kind: str = "info") -> ActionResult:
            self.action_seq += 1
            self._emit(events)
            return ActionResult(
                ok=True,
                message=message,
                message_kind=kind,
                events=list(events),
                alerts=self.terrain_alerts(),
            )

        def fail(message: str) -> ActionResult:
            logger.debug("%s ignored: %s", type(action).__name__, message)
            return ActionResult(ok=False, message=message, message_kind="error", alerts=self.terrain_alerts())

        def sector_update(update: SectorUpdate, noop_message: str) -> ActionResult:
            if not update.changed:
                return fail(noop_message)
            self._write_sector(update.sector)
            events.extend(update.events)
            return ok(None)

        if isinstance(action, SelectSector):
            return self._select_sector(action, events, ok, fail)

        if isinstance(action, RandomizeSector):
            target = next((s for s in self.missions.sectors() if s.id == action.sector_id), None)
            if target is None:
                return fail("Unknown sector")
            randomized = sector_gen.randomize_sector(
                target, self.missions.mission().difficulty, self.rng("sector", "randomize")
            )
            self._write_sector(randomized)
            if target.id == self.missions.selected_sector_id():
                self._teardown_rolls()
            return ok("Sector randomized")

        if isinstance(action, RandomizeMission):
            self.missions.replace_mission(
                sector_gen.randomize_mission(self.missions.mission(), self.rng("mission", "randomize"))
            )
            events.append(LogEvent(kind="mission", text="Mission parameters randomized"))
            return ok("Mission randomized")

        if isinstance(action, SetAdvanceRolls):
            self.advance_rolls = max(0, int(action.count))
            return ok(None)

        if isinstance(action, SetCustomModifier):
            self.custom_modifier = int(action.value)
            return ok(None)

        if isinstance(action, SetOffenseOverride):
            self.offense_override = self.offense_override.reconcile(self.offense_pool().total).set_manual(
                action.value, pinned=action.pinned
            )
            return ok(None)

        if isinstance(action, BumpStat):
            updated = roster_ops.bump_stat(self.roster.get(), action.combatant_id, action.stat, action.delta)
            if updated is None:
                return fail(f"{action.stat} unchanged")
            self._write_roster(updated)
            return ok(None)

        if isinstance(action, CycleStatus):
            updated = roster_ops.cycle_status(self.roster.get(), action.combatant_id)
            if updated is None:
                return fail("Unknown trooper")
            self._write_roster(updated)
            combatant = roster_ops.find_combatant(updated, action.combatant_id)
            events.append(
                LogEvent(kind="status", text=f"{combatant.name} status changed to {combatant.status.value}")
            )
            return ok(None)

        if isinstance(action, SetIntent):
            current = self.roster.get()
            intent = action.intent
            if intent is not None and intent.kind == IntentKind.COVERING_FIRE:
                covered = {c.id for c in deployed(current)} - {action.combatant_id}
                if intent.target_id not in covered:
                    return fail("Covering Fire needs another deployed trooper as target")
            updated = roster_ops.set_intent(current, action.combatant_id, intent)
            if updated is None:
                return fail("Intent unchanged")
            self._write_roster(updated)
            return ok(None)

        if isinstance(action, ToggleAtRisk):
            updated = roster_ops.toggle_at_risk(self.roster.get(), action.combatant_id)
            if updated is None:
                return fail("Unknown trooper")
            self._write_roster(updated)
            return ok(None)

        if isinstance(action, SetPosition):
            updated = positions.set_position(
                self.roster.get(), action.combatant_id, action.offensive, action.defensive
            )
            if updated is None:
                return fail("Trooper cannot change position")
            self._write_roster(updated)
            return ok(None)

        if isinstance(action, StartDiceRoll):
            if self.dice_roll.rolling:
                return fail("Dice already rolling")
            if action.count is None:
                count = self.offense_dice()
                if count <= 0:
                    return fail("Offense pool is empty")
            else:
                count = int(action.count)
            self._dice_count = self.rules.dice_pool.clamp(count)
            self.dice_roll.start(
                DicePoolResult,
                rng=self.rng("dice", "final"),
                interim_rng=self.rng("dice", "interim"),
                on_resolved=lambda _: self._sync_selection(),
            )
            return ok(f"Rolling {self._dice_count}d6")

        sector = self.selected_sector()
        if sector is None:
            return fail("No engagement sector selected")

        if isinstance(action, SetWeather):
            if sector.weather == action.weather:
                return fail("Weather unchanged")
            self._write_sector(replace(sector, weather=action.weather))
            return ok(None)

        if isinstance(action, AdjustMomentum):
            return sector_update(momentum.adjust(sector, action.delta, self.squad_name()), "Momentum at bound")

        if isinstance(action, EnterDefenseObjective):
            return sector_update(
                momentum.enter_defense_objective(sector, self.rng("defense", "goal")),
                "Defense objective already active",
            )

        if isinstance(action, CompleteExchange):
            return sector_update(momentum.complete_exchange(sector, self.squad_name()), "No defense countdown running")

        if isinstance(action, SetHardTargetHits):
            return sector_update(hard_targets.set_hits(sector, action.target_id, action.hits), "Hits unchanged")

        if isinstance(action, StartAdvanceRoll):
            return self._start_advance_roll(sector, ok, fail)

        if isinstance(action, ApplyAdvanceOutcome):
            return self._apply_advance_outcome(sector, events, ok, fail)

        if isinstance(action, StartTacticRoll):
            return self._start_tactic_roll(sector, ok, fail)

        if isinstance(action, ApplyTactic):
            return self._apply_tactic(events, ok, fail)

        if isinstance(action, ResolveIncomingFire):
            return self._resolve_incoming_fire(sector, events, ok, fail)

        return fail(f"Unsupported action: {type(action).__name__}")

    # -- action handlers -------------------------------------------------

    def _select_sector(self, action: SelectSector, events: list[LogEvent], ok, fail) -> ActionResult:
        current_id = self.missions.selected_sector_id()
        if action.sector_id is None:
            if current_id is None:
                return fail("No sector selected")
            self.missions.select(None)
            self._sync_selection()
            return ok(None)
        if action.sector_id == current_id:
            return fail("Sector already selected")

        target = next((s for s in self.engageable_sectors() if s.id == action.sector_id), None)
        if target is None:
            return fail("Sector is not engageable")
        previous = next((s for s in self.missions.sectors() if s.id == current_id), None)
        previous_name = previous.display_name if previous is not None else STAGING_AREA

        self.missions.select(target.id)
        self._sync_selection()
        events.append(
            LogEvent(
                kind="movement",
                text=f"{self.squad_name()} MOVEMENT: {previous_name} >> {target.display_name}",
                data={"from": current_id, "to": target.id},
            )
        )
        return ok(None)

    def _start_advance_roll(self, sector: Sector, ok, fail) -> ActionResult:
        if self.advance_roll.rolling:
            return fail("Advance roll already in progress")
        threat = sector.threat_level
        modifiers = self.modifiers()
        squad_name = self.squad_name()

        def on_resolved(result: AdvanceResult) -> None:
            if not self._still_resolved(self.advance_roll):
                return
            self.advance_rolls += 1
            self._applied_advance = None
            self._emit(
                [
                    LogEvent(
                        kind="advance",
                        text=advance_log_text(squad_name, sector, result.outcome),
                        data={"sector_id": sector.id, "outcome": result.outcome.value, "total": result.total},
                    )
                ]
            )

        self.advance_roll.start(
            lambda dice: resolve_advance(dice, modifiers, threat),
            rng=self.rng("advance", "final"),
            interim_rng=self.rng("advance", "interim"),
            on_resolved=on_resolved,
        )
        return ok("Rolling advance")

    def _apply_advance_outcome(self, sector: Sector, events: list[LogEvent], ok, fail) -> ActionResult:
        result = self.advance_roll.outcome
        if self.advance_roll.phase != RollPhase.RESOLVED or result is None:
            return fail("No resolved advance roll")
        if self._applied_advance is result:
            return fail("Advance result already applied")
        effect = result.effect
        if effect.positions is None:
            self._applied_advance = result
            return ok(effect.description)

        offensive, defensive = effect.positions
        self._write_roster(positions.apply_positions(self.roster.get(), offensive, defensive))
        if effect.momentum:
            update = momentum.adjust(sector, effect.momentum, self.squad_name())
            if update.changed:
                self._write_sector(update.sector)
                events.extend(update.events)
        self._applied_advance = result
        return ok(effect.description)

    def _start_tactic_roll(self, sector: Sector, ok, fail) -> ActionResult:
        if self.tactic_roll.rolling:
            return fail("Tactic roll already in progress")
        threat = sector.threat_level
        choice_rng = self.rng("tactic", "choice")

        def on_resolved(roll: TacticRoll) -> None:
            if not self._still_resolved(self.tactic_roll):
                return
            self._applied_tactic = None
            if roll.tactic is None:
                text = f"No enemy tactic >> rolled {roll.draw} vs {sector.content.value}"
            else:
                text = f"ENEMY TACTIC >> {roll.tactic.value}: {roll.effect.description}"
            self._emit([LogEvent(kind="tactic", text=text, data={"sector_id": sector.id, "draw": roll.draw})])

        self.tactic_roll.start(
            lambda draw: resolve_tactic(draw, threat, choice_rng),
            rng=self.rng("tactic", "final"),
            interim_rng=self.rng("tactic", "interim"),
            on_resolved=on_resolved,
        )
        return ok("Rolling enemy tactic")

    def _apply_tactic(self, events: list[LogEvent], ok, fail) -> ActionResult:
        roll = self.tactic_roll.outcome
        if self.tactic_roll.phase != RollPhase.RESOLVED or roll is None or roll.tactic is None:
            return fail("No enemy tactic to apply")
        if self._applied_tactic is roll:
            return fail("Tactic already applied")
        applied = apply_tactic(self.roster.get(), roll.tactic, self.rng("tactic", "target"))
        self._applied_tactic = roll
        if not applied.affected_ids:
            return ok(f"{roll.tactic.value}: no trooper affected")
        self._write_roster(applied.roster)
        names = ", ".join(
            c.name for c in applied.roster if c.id in applied.affected_ids
        )
        events.append(LogEvent(kind="tactic", text=f"{roll.tactic.value} >> {names}"))
        return ok(roll.effect.description)

    def _resolve_incoming_fire(self, sector: Sector, events: list[LogEvent], ok, fail) -> ActionResult:
        current = self.roster.get()
        exposed = [c for c in deployed(current) if c.at_risk and not c.incapacitated]
        if not exposed:
            return fail("No trooper at risk")
        rng = self.rng("fire", "incoming")
        results = [positions.resolve_incoming_fire(c, sector.threat_level, rng) for c in exposed]
        self._write_roster(positions.apply_injuries(current, results))
        names = {c.id: c.name for c in exposed}
        for result in results:
            if result.hit:
                text = (
                    f"{names[result.combatant_id]} HIT ({result.roll} vs {result.threshold}) "
                    f">> {result.status_after.value}"
                )
            else:
                text = f"{names[result.combatant_id]} clear ({result.roll} vs {result.threshold})"
            events.append(LogEvent(kind="fire", text=text, data={"combatant_id": result.combatant_id}))
        return ok(None)
