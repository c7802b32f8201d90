"""
Haunted House Module: host-integration layer.

Spawns murmurs in place of witches inside witch villas. The replacement
stays invisible until a player looks straight at it, and players inside a
villa are kept in an ambient darkness effect.

The host calls one handler per event kind:
  on_finalize_spawn  : a mob is about to spawn
  on_entity_tick     : an entity ticks
  on_entity_removed  : an entity left the world
  on_player_tick     : a player ticks
  on_player_logout   : a player disconnected

Behavioral Contract:
- Handlers never raise into the host; every failure degrades to
  "no replacement / no visibility change / no zone transition"
- A failed replacement spawn is logged; the original stays cancelled and
  the spawn is not retried
- Tracker state survives a config reload; the rule set is swapped wholesale
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from vanilla_plus.models.config import HauntedHouseConfig
from vanilla_plus.models.decision import DecisionKind, SpawnDecision, SpawnOutcome
from vanilla_plus.models.geometry import Location
from vanilla_plus.models.tracking import ZoneTransition
from vanilla_plus.models.world import EntityView, SpawnCandidate
from vanilla_plus.occupancy.tracker import ZoneOccupancyTracker
from vanilla_plus.rules.ruleset import ReplacementRuleSet
from vanilla_plus.spawning.engine import RandomSource, SpawnDecisionEngine
from vanilla_plus.visibility.tracker import VisibilityTracker
from vanilla_plus.world.collaborators import (
    EffectChannel,
    EntityLifecycle,
    LineOfSightOracle,
    ObserverRoster,
    OracleUnavailable,
    SpawnError,
    StructureMembershipOracle,
)

logger = logging.getLogger(__name__)

# Effects applied with this duration never wear off on their own
INFINITE_DURATION = 2**31 - 1


class HauntedHouseModule:
    """Wires the rule set, decision engine and trackers to host events."""

    module_id = "haunted_house"
    display_name = "Haunted House"
    description = "Spawns Murmurs from Alex's Mobs in Dungeons and Taverns' Witch Villas"

    def __init__(
        self,
        structures: StructureMembershipOracle,
        line_of_sight: LineOfSightOracle,
        roster: ObserverRoster,
        lifecycle: EntityLifecycle,
        effects: EffectChannel,
        config: Optional[HauntedHouseConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.structures = structures
        self.line_of_sight = line_of_sight
        self.roster = roster
        self.lifecycle = lifecycle
        self.effects = effects
        self.config = config or HauntedHouseConfig()

        self.rules = ReplacementRuleSet.from_config(self.config)
        self.engine = SpawnDecisionEngine(
            self.rules, structures, rng=rng, debug_log=self.config.debug_log
        )
        self.visibility = VisibilityTracker(
            spotting_range=self.config.spotting_range,
            view_dot_threshold=self.config.view_dot_threshold,
            occlusion_tolerance=self.config.occlusion_tolerance,
        )
        self.occupancy = ZoneOccupancyTracker(self.rules, structures)
        self._initialized = False

    # --- Lifecycle ---

    def should_initialize(self, loaded_mods: Iterable[str]) -> bool:
        """The module needs every required mod to be present."""
        loaded = set(loaded_mods)
        missing = [m for m in self.config.required_mods if m not in loaded]
        if missing:
            logger.warning(
                "%s module not initialized - Missing required mods: %s",
                self.display_name,
                " and ".join(missing),
            )
            return False
        return True

    def initialize(self, loaded_mods: Iterable[str]) -> bool:
        self._initialized = self.should_initialize(loaded_mods)
        if self._initialized:
            logger.info("%s module initialized - Murmurs may now spawn in Witch Villas!", self.display_name)
        return self._initialized

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def is_enabled(self) -> bool:
        return self._initialized and self.rules.default_enabled

    def reload_config(self, config: HauntedHouseConfig) -> ReplacementRuleSet:
        """Swap in a new config. Trackers keep their state."""
        rules = ReplacementRuleSet.from_config(config)
        self.config = config
        self.rules = rules
        self.engine.rules = rules
        self.engine.debug_log = config.debug_log
        self.occupancy.rules = rules
        self.visibility.spotting_range = config.spotting_range
        self.visibility.view_dot_threshold = config.view_dot_threshold
        self.visibility.occlusion_tolerance = config.occlusion_tolerance

        logger.info(
            "%s config reloaded: %d rule(s), %d target structure(s), %d rejected entr%s",
            self.display_name,
            len(rules.rules),
            len(rules.target_structures),
            len(rules.rejected),
            "y" if len(rules.rejected) == 1 else "ies",
        )
        return rules

    # --- Spawn events ---

    def on_finalize_spawn(self, candidate: SpawnCandidate) -> SpawnOutcome:
        """Decide and, when needed, cancel the spawn and create the alternate."""
        if not self.is_enabled or candidate.is_client_side:
            return SpawnOutcome(decision=SpawnDecision.ignore())

        decision = self.engine.decide(candidate.type_id, candidate.location)
        if not decision.cancels_original:
            return SpawnOutcome(decision=decision)

        if self.config.debug_log:
            logger.debug("Cancelled %s spawn at %s", candidate.type_id, candidate.location.position)

        try:
            entity_id = self.lifecycle.create(
                decision.alternate_id,
                candidate.location,
                candidate.yaw,
                candidate.pitch,
            )
        except SpawnError as e:
            logger.error("Failed to spawn %s in place of %s: %s", decision.alternate_id, candidate.type_id, e)
            return SpawnOutcome(decision=decision, cancelled=True, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error spawning %s in place of %s", decision.alternate_id, candidate.type_id)
            return SpawnOutcome(decision=decision, cancelled=True, error=str(e))

        if decision.kind == DecisionKind.REPLACE:
            # Tracked even if concealment fails, so a later sighting still clears it
            self.visibility.track(entity_id)
            self._apply_effect(entity_id, self.config.concealment_effect, INFINITE_DURATION)
            if self.config.debug_log:
                logger.debug("Spawned invisible %s at %s", decision.alternate_id, candidate.location.position)

        return SpawnOutcome(decision=decision, cancelled=True, spawned_entity_id=entity_id)

    def on_entity_tick(self, entity: EntityView, tick_count: int) -> bool:
        """Returns True when the entity was revealed on this tick."""
        if not self.is_enabled:
            return False
        if tick_count % self.config.visibility_check_interval_ticks != 0:
            return False
        if not self.visibility.is_tracked(entity.id) or self.visibility.is_spotted(entity.id):
            return False

        try:
            observers = self.roster.active_observers(entity.world)
        except OracleUnavailable as e:
            logger.warning("Observer roster unavailable for %s: %s", entity.world, e)
            return False

        if not self.visibility.check_visibility(entity, observers, self.line_of_sight):
            return False

        self._remove_effect(entity.id, self.config.concealment_effect)
        return True

    def on_entity_removed(self, entity_id: UUID) -> None:
        if self.visibility.forget(entity_id) and self.config.debug_log:
            logger.debug("Stopped tracking removed entity %s", entity_id)

    # --- Player events ---

    def on_player_tick(self, observer_id: UUID, location: Location, tick_count: int) -> ZoneTransition:
        if not self.is_enabled:
            return ZoneTransition.NONE

        transition = self.occupancy.tick(observer_id, location)
        effect = self.config.ambient_effect
        duration = self.config.ambient_effect_duration_ticks

        if transition == ZoneTransition.ENTERED:
            self._apply_effect(observer_id, effect, duration)
        elif transition == ZoneTransition.LEFT:
            self._remove_effect(observer_id, effect)
        elif (
            self.occupancy.is_inside(observer_id)
            and tick_count % self.config.ambient_refresh_interval_ticks == 0
        ):
            self._apply_effect(observer_id, effect, duration)

        return transition

    def on_player_logout(self, observer_id: UUID) -> None:
        self.occupancy.forget(observer_id)

    # --- Operator view ---

    def status(self) -> dict:
        return {
            "module_id": self.module_id,
            "initialized": self._initialized,
            "enabled": self.is_enabled,
            "tracked_replacements": len(self.visibility.entries()),
            "hidden_replacements": self.visibility.hidden_count(),
            "occupied_observers": len(self.occupancy.entries()),
        }

    # --- Effect delivery ---

    def _apply_effect(self, target_id: UUID, effect_kind: str, duration_ticks: int) -> None:
        try:
            self.effects.apply(target_id, effect_kind, duration_ticks)
        except Exception:
            logger.exception("Failed to apply %s to %s", effect_kind, target_id)

    def _remove_effect(self, target_id: UUID, effect_kind: str) -> None:
        try:
            self.effects.remove(target_id, effect_kind)
        except Exception:
            logger.exception("Failed to remove %s from %s", effect_kind, target_id)
