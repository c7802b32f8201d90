"""
Spawn Decision Engine: decides the fate of every mob about to spawn.

Two passes, in priority order:
  1. Boost:   inside a target structure, any mob other than the boost target
              may be swapped for the boost target.
  2. Replace: a mob with a configured rule, inside a target structure, is
              swapped for the replacement mob with the configured probability.

Behavioral Contract:
- Pure decision over explicit inputs; the caller performs cancel/spawn
- At most one structure lookup per decision
- Rate 0 or no structure match never consumes a random draw
- A draw r replaces when r < rate, so 1.0 always and 0.0 never replaces
"""

import logging
import random
from typing import Optional, Protocol

from vanilla_plus.models.decision import SpawnDecision
from vanilla_plus.models.geometry import Location
from vanilla_plus.rules.ruleset import ReplacementRuleSet
from vanilla_plus.world.collaborators import StructureMembershipOracle
from vanilla_plus.world.structures import in_target_structure

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        ...


class _StructureLookup:
    """Resolves structure membership lazily, once per decision."""

    def __init__(
        self,
        location: Location,
        oracle: StructureMembershipOracle,
        rules: ReplacementRuleSet,
    ):
        self._location = location
        self._oracle = oracle
        self._rules = rules
        self._inside: Optional[bool] = None

    @property
    def inside(self) -> bool:
        if self._inside is None:
            self._inside = bool(in_target_structure(self._location, self._oracle, self._rules))
        return self._inside


class SpawnDecisionEngine:
    """Structure-scoped probabilistic spawn replacement."""

    def __init__(
        self,
        rules: ReplacementRuleSet,
        structures: StructureMembershipOracle,
        rng: Optional[RandomSource] = None,
        debug_log: bool = False,
    ):
        self.rules = rules
        self.structures = structures
        self.rng = rng or random.Random()
        self.debug_log = debug_log

    def decide(self, candidate_id: str, location: Location) -> SpawnDecision:
        """Return IGNORE, BOOST(boost target) or REPLACE(replacement mob)."""
        lookup = _StructureLookup(location, self.structures, self.rules)

        boosted = self._boost_pass(candidate_id, lookup)
        if boosted:
            return boosted

        return self._replacement_pass(candidate_id, location, lookup)

    def _boost_pass(
        self, candidate_id: str, lookup: _StructureLookup
    ) -> Optional[SpawnDecision]:
        chance = self.rules.boost_chance
        target = self.rules.boost_target_id

        if chance <= 0.0 or candidate_id == target:
            return None
        if not lookup.inside:
            return None

        if self.rng.random() < chance:
            if self.debug_log:
                logger.debug("Boosting %s spawn to %s", candidate_id, target)
            return SpawnDecision.boost_to(target)
        return None

    def _replacement_pass(
        self, candidate_id: str, location: Location, lookup: _StructureLookup
    ) -> SpawnDecision:
        if not self.rules.has_rule(candidate_id):
            return SpawnDecision.ignore()

        rate = self.rules.rate_for(candidate_id)
        if rate <= 0.0:
            return SpawnDecision.ignore()

        if not lookup.inside:
            return SpawnDecision.ignore()

        if self.debug_log:
            logger.debug("Detected %s spawn inside target structure at %s", candidate_id, location)

        if rate >= 1.0 or self.rng.random() < rate:
            return SpawnDecision.replace_with(self.rules.replacement_id)
        return SpawnDecision.ignore()
