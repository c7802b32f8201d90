"""Vanilla Plus data models."""

from vanilla_plus.models.config import HauntedHouseConfig
from vanilla_plus.models.decision import DecisionKind, SpawnDecision, SpawnOutcome
from vanilla_plus.models.geometry import Location, Vec3
from vanilla_plus.models.rules import ReplacementRule
from vanilla_plus.models.tracking import (
    StructureOccupancy,
    TrackedReplacement,
    ZoneTransition,
)
from vanilla_plus.models.world import (
    EntityView,
    LineOfSightHit,
    Observer,
    SpawnCandidate,
)

__all__ = [
    "DecisionKind",
    "EntityView",
    "HauntedHouseConfig",
    "LineOfSightHit",
    "Location",
    "Observer",
    "ReplacementRule",
    "SpawnCandidate",
    "SpawnDecision",
    "SpawnOutcome",
    "StructureOccupancy",
    "TrackedReplacement",
    "Vec3",
    "ZoneTransition",
]
