"""
Host Collaborators: the engine services the policy engine calls into.

The host game engine owns entity lifecycle, structure lookup, raycasting,
the player roster and effect delivery. The policy engine only depends on
these narrow contracts, so tests can substitute an in-memory world.

Behavioral Contract:
- Every call is synchronous and returns immediately
- A collaborator that cannot answer raises OracleUnavailable
- EntityLifecycle.create raises SpawnError when the entity cannot be built
"""

from typing import List, Protocol, Set
from uuid import UUID

from vanilla_plus.models.geometry import Location, Vec3
from vanilla_plus.models.world import LineOfSightHit, Observer


class SpawnError(Exception):
    """Raised when the host fails to instantiate a replacement entity."""
    pass


class OracleUnavailable(Exception):
    """Raised when a collaborator query cannot be answered this cycle."""
    pass


class StructureMembershipOracle(Protocol):
    def structures_at(self, location: Location) -> Set[str]:
        """Ids of every structure overlapping the location (may be empty)."""
        ...


class LineOfSightOracle(Protocol):
    def query(self, from_point: Vec3, to_point: Vec3, ignoring: UUID) -> LineOfSightHit:
        """Raycast against solid collision geometry, skipping `ignoring`."""
        ...


class ObserverRoster(Protocol):
    def active_observers(self, world: str) -> List[Observer]:
        ...


class EntityLifecycle(Protocol):
    def create(self, type_id: str, position: Location, yaw: float, pitch: float) -> UUID:
        """Spawn a fresh entity and return its id."""
        ...


class EffectChannel(Protocol):
    """Fire-and-forget status effect delivery."""

    def apply(self, target_id: UUID, effect_kind: str, duration_ticks: int) -> None:
        ...

    def remove(self, target_id: UUID, effect_kind: str) -> None:
        ...
