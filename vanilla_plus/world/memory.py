"""
In-memory host collaborators.

Stand-ins for the game engine used by tests and by the default admin app.
A production host adapts its own structure manager, raycaster, player list
and entity registry to the protocols in `collaborators`.
"""

from typing import Dict, List, Optional, Set, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel

from vanilla_plus.models.geometry import Location, Vec3
from vanilla_plus.models.world import LineOfSightHit, Observer
from vanilla_plus.world.collaborators import OracleUnavailable, SpawnError


class Box(BaseModel):
    """Axis-aligned box, inclusive on both corners."""

    world: str = "minecraft:overworld"
    min_corner: Vec3
    max_corner: Vec3

    def contains(self, location: Location) -> bool:
        if location.world != self.world:
            return False
        p = location.position
        lo, hi = self.min_corner, self.max_corner
        return lo.x <= p.x <= hi.x and lo.y <= p.y <= hi.y and lo.z <= p.z <= hi.z

    def intersect_segment(self, start: Vec3, end: Vec3) -> Optional[float]:
        """Fraction along start→end where the segment enters the box (slab test)."""
        t_min, t_max = 0.0, 1.0
        for axis in ("x", "y", "z"):
            s = getattr(start, axis)
            d = getattr(end, axis) - s
            lo = getattr(self.min_corner, axis)
            hi = getattr(self.max_corner, axis)
            if abs(d) < 1e-12:
                if s < lo or s > hi:
                    return None
                continue
            t1, t2 = (lo - s) / d, (hi - s) / d
            if t1 > t2:
                t1, t2 = t2, t1
            t_min = max(t_min, t1)
            t_max = min(t_max, t2)
            if t_min > t_max:
                return None
        return t_min


class InMemoryStructureIndex:
    """Structure placements as named boxes."""

    def __init__(self):
        self._placements: List[Tuple[str, Box]] = []
        self.available = True

    def add(self, structure_id: str, box: Box) -> None:
        self._placements.append((structure_id, box))

    def structures_at(self, location: Location) -> Set[str]:
        if not self.available:
            raise OracleUnavailable("structure index offline")
        return {sid for sid, box in self._placements if box.contains(location)}


class BoxLineOfSight:
    """Raycasts against a set of solid boxes in a single world."""

    def __init__(self, occluders: Optional[List[Box]] = None):
        self.occluders = list(occluders or [])
        self.queries: List[Tuple[Vec3, Vec3, UUID]] = []
        self.available = True

    def query(self, from_point: Vec3, to_point: Vec3, ignoring: UUID) -> LineOfSightHit:
        if not self.available:
            raise OracleUnavailable("raycast unavailable")
        self.queries.append((from_point, to_point, ignoring))

        nearest: Optional[float] = None
        for box in self.occluders:
            t = box.intersect_segment(from_point, to_point)
            if t is not None and (nearest is None or t < nearest):
                nearest = t

        if nearest is None:
            return LineOfSightHit(hit=False)

        direction = to_point.subtract(from_point)
        point = Vec3(
            x=from_point.x + direction.x * nearest,
            y=from_point.y + direction.y * nearest,
            z=from_point.z + direction.z * nearest,
        )
        return LineOfSightHit(
            hit=True,
            hit_distance=point.distance_sqr(from_point) ** 0.5,
            hit_point=point,
        )


class StaticObserverRoster:
    """A fixed list of observers per world."""

    def __init__(self):
        self._observers: Dict[str, List[Observer]] = {}
        self.available = True

    def set_observers(self, world: str, observers: List[Observer]) -> None:
        self._observers[world] = list(observers)

    def active_observers(self, world: str) -> List[Observer]:
        if not self.available:
            raise OracleUnavailable("player list unavailable")
        return list(self._observers.get(world, []))


class RecordingEntityLifecycle:
    """Hands out fresh ids and remembers what was spawned."""

    def __init__(self, unknown_types: Optional[Set[str]] = None):
        self.unknown_types = set(unknown_types or ())
        self.spawned: Dict[UUID, Tuple[str, Location]] = {}

    def create(self, type_id: str, position: Location, yaw: float, pitch: float) -> UUID:
        if type_id in self.unknown_types:
            raise SpawnError(f"Failed to find entity type {type_id}")
        entity_id = uuid4()
        self.spawned[entity_id] = (type_id, position)
        return entity_id


class RecordingEffectChannel:
    """Keeps the currently active effects per target."""

    def __init__(self):
        self.active: Dict[UUID, Dict[str, int]] = {}
        self.history: List[Tuple[str, UUID, str]] = []

    def apply(self, target_id: UUID, effect_kind: str, duration_ticks: int) -> None:
        self.active.setdefault(target_id, {})[effect_kind] = duration_ticks
        self.history.append(("apply", target_id, effect_kind))

    def remove(self, target_id: UUID, effect_kind: str) -> None:
        self.active.get(target_id, {}).pop(effect_kind, None)
        self.history.append(("remove", target_id, effect_kind))

    def has(self, target_id: UUID, effect_kind: str) -> bool:
        return effect_kind in self.active.get(target_id, {})
