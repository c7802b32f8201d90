"""
Visibility Tracker: "hidden until spotted" state for replacement entities.

States per tracked entity:
  HIDDEN → VISIBLE (terminal; an entity is never re-hidden)

An entity becomes visible when the first qualifying observer (in roster
order) is within range, looking almost straight at it, and has an
unobstructed line of sight.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from vanilla_plus.models.geometry import Vec3
from vanilla_plus.models.tracking import TrackedReplacement
from vanilla_plus.models.world import EntityView, Observer
from vanilla_plus.world.collaborators import LineOfSightOracle, OracleUnavailable

logger = logging.getLogger(__name__)

SPOTTING_RANGE = 32.0
VIEW_DOT_THRESHOLD = 0.95       # ~18 degrees off direct gaze
OCCLUSION_TOLERANCE = 0.5


def _is_occluded(
    eye: Vec3, target: Vec3, los: LineOfSightOracle, observer_id: UUID, tolerance: float
) -> bool:
    result = los.query(eye, target, ignoring=observer_id)
    if not result.hit:
        return False

    if result.hit_point is not None:
        hit_sqr = result.hit_point.distance_sqr(eye)
    elif result.hit_distance is not None:
        hit_sqr = result.hit_distance * result.hit_distance
    else:
        return True

    return hit_sqr < target.distance_sqr(eye) - tolerance


class VisibilityTracker:
    """Owns the tracked-replacement store; mutated only through this class."""

    def __init__(
        self,
        spotting_range: float = SPOTTING_RANGE,
        view_dot_threshold: float = VIEW_DOT_THRESHOLD,
        occlusion_tolerance: float = OCCLUSION_TOLERANCE,
    ):
        self.spotting_range = spotting_range
        self.view_dot_threshold = view_dot_threshold
        self.occlusion_tolerance = occlusion_tolerance
        self._entries: Dict[UUID, TrackedReplacement] = {}
        self._lock = threading.Lock()

    def track(self, entity_id: UUID) -> TrackedReplacement:
        """Start tracking a freshly spawned, concealed replacement.

        An entity that is already tracked keeps its existing entry.
        """
        with self._lock:
            entry = self._entries.get(entity_id)
            if entry is None:
                entry = TrackedReplacement(
                    entity_id=entity_id,
                    tracked_at=datetime.now(timezone.utc),
                )
                self._entries[entity_id] = entry
            return entry

    def forget(self, entity_id: UUID) -> bool:
        """Drop an entity the host reports as gone."""
        with self._lock:
            return self._entries.pop(entity_id, None) is not None

    def get(self, entity_id: UUID) -> Optional[TrackedReplacement]:
        return self._entries.get(entity_id)

    def is_tracked(self, entity_id: UUID) -> bool:
        return entity_id in self._entries

    def is_spotted(self, entity_id: UUID) -> bool:
        entry = self._entries.get(entity_id)
        return bool(entry and entry.spotted)

    def hidden_count(self) -> int:
        return sum(1 for e in self._entries.values() if not e.spotted)

    def entries(self) -> List[TrackedReplacement]:
        return list(self._entries.values())

    def check_visibility(
        self,
        entity: EntityView,
        observers: Iterable[Observer],
        los: LineOfSightOracle,
    ) -> bool:
        """
        Evaluate observers against a hidden entity.

        Returns True only on the call that flips the entity to visible.
        """
        with self._lock:
            entry = self._entries.get(entity.id)
            if entry is None or entry.spotted:
                return False

            range_sqr = self.spotting_range * self.spotting_range
            target = entity.eye_position

            for observer in observers:
                if observer.is_spectating:
                    continue

                if observer.position.distance_sqr(entity.position) > range_sqr:
                    continue

                eye = observer.eye_position
                to_target = target.subtract(eye).normalize()
                if observer.look_vector.normalize().dot(to_target) < self.view_dot_threshold:
                    continue

                try:
                    if _is_occluded(eye, target, los, observer.id, self.occlusion_tolerance):
                        continue
                except OracleUnavailable as e:
                    logger.warning("Line of sight unavailable for %s: %s", observer.name or observer.id, e)
                    continue

                entry.spotted = True
                logger.debug("Observer %s spotted %s at %s", observer.name or observer.id, entity.type_id, entity.position)
                return True

            return False
