"""
Zone Occupancy Tracker: which observers are inside a target structure.

Emits ENTERED the first tick an observer is found inside, LEFT the first
tick they are found outside again, and NONE otherwise. Effect refresh
cadence belongs to the caller.
"""

import threading
import time
from typing import Dict, List, Optional
from uuid import UUID

from vanilla_plus.models.geometry import Location
from vanilla_plus.models.tracking import StructureOccupancy, ZoneTransition
from vanilla_plus.rules.ruleset import ReplacementRuleSet
from vanilla_plus.world.collaborators import StructureMembershipOracle
from vanilla_plus.world.structures import in_target_structure


def _now_millis() -> int:
    return int(time.time() * 1000)


class ZoneOccupancyTracker:
    """Owns the per-observer occupancy store."""

    def __init__(self, rules: ReplacementRuleSet, structures: StructureMembershipOracle):
        self.rules = rules
        self.structures = structures
        self._occupancy: Dict[UUID, StructureOccupancy] = {}
        self._lock = threading.Lock()

    def tick(
        self,
        observer_id: UUID,
        location: Location,
        now: Optional[int] = None,
    ) -> ZoneTransition:
        inside = in_target_structure(location, self.structures, self.rules)
        if inside is None:
            # Lookup failed: keep the current record, no transition this tick
            return ZoneTransition.NONE

        with self._lock:
            record = self._occupancy.get(observer_id)

            if inside and record is None:
                self._occupancy[observer_id] = StructureOccupancy(
                    observer_id=observer_id,
                    entered_at=now if now is not None else _now_millis(),
                )
                return ZoneTransition.ENTERED

            if not inside and record is not None:
                del self._occupancy[observer_id]
                return ZoneTransition.LEFT

            return ZoneTransition.NONE

    def forget(self, observer_id: UUID) -> bool:
        """Drop an observer that left the server."""
        with self._lock:
            return self._occupancy.pop(observer_id, None) is not None

    def is_inside(self, observer_id: UUID) -> bool:
        return observer_id in self._occupancy

    def get(self, observer_id: UUID) -> Optional[StructureOccupancy]:
        return self._occupancy.get(observer_id)

    def entries(self) -> List[StructureOccupancy]:
        return list(self._occupancy.values())
