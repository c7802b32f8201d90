"""Tests for the Zone Occupancy Tracker."""

from uuid import uuid4

from vanilla_plus.models.geometry import Location, Vec3
from vanilla_plus.models.tracking import ZoneTransition
from vanilla_plus.occupancy.tracker import ZoneOccupancyTracker
from vanilla_plus.rules.ruleset import ReplacementRuleSet
from vanilla_plus.world.memory import Box, InMemoryStructureIndex

INSIDE = Location(position=Vec3(x=5, y=64, z=5))
OUTSIDE = Location(position=Vec3(x=100, y=64, z=100))


def _make_tracker() -> ZoneOccupancyTracker:
    index = InMemoryStructureIndex()
    index.add(
        "nova_structures:witch_villa",
        Box(min_corner=Vec3(x=0, y=60, z=0), max_corner=Vec3(x=20, y=80, z=20)),
    )
    index.add(
        "minecraft:village_plains",
        Box(min_corner=Vec3(x=90, y=60, z=90), max_corner=Vec3(x=120, y=80, z=120)),
    )
    rules = ReplacementRuleSet.load([], ["nova_structures:witch_villa"])
    return ZoneOccupancyTracker(rules, index)


class TestZoneOccupancyTracker:
    def setup_method(self):
        self.tracker = _make_tracker()
        self.observer_id = uuid4()

    def test_enter_and_leave_sequence(self):
        transitions = [
            self.tracker.tick(self.observer_id, loc, now=1000 + i)
            for i, loc in enumerate([OUTSIDE, INSIDE, INSIDE, OUTSIDE])
        ]
        assert transitions == [
            ZoneTransition.NONE,
            ZoneTransition.ENTERED,
            ZoneTransition.NONE,
            ZoneTransition.LEFT,
        ]
        assert not self.tracker.is_inside(self.observer_id)

    def test_second_inside_tick_keeps_timestamp(self):
        self.tracker.tick(self.observer_id, INSIDE, now=1000)
        self.tracker.tick(self.observer_id, INSIDE, now=2000)
        assert self.tracker.get(self.observer_id).entered_at == 1000
        assert len(self.tracker.entries()) == 1

    def test_default_timestamp_is_wall_clock(self):
        self.tracker.tick(self.observer_id, INSIDE)
        assert self.tracker.get(self.observer_id).entered_at > 0

    def test_non_target_structure_is_outside(self):
        assert self.tracker.tick(self.observer_id, OUTSIDE) == ZoneTransition.NONE
        assert self.tracker.entries() == []

    def test_observers_tracked_independently(self):
        other = uuid4()
        assert self.tracker.tick(self.observer_id, INSIDE) == ZoneTransition.ENTERED
        assert self.tracker.tick(other, INSIDE) == ZoneTransition.ENTERED
        assert self.tracker.tick(self.observer_id, OUTSIDE) == ZoneTransition.LEFT
        assert self.tracker.is_inside(other)

    def test_structure_outage_keeps_current_zone(self):
        assert self.tracker.tick(self.observer_id, INSIDE, now=1000) == ZoneTransition.ENTERED

        self.tracker.structures.available = False
        assert self.tracker.tick(self.observer_id, INSIDE, now=2000) == ZoneTransition.NONE
        assert self.tracker.is_inside(self.observer_id)

        self.tracker.structures.available = True
        assert self.tracker.tick(self.observer_id, INSIDE, now=3000) == ZoneTransition.NONE
        assert self.tracker.get(self.observer_id).entered_at == 1000

    def test_structure_outage_never_enters(self):
        self.tracker.structures.available = False
        assert self.tracker.tick(self.observer_id, INSIDE) == ZoneTransition.NONE
        assert self.tracker.entries() == []

    def test_forget_drops_observer(self):
        self.tracker.tick(self.observer_id, INSIDE)
        assert self.tracker.forget(self.observer_id) is True
        assert self.tracker.tick(self.observer_id, INSIDE) == ZoneTransition.ENTERED

    def test_world_must_match(self):
        nether = Location(world="minecraft:the_nether", position=INSIDE.position)
        assert self.tracker.tick(self.observer_id, nether) == ZoneTransition.NONE
