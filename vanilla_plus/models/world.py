"""Views of host-engine objects handed to the policy engine."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from vanilla_plus.models.geometry import Location, Vec3


class Observer(BaseModel):
    """A participant whose gaze is evaluated against hidden entities."""

    id: UUID
    name: str = ""
    position: Vec3
    eye_position: Vec3
    look_vector: Vec3                       # Need not be normalized
    is_spectating: bool = False


class EntityView(BaseModel):
    """A live entity as seen by the entity-tick handler."""

    id: UUID
    type_id: str                            # e.g., "alexsmobs:murmur"
    world: str = "minecraft:overworld"
    position: Vec3
    eye_position: Vec3


class SpawnCandidate(BaseModel):
    """A mob about to be finalized by the host's spawn pipeline."""

    type_id: str                            # e.g., "minecraft:witch"
    location: Location
    yaw: float = 0.0
    pitch: float = 0.0
    is_client_side: bool = False


class LineOfSightHit(BaseModel):
    """Result of a single raycast against solid collision geometry."""

    hit: bool = False
    hit_distance: Optional[float] = None
    hit_point: Optional[Vec3] = None
