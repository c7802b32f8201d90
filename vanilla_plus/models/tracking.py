"""Tracking records owned by the visibility and occupancy trackers."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class TrackedReplacement(BaseModel):
    """A replacement entity that stays concealed until an observer spots it."""

    entity_id: UUID
    spotted: bool = False                   # Monotonic: False -> True only
    tracked_at: datetime


class StructureOccupancy(BaseModel):
    """An observer currently standing inside a target structure."""

    observer_id: UUID
    entered_at: int                         # Epoch milliseconds


class ZoneTransition(str, Enum):
    NONE = "none"
    ENTERED = "entered"
    LEFT = "left"
