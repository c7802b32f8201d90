"""Spawn Decision: output of the Spawn Decision Engine."""

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class DecisionKind(str, Enum):
    IGNORE = "ignore"       # Let the original spawn proceed
    BOOST = "boost"         # Swap for the boost target (pre-empts REPLACE)
    REPLACE = "replace"     # Cancel and spawn the configured replacement


class SpawnDecision(BaseModel):
    """The engine's ruling on a single spawn candidate."""

    kind: DecisionKind
    alternate_id: Optional[str] = None

    @classmethod
    def ignore(cls) -> "SpawnDecision":
        return cls(kind=DecisionKind.IGNORE)

    @classmethod
    def boost_to(cls, alternate_id: str) -> "SpawnDecision":
        return cls(kind=DecisionKind.BOOST, alternate_id=alternate_id)

    @classmethod
    def replace_with(cls, alternate_id: str) -> "SpawnDecision":
        return cls(kind=DecisionKind.REPLACE, alternate_id=alternate_id)

    @property
    def cancels_original(self) -> bool:
        return self.kind != DecisionKind.IGNORE


class SpawnOutcome(BaseModel):
    """What the host-integration layer did with a decision."""

    decision: SpawnDecision
    cancelled: bool = False
    spawned_entity_id: Optional[UUID] = None
    error: Optional[str] = None
