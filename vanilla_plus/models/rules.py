"""Replacement Rule: one parsed `namespace:id:percent` entry."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReplacementRule(BaseModel):
    """Probability that a spawn candidate is swapped for the replacement mob."""

    model_config = ConfigDict(frozen=True)

    candidate_id: str                       # e.g., "minecraft:witch"
    replacement_rate: float = Field(ge=0.0, le=1.0)
    percent: Optional[float] = Field(ge=0.0, le=100.0, default=None)  # As configured
