"""Haunted House configuration surface."""

from typing import List

from pydantic import BaseModel, Field


class HauntedHouseConfig(BaseModel):
    """Configuration for the Haunted House module.

    List entries are validated individually by the rule set, so a single
    malformed string never rejects the whole document.
    """

    enabled: bool = False                   # Off until the required mods ship for this version
    debug_log: bool = False

    # "namespace:mob_id:replacement_percent", e.g. 10% of witches become murmurs
    target_mobs: List[str] = ["minecraft:witch:10"]
    # "namespace:structure_id"; matched as a substring of the actual structure id
    target_structures: List[str] = ["nova_structures:witch_villa"]

    replacement_entity: str = "alexsmobs:murmur"
    boost_target: str = "minecraft:witch"
    witch_boost_chance: float = Field(ge=0.0, le=1.0, default=0.0)

    visibility_check_interval_ticks: int = Field(ge=1, default=10)
    spotting_range: float = Field(gt=0.0, default=32.0)
    view_dot_threshold: float = Field(ge=-1.0, le=1.0, default=0.95)
    occlusion_tolerance: float = Field(ge=0.0, default=0.5)
    concealment_effect: str = "minecraft:invisibility"

    ambient_effect: str = "minecraft:darkness"
    ambient_effect_duration_ticks: int = Field(ge=1, default=60)
    ambient_refresh_interval_ticks: int = Field(ge=1, default=20)

    required_mods: List[str] = ["alexsmobs", "mr_dungeons_andtaverns"]
