"""
Vanilla Plus Admin API: FastAPI endpoints.

Operator surface for a running Haunted House module:
- Module status
- Config inspection and hot reload
- Effective replacement rules
- Dry-run spawn decisions
- Tracked replacements and structure occupancy
"""

from typing import Optional
from uuid import UUID

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from vanilla_plus.models.config import HauntedHouseConfig
from vanilla_plus.models.geometry import Location
from vanilla_plus.module.haunted_house import HauntedHouseModule
from vanilla_plus.world.memory import (
    BoxLineOfSight,
    InMemoryStructureIndex,
    RecordingEffectChannel,
    RecordingEntityLifecycle,
    StaticObserverRoster,
)


# --- Request/Response Models ---

class DecideRequest(BaseModel):
    candidate_id: str
    location: Location


class RulesResponse(BaseModel):
    enabled: bool
    rules: list
    target_structures: list
    rejected: list
    boost_chance: float
    boost_target: str
    replacement_entity: str


def _default_module() -> HauntedHouseModule:
    return HauntedHouseModule(
        structures=InMemoryStructureIndex(),
        line_of_sight=BoxLineOfSight(),
        roster=StaticObserverRoster(),
        lifecycle=RecordingEntityLifecycle(),
        effects=RecordingEffectChannel(),
    )


def create_app(module: Optional[HauntedHouseModule] = None) -> FastAPI:
    """Create the FastAPI application bound to a module instance."""

    hh = module or _default_module()

    app = FastAPI(
        title="Vanilla Plus Additions",
        description="Operator API for the Haunted House spawn policy",
        version="0.1.0",
    )

    # === MODULE ===

    @app.get("/module/status")
    def module_status():
        """Initialization state and tracker sizes."""
        return hh.status()

    # === CONFIG ===

    @app.get("/config")
    def get_config():
        return hh.config.model_dump()

    @app.put("/config")
    def reload_config(config: HauntedHouseConfig):
        """Hot reload; malformed list entries are skipped, not fatal."""
        rules = hh.reload_config(config)
        return {
            "status": "reloaded",
            "config": config.model_dump(),
            "rejected": rules.rejected,
        }

    # === RULES ===

    @app.get("/rules", response_model=RulesResponse)
    def get_rules():
        """Effective rules in canonical form."""
        rules = hh.rules
        return RulesResponse(
            enabled=rules.default_enabled,
            rules=rules.to_entries(),
            target_structures=rules.target_structures,
            rejected=rules.rejected,
            boost_chance=rules.boost_chance,
            boost_target=rules.boost_target_id,
            replacement_entity=rules.replacement_id,
        )

    # === SPAWNING ===

    @app.post("/spawn/decide")
    def decide(req: DecideRequest):
        """Dry-run a spawn decision (nothing is cancelled or spawned)."""
        decision = hh.engine.decide(req.candidate_id, req.location)
        return decision.model_dump(mode="json")

    # === TRACKING ===

    @app.get("/tracking/replacements")
    def list_replacements():
        return [e.model_dump(mode="json") for e in hh.visibility.entries()]

    @app.delete("/tracking/replacements/{entity_id}")
    def evict_replacement(entity_id: UUID):
        """Manual eviction for an entity the host never reported as removed."""
        if not hh.visibility.forget(entity_id):
            raise HTTPException(404, "Replacement not tracked")
        return {"status": "evicted", "entity_id": str(entity_id)}

    @app.get("/tracking/occupancy")
    def list_occupancy():
        return [o.model_dump(mode="json") for o in hh.occupancy.entries()]

    return app


# Default application instance
app = create_app()
