"""Target-structure membership shared by spawn decisions and zone occupancy."""

import logging
from typing import Optional

from vanilla_plus.models.geometry import Location
from vanilla_plus.rules.ruleset import ReplacementRuleSet
from vanilla_plus.world.collaborators import OracleUnavailable, StructureMembershipOracle

logger = logging.getLogger(__name__)


def in_target_structure(
    location: Location,
    oracle: StructureMembershipOracle,
    rules: ReplacementRuleSet,
) -> Optional[bool]:
    """True when any structure at `location` matches a configured target.

    Returns None when the oracle is unavailable; callers treat that as
    "no match" or "no change".
    """
    try:
        structure_ids = oracle.structures_at(location)
    except OracleUnavailable as e:
        logger.warning("Structure lookup unavailable at %s: %s", location, e)
        return None

    return any(rules.is_target_structure(s) for s in structure_ids)
