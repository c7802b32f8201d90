"""
Replacement Rule Set: parsed, immutable view of the Haunted House config.

Behavioral Contract:
- Rule entries are "namespace:mob_id:percent"; percent in [0, 100]
- Structure entries are "namespace:structure_id"
- Malformed entries are rejected one at a time (logged and skipped); the
  remaining valid entries still take effect
- Rates are normalized to [0, 1] at load time; duplicates are last-wins
- Reloads replace the whole rule set; a loaded set is never mutated
"""

import logging
from typing import Dict, Iterable, List, Optional

from vanilla_plus.models.config import HauntedHouseConfig
from vanilla_plus.models.rules import ReplacementRule

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for a malformed rule or structure entry, or an invalid config value."""
    pass


def parse_rule(entry: str) -> ReplacementRule:
    """Parse one "namespace:mob_id:percent" entry."""
    if not isinstance(entry, str) or not entry:
        raise ConfigError(f"Empty mob entry: {entry!r}")

    parts = entry.split(":")
    if len(parts) != 3 or not all(p.strip() for p in parts):
        raise ConfigError(
            f"Invalid mob entry format: '{entry}'. "
            f"Expected format: 'namespace:mob_id:replacement_rate'"
        )

    try:
        percent = float(parts[2])
    except ValueError:
        raise ConfigError(f"Invalid replacement rate in entry '{entry}'. Must be a number")

    # NaN fails both comparisons and lands here too
    if not (0.0 <= percent <= 100.0):
        raise ConfigError(
            f"Invalid replacement rate in entry '{entry}'. Rate must be between 0 and 100"
        )

    return ReplacementRule(
        candidate_id=f"{parts[0]}:{parts[1]}",
        replacement_rate=percent / 100.0,
        percent=percent,
    )


def parse_structure(entry: str) -> str:
    """Validate one "namespace:structure_id" entry."""
    if not isinstance(entry, str) or not entry:
        raise ConfigError(f"Empty structure entry: {entry!r}")

    parts = entry.split(":")
    if len(parts) != 2 or not all(p.strip() for p in parts):
        raise ConfigError(
            f"Invalid structure entry format: '{entry}'. "
            f"Expected format: 'namespace:structure_id'"
        )
    return entry


def _format_percent(rule: ReplacementRule) -> str:
    percent = rule.percent
    if percent is None:
        # 0.1 * 100 == 10.000000000000002
        percent = round(rule.replacement_rate * 100.0, 10)
    if percent.is_integer():
        return "%d" % percent
    return repr(percent)


class ReplacementRuleSet:
    """Configured replacement rules, target structures and boost settings."""

    def __init__(
        self,
        rules: Dict[str, ReplacementRule],
        target_structures: List[str],
        enabled: bool = False,
        boost_chance: float = 0.0,
        boost_target_id: str = "minecraft:witch",
        replacement_id: str = "alexsmobs:murmur",
        rejected: Optional[List[str]] = None,
    ):
        if not (0.0 <= boost_chance <= 1.0):
            raise ConfigError(f"Boost chance must be between 0 and 1, got {boost_chance}")

        self._rules = dict(rules)
        self._target_structures = list(target_structures)
        self._enabled = enabled
        self.boost_chance = boost_chance
        self.boost_target_id = boost_target_id
        self.replacement_id = replacement_id
        self.rejected = list(rejected or [])

    @classmethod
    def load(
        cls,
        rule_entries: Iterable[str],
        structure_entries: Iterable[str] = (),
        enabled: bool = False,
        boost_chance: float = 0.0,
        boost_target_id: str = "minecraft:witch",
        replacement_id: str = "alexsmobs:murmur",
    ) -> "ReplacementRuleSet":
        """
        Build a rule set from raw configuration strings.

        Bad entries are skipped with a warning and listed in `rejected`.
        Raises ConfigError only for an out-of-range boost chance.
        """
        rules: Dict[str, ReplacementRule] = {}
        structures: List[str] = []
        rejected: List[str] = []

        for entry in rule_entries:
            try:
                rule = parse_rule(entry)
            except ConfigError as e:
                logger.warning("Skipping mob entry: %s", e)
                rejected.append(str(entry))
                continue
            rules[rule.candidate_id] = rule

        for entry in structure_entries:
            try:
                structures.append(parse_structure(entry))
            except ConfigError as e:
                logger.warning("Skipping structure entry: %s", e)
                rejected.append(str(entry))

        logger.debug(
            "Parsed replacement rates: %s; target structures: %s",
            {k: r.replacement_rate for k, r in rules.items()},
            structures,
        )

        return cls(
            rules=rules,
            target_structures=structures,
            enabled=enabled,
            boost_chance=boost_chance,
            boost_target_id=boost_target_id,
            replacement_id=replacement_id,
            rejected=rejected,
        )

    @classmethod
    def from_config(cls, config: HauntedHouseConfig) -> "ReplacementRuleSet":
        return cls.load(
            config.target_mobs,
            config.target_structures,
            enabled=config.enabled,
            boost_chance=config.witch_boost_chance,
            boost_target_id=config.boost_target,
            replacement_id=config.replacement_entity,
        )

    @property
    def default_enabled(self) -> bool:
        return self._enabled

    @property
    def rules(self) -> List[ReplacementRule]:
        return list(self._rules.values())

    @property
    def target_structures(self) -> List[str]:
        return list(self._target_structures)

    def has_rule(self, candidate_id: str) -> bool:
        return candidate_id in self._rules

    def rate_for(self, candidate_id: str) -> float:
        """Replacement probability in [0, 1]; 0.0 (never replace) when unknown."""
        rule = self._rules.get(candidate_id)
        return rule.replacement_rate if rule else 0.0

    def is_target_structure(self, structure_id: str) -> bool:
        """A configured entry matches any structure id that contains it."""
        return any(target in structure_id for target in self._target_structures)

    def to_entries(self) -> List[str]:
        """Canonical "namespace:mob_id:percent" strings for the effective rules."""
        return [
            f"{rule.candidate_id}:{_format_percent(rule)}"
            for rule in self._rules.values()
        ]

    def __repr__(self) -> str:
        return (
            f"ReplacementRuleSet(rules={self.to_entries()!r}, "
            f"targets={self._target_structures!r}, enabled={self._enabled})"
        )
