"""Tests for the Replacement Rule Set and config loading."""

import json

import pytest

from vanilla_plus.models.config import HauntedHouseConfig
from vanilla_plus.models.rules import ReplacementRule
from vanilla_plus.rules.config_loader import load_config, save_config
from vanilla_plus.rules.ruleset import (
    ConfigError,
    ReplacementRuleSet,
    parse_rule,
    parse_structure,
)


class TestParseRule:
    def test_percent_is_normalized(self):
        rule = parse_rule("minecraft:witch:10")
        assert rule.candidate_id == "minecraft:witch"
        assert rule.replacement_rate == pytest.approx(0.10)

    def test_fractional_percent(self):
        assert parse_rule("minecraft:zombie:12.5").replacement_rate == pytest.approx(0.125)

    @pytest.mark.parametrize("entry", [
        "bad_format",
        "minecraft:witch",
        "minecraft:witch:10:extra",
        "minecraft:witch:abc",
        "minecraft:witch:150",
        "minecraft:witch:-1",
        "minecraft:witch:nan",
        "minecraft::10",
        "",
    ])
    def test_malformed_entries_raise(self, entry):
        with pytest.raises(ConfigError):
            parse_rule(entry)

    def test_structure_entry_requires_namespace(self):
        assert parse_structure("nova_structures:witch_villa") == "nova_structures:witch_villa"
        with pytest.raises(ConfigError):
            parse_structure("witch_villa")


class TestReplacementRuleSet:
    def test_rate_for_configured_and_unknown(self):
        rules = ReplacementRuleSet.load(["minecraft:witch:10", "minecraft:zombie:100"])
        assert rules.rate_for("minecraft:witch") == pytest.approx(0.10)
        assert rules.rate_for("minecraft:zombie") == 1.0
        assert rules.rate_for("minecraft:creeper") == 0.0
        assert not rules.has_rule("minecraft:creeper")

    def test_rate_for_is_stable(self):
        rules = ReplacementRuleSet.load(["minecraft:witch:25"])
        first = rules.rate_for("minecraft:witch")
        for _ in range(5):
            assert rules.rate_for("minecraft:witch") == first
        assert rules.to_entries() == ["minecraft:witch:25"]

    def test_bad_entries_do_not_block_valid_siblings(self):
        """A malformed line is skipped; the rest of the load still applies."""
        rules = ReplacementRuleSet.load(
            ["minecraft:witch:150", "bad_format", "minecraft:zombie:20"],
            ["nova_structures:witch_villa", "not-namespaced"],
        )
        assert rules.rate_for("minecraft:zombie") == pytest.approx(0.20)
        assert rules.rate_for("minecraft:witch") == 0.0
        assert rules.target_structures == ["nova_structures:witch_villa"]
        assert rules.rejected == ["minecraft:witch:150", "bad_format", "not-namespaced"]

    def test_duplicate_entries_last_wins(self):
        rules = ReplacementRuleSet.load(["minecraft:witch:10", "minecraft:witch:40"])
        assert rules.rate_for("minecraft:witch") == pytest.approx(0.40)
        assert len(rules.rules) == 1

    def test_target_structure_uses_contains_matching(self):
        rules = ReplacementRuleSet.load([], ["nova_structures:witch_villa"])
        assert rules.is_target_structure("nova_structures:witch_villa")
        assert rules.is_target_structure("nova_structures:witch_villa_swamp")
        assert not rules.is_target_structure("minecraft:witch_hut")

    def test_enabled_flag_is_separate_from_rules(self):
        assert ReplacementRuleSet.load(["minecraft:witch:10"]).default_enabled is False
        assert ReplacementRuleSet.load([], enabled=True).default_enabled is True

    def test_boost_chance_out_of_range(self):
        with pytest.raises(ConfigError):
            ReplacementRuleSet.load([], boost_chance=1.5)

    def test_round_trip_through_canonical_entries(self):
        original = ReplacementRuleSet.load(
            ["minecraft:witch:10", "minecraft:zombie:33.3", "minecraft:husk:0", "minecraft:stray:100"]
        )
        reloaded = ReplacementRuleSet.load(original.to_entries())
        for rule in original.rules:
            assert reloaded.rate_for(rule.candidate_id) == original.rate_for(rule.candidate_id)
        assert reloaded.to_entries() == original.to_entries()

    def test_configured_percent_is_written_back_exactly(self):
        original = ReplacementRuleSet.load(["minecraft:witch:12.345678"])
        assert original.to_entries() == ["minecraft:witch:12.345678"]

        reloaded = ReplacementRuleSet.load(original.to_entries())
        assert reloaded.rate_for("minecraft:witch") == original.rate_for("minecraft:witch")

    def test_rule_without_configured_percent_is_written_from_rate(self):
        rules = ReplacementRuleSet(
            rules={"minecraft:witch": ReplacementRule(candidate_id="minecraft:witch", replacement_rate=0.1)},
            target_structures=[],
        )
        assert rules.to_entries() == ["minecraft:witch:10"]

    def test_from_config(self):
        config = HauntedHouseConfig(
            enabled=True,
            target_mobs=["minecraft:witch:50"],
            witch_boost_chance=0.25,
            replacement_entity="alexsmobs:murmur",
        )
        rules = ReplacementRuleSet.from_config(config)
        assert rules.default_enabled is True
        assert rules.rate_for("minecraft:witch") == 0.5
        assert rules.boost_chance == 0.25
        assert rules.replacement_id == "alexsmobs:murmur"


class TestConfigLoader:
    def test_missing_file_yields_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.json")
        assert config == HauntedHouseConfig()
        assert config.enabled is False
        assert config.target_mobs == ["minecraft:witch:10"]

    def test_loads_json(self, tmp_path):
        path = tmp_path / "haunted_house.json"
        path.write_text(json.dumps({
            "enabled": True,
            "target_mobs": ["minecraft:witch:30", "bad_format"],
        }))
        config = load_config(path)
        assert config.enabled is True
        # List entries are validated by the rule set, not the loader
        assert config.target_mobs == ["minecraft:witch:30", "bad_format"]

    def test_invalid_scalar_raises(self, tmp_path):
        path = tmp_path / "haunted_house.json"
        path.write_text(json.dumps({"witch_boost_chance": 2.0}))
        with pytest.raises(ConfigError):
            load_config(path)

    def test_unparseable_json_raises(self, tmp_path):
        path = tmp_path / "haunted_house.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "haunted_house.json"
        config = HauntedHouseConfig(enabled=True, witch_boost_chance=0.1)
        save_config(config, path)
        assert load_config(path) == config
