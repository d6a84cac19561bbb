"""Tests for the encounter rules configuration."""
import pytest
from pathlib import Path
import tempfile

from wayfarer.core.rules_config import (
    PRESET_CONFIGS,
    RulesConfig,
    RulesContext,
    apply_preset,
    get_rules_config,
    reset_rules_config,
    set_rules_config,
)


class TestRulesConfig:
    """Test the RulesConfig dataclass."""

    def setup_method(self):
        """Reset config before each test."""
        reset_rules_config()

    def test_default_config(self):
        """Defaults match the standard weighting table."""
        config = RulesConfig()

        assert config.base_weight == 1.0
        assert config.min_weight == 0.1
        assert config.rare_multiplier == 0.3
        assert config.suggested_type_multiplier == 2.0
        assert config.max_auto_transitions == 32

    def test_config_to_dict(self):
        data = RulesConfig().to_dict()

        assert data["pirate_crime_scale"] == 0.3
        assert data["cargo_value_threshold"] == 100

    def test_config_from_dict(self):
        """Missing keys fall back to defaults; unknown keys are ignored."""
        config = RulesConfig.from_dict({
            "rare_multiplier": 0.5,
            "max_auto_transitions": 8,
            "no_such_setting": True,
        })

        assert config.rare_multiplier == 0.5
        assert config.max_auto_transitions == 8
        assert config.faction_multiplier == 1.3

    def test_save_and_load(self):
        config = RulesConfig(distress_multiplier=1.2, min_weight=0.05)

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "rules.json"
            config.save_to_file(filepath)
            loaded = RulesConfig.load_from_file(filepath)

        assert loaded == config


class TestGlobalConfig:
    """Test the process-wide configuration."""

    def setup_method(self):
        reset_rules_config()

    def test_default_is_standard(self):
        assert get_rules_config() == PRESET_CONFIGS["standard"]

    def test_set_rules_config(self):
        custom = RulesConfig(cargo_multiplier=3.0)

        set_rules_config(custom)

        assert get_rules_config() is custom

    @pytest.mark.parametrize("preset", ["standard", "lawless_frontier", "quiet_lanes"])
    def test_apply_preset(self, preset):
        assert apply_preset(preset)
        assert get_rules_config() == PRESET_CONFIGS[preset]

    def test_apply_unknown_preset(self):
        assert not apply_preset("anarchy")
        assert get_rules_config() == RulesConfig()

    def test_lawless_frontier_favors_pirates(self):
        lawless = PRESET_CONFIGS["lawless_frontier"]
        quiet = PRESET_CONFIGS["quiet_lanes"]

        assert lawless.pirate_crime_scale > RulesConfig().pirate_crime_scale > quiet.pirate_crime_scale


class TestRulesContext:
    """Test temporary overrides."""

    def setup_method(self):
        reset_rules_config()

    def test_override_and_restore(self):
        original = get_rules_config()

        with RulesContext(rare_multiplier=1.0, max_auto_transitions=4) as config:
            assert config.rare_multiplier == 1.0
            assert get_rules_config().max_auto_transitions == 4

        assert get_rules_config() is original

    def test_restores_after_exception(self):
        original = get_rules_config()

        with pytest.raises(RuntimeError):
            with RulesContext(min_weight=0.5):
                raise RuntimeError("boom")

        assert get_rules_config() is original
