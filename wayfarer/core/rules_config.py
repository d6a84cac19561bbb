"""
Encounter Rules Configuration.

Tunable numbers for encounter selection and the encounter runtime:
per-tag weight factors used by the generator and the safety bound on
auto-transition chains.

Default configuration is the "standard" preset.
"""
from dataclasses import dataclass, fields
from typing import Dict, Any, Optional
import json
from pathlib import Path


@dataclass
class RulesConfig:
    """
    Configuration for encounter weighting and runtime limits.

    Every weight is a multiplier on the template's base weight.
    The final weight is floored at min_weight.
    """
    # Base
    base_weight: float = 1.0
    min_weight: float = 0.1

    # Pirate: scales with local criminal activity
    pirate_base_multiplier: float = 0.5
    pirate_crime_scale: float = 0.3
    default_crime_level: int = 2

    # Patrol: scales with local security
    patrol_base_multiplier: float = 0.5
    patrol_security_scale: float = 0.3

    # Trader: scales with local economy
    trader_base_multiplier: float = 0.5
    trader_economic_scale: float = 0.25

    # Smuggler: thrives where security is low and crime is present
    smuggler_security_scale: float = 0.2
    smuggler_crime_base: float = 0.5
    smuggler_crime_scale: float = 0.2

    # Cargo encounters are more likely when carrying valuables
    cargo_value_threshold: int = 100
    cargo_multiplier: float = 1.5

    # Combat scales with route hazard
    combat_base_multiplier: float = 0.8
    combat_hazard_scale: float = 0.15

    # Modifiers
    rare_multiplier: float = 0.3
    suggested_type_multiplier: float = 2.0
    faction_multiplier: float = 1.3
    distress_multiplier: float = 0.7

    # Runtime guard against auto-transition cycles in authored content
    max_auto_transitions: int = 32

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RulesConfig":
        """Create config from dictionary. Unknown keys are ignored."""
        defaults = cls()
        kwargs = {}
        for f in fields(cls):
            kwargs[f.name] = data.get(f.name, getattr(defaults, f.name))
        return cls(**kwargs)

    def save_to_file(self, filepath: Path) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: Path) -> "RulesConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)


# Preset configurations for quick setup
PRESET_CONFIGS = {
    "standard": RulesConfig(),
    "lawless_frontier": RulesConfig(
        pirate_crime_scale=0.45,
        smuggler_security_scale=0.3,
        patrol_security_scale=0.15,
        combat_hazard_scale=0.25,
        rare_multiplier=0.4,
    ),
    "quiet_lanes": RulesConfig(
        pirate_crime_scale=0.15,
        combat_base_multiplier=0.5,
        combat_hazard_scale=0.1,
        trader_economic_scale=0.35,
        distress_multiplier=1.0,
    ),
}


# Global rules configuration instance
# This can be modified at runtime or loaded from a save file
_current_config: Optional[RulesConfig] = None


def get_rules_config() -> RulesConfig:
    """Get the current rules configuration."""
    global _current_config
    if _current_config is None:
        _current_config = PRESET_CONFIGS["standard"]
    return _current_config


def set_rules_config(config: RulesConfig) -> None:
    """Set the current rules configuration."""
    global _current_config
    _current_config = config


def reset_rules_config() -> None:
    """Reset to default rules configuration."""
    global _current_config
    _current_config = RulesConfig()


def apply_preset(preset_name: str) -> bool:
    """
    Apply a preset configuration.

    Args:
        preset_name: One of "standard", "lawless_frontier", or "quiet_lanes"

    Returns:
        True if preset was applied, False if preset name is invalid
    """
    if preset_name not in PRESET_CONFIGS:
        return False

    set_rules_config(PRESET_CONFIGS[preset_name])
    return True


class RulesContext:
    """
    Context manager for temporarily changing rules configuration.

    Useful for testing or temporary rule changes.

    Example:
        with RulesContext(rare_multiplier=1.0):
            # Rare encounters are weighted like any other here
            pass
        # Original config is restored
    """

    def __init__(self, **kwargs):
        self.overrides = kwargs
        self.original_config = None

    def __enter__(self):
        self.original_config = get_rules_config()

        new_config_dict = self.original_config.to_dict()
        new_config_dict.update(self.overrides)

        set_rules_config(RulesConfig.from_dict(new_config_dict))
        return get_rules_config()

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_rules_config(self.original_config)
        return False
