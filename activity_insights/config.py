"""
Activity Insights - Configuration.

============================================================
CONFIGURABLE THRESHOLDS AND WINDOWS
============================================================

Every limit, window and threshold used by the aggregator and
the summary metrics lives here as a named default.

Loaded from the `activity_insights:` section of the engine
YAML file when one is supplied.

============================================================
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional
import logging

import yaml

from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)

CONFIG_SECTION = "activity_insights"


@dataclass
class InsightsConfig:
    """
    Configuration for protocol insights.
    """
    # Output bounds
    timeline_limit: int = 50             # Most recent timeline entries kept
    monthly_limit: int = 12              # Most recent monthly buckets kept

    # Focus areas
    strong_threshold: int = 10           # Interactions for "strong"
    focus_interaction_target: int = 20   # Interactions for full interaction factor
    focus_protocol_target: int = 5       # Protocols for full diversity factor
    focus_interaction_weight: float = 0.6
    focus_diversity_weight: float = 0.4

    # Summary windows
    new_protocol_window_days: int = 30   # "New protocols in last N days"
    dormant_threshold_days: int = 30     # Idle this long = dormant
    dormant_limit: int = 5               # Dormant protocols surfaced

    # Velocity / momentum
    velocity_window_days: int = 30
    velocity_trend_threshold_pct: float = 15.0
    momentum_threshold_pct: float = 10.0

    # Decay
    decay_fresh_days: int = 7
    decay_warm_days: int = 30

    # Logging
    log_calculations: bool = True

    def __post_init__(self) -> None:
        for name in (
            "timeline_limit",
            "monthly_limit",
            "strong_threshold",
            "focus_interaction_target",
            "focus_protocol_target",
            "velocity_window_days",
        ):
            if getattr(self, name) <= 0:
                raise ConfigurationError(
                    f"{name} must be positive",
                    details={name: getattr(self, name)},
                )
        weight_sum = self.focus_interaction_weight + self.focus_diversity_weight
        if abs(weight_sum - 1.0) > 1e-9:
            raise ConfigurationError(
                "Focus score weights must sum to 1.0",
                details={"sum": weight_sum},
            )
        if self.decay_fresh_days > self.decay_warm_days:
            raise ConfigurationError("decay_fresh_days cannot exceed decay_warm_days")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InsightsConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown activity_insights settings: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, path: Path) -> "InsightsConfig":
        """Load the `activity_insights` section of a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        section = data.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"'{CONFIG_SECTION}' section must be a mapping",
                details={"path": str(path)},
            )
        return cls.from_dict(section)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# =============================================================
# DEFAULT CONFIG INSTANCE
# =============================================================


_default_config: Optional[InsightsConfig] = None


def get_config() -> InsightsConfig:
    """Get the default configuration."""
    global _default_config
    if _default_config is None:
        _default_config = InsightsConfig()
    return _default_config


def set_config(config: InsightsConfig) -> None:
    """Set the default configuration."""
    global _default_config
    _default_config = config


def load_config(path: Optional[Path] = None) -> InsightsConfig:
    """
    Load configuration from file or return defaults.

    Args:
        path: Optional path to YAML config file

    Returns:
        InsightsConfig instance
    """
    if path and Path(path).exists():
        return InsightsConfig.from_yaml(Path(path))
    return InsightsConfig()
