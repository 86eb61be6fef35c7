"""
Eligibility - Configuration.

Loaded from the `eligibility:` section of the engine YAML file.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional
import logging

import yaml

from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)

CONFIG_SECTION = "eligibility"


@dataclass
class EligibilityConfig:
    """
    Configuration for criteria checking and project scoring.
    """
    # Log one line per scored project
    log_results: bool = True

    # Raise UnsupportedCriterionError instead of treating an
    # unhandled criterion as not met
    strict_kinds: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EligibilityConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown eligibility settings: {sorted(unknown)}")
        for name in known & set(data):
            if not isinstance(data[name], bool):
                raise ConfigurationError(
                    f"{name} must be a boolean",
                    details={name: data[name]},
                )
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, path: Path) -> "EligibilityConfig":
        """Load the `eligibility` section of a YAML file."""
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


_default_config: Optional[EligibilityConfig] = None


def get_config() -> EligibilityConfig:
    """Get the default configuration."""
    global _default_config
    if _default_config is None:
        _default_config = EligibilityConfig()
    return _default_config


def set_config(config: EligibilityConfig) -> None:
    """Set the default configuration."""
    global _default_config
    _default_config = config


def load_config(path: Optional[Path] = None) -> EligibilityConfig:
    """Load configuration from file or return defaults."""
    if path and Path(path).exists():
        return EligibilityConfig.from_yaml(Path(path))
    return EligibilityConfig()
