"""
Smart Money Configuration - Weights and thresholds.

All weights and thresholds are configurable for tuning.
Loaded from the `smart_money:` section of the engine YAML
file; each sub-config is a nested mapping in that section.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional
import logging

import yaml

from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)

CONFIG_SECTION = "smart_money"


def _build(cls: type, data: Any, path: str) -> Any:
    """Construct a flat config dataclass from a mapping, ignoring unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must be a mapping", details={"value": data})
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown {path} settings: {sorted(unknown)}")
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ProfitabilityWeights:
    """Weights of the profitability score."""
    win_rate: float = 0.4
    roi: float = 0.4
    diversification: float = 0.2

    # ROI is divided by this and capped, so 500% ROI scores 100
    roi_divisor: float = 5.0
    roi_cap: float = 100.0

    def __post_init__(self) -> None:
        total = self.win_rate + self.roi + self.diversification
        if abs(total - 1.0) > 1e-9:
            raise ConfigurationError(
                "Profitability weights must sum to 1.0",
                details={"sum": total},
            )
        if self.roi_divisor <= 0:
            raise ConfigurationError("roi_divisor must be positive")

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class RiskWeights:
    """Maximum contribution of each risk component (sums to 100)."""
    concentration: float = 40.0
    leverage: float = 30.0
    volatility: float = 30.0

    # Holdings with |pnl %| above this are volatile
    volatile_pnl_pct: float = 50.0

    # Protocol substrings that flag a leveraged transaction
    leverage_keywords: tuple[str, ...] = ("lever", "margin")

    def __post_init__(self) -> None:
        self.leverage_keywords = tuple(k.lower() for k in self.leverage_keywords)
        for name in ("concentration", "leverage", "volatility"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"Risk weight {name} cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["leverage_keywords"] = list(self.leverage_keywords)
        return data


@dataclass
class TradingStyleThresholds:
    """Decision table for trading style."""
    aggressive_max_hold_days: float = 7.0
    aggressive_min_risk: float = 60.0
    conservative_min_hold_days: float = 30.0
    conservative_max_risk: float = 40.0
    conservative_min_win_rate: float = 65.0

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _default_specialties() -> dict[str, tuple[str, ...]]:
    return {
        "DeFi": ("uni", "swap", "curve"),
        "NFTs": ("nft", "opensea", "blur"),
        "Cross-Chain": ("bridge", "layer"),
        "Staking": ("stake", "yield"),
    }


@dataclass
class SpecialtyKeywords:
    """Protocol-name substrings per specialty, in tie-break order."""
    categories: dict[str, tuple[str, ...]] = field(default_factory=_default_specialties)
    max_specialties: int = 3

    def __post_init__(self) -> None:
        self.categories = {
            name: tuple(k.lower() for k in keywords)
            for name, keywords in self.categories.items()
        }
        if self.max_specialties < 0:
            raise ConfigurationError("max_specialties cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "categories": {k: list(v) for k, v in self.categories.items()},
            "max_specialties": self.max_specialties,
        }


@dataclass
class DetectionConfig:
    """Configuration for cohort signal detection."""

    # Accumulation / distribution
    min_wallet_pct: float = 20.0             # Share of cohort that must act
    significant_volume: float = 10_000       # Aggregate volume must exceed this
    confidence_multiplier: float = 1.5
    detect_distribution: bool = True

    # Smart money qualification
    min_transactions: int = 50
    min_win_rate: float = 60.0

    # Top performers
    top_min_profitability: float = 70.0
    top_min_roi: float = 100.0               # Strictly greater than
    top_limit: int = 10

    # Airdrop prediction
    airdrop_min_adoption_pct: float = 30.0
    airdrop_max_protocols: int = 20
    airdrop_used_probability: int = 75
    airdrop_unused_probability: int = 40

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class CorrelationConfig:
    """Configuration for wallet correlation."""
    timing_window_hours: float = 24.0

    def __post_init__(self) -> None:
        if self.timing_window_hours <= 0:
            raise ConfigurationError("timing_window_hours must be positive")

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class SmartMoneyConfig:
    """Main configuration for smart money module."""
    profitability: ProfitabilityWeights = field(default_factory=ProfitabilityWeights)
    risk: RiskWeights = field(default_factory=RiskWeights)
    trading_style: TradingStyleThresholds = field(default_factory=TradingStyleThresholds)
    specialties: SpecialtyKeywords = field(default_factory=SpecialtyKeywords)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    correlation: CorrelationConfig = field(default_factory=CorrelationConfig)

    # Logging
    log_profiles: bool = True
    log_signals: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SmartMoneyConfig":
        sections = {
            "profitability": ProfitabilityWeights,
            "risk": RiskWeights,
            "trading_style": TradingStyleThresholds,
            "specialties": SpecialtyKeywords,
            "detection": DetectionConfig,
            "correlation": CorrelationConfig,
        }
        unknown = set(data) - set(sections) - {"log_profiles", "log_signals"}
        if unknown:
            logger.warning(f"Ignoring unknown smart_money settings: {sorted(unknown)}")

        kwargs: dict[str, Any] = {
            name: _build(section_cls, data.get(name), f"{CONFIG_SECTION}.{name}")
            for name, section_cls in sections.items()
        }
        for flag in ("log_profiles", "log_signals"):
            if flag in data:
                kwargs[flag] = bool(data[flag])
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Path) -> "SmartMoneyConfig":
        """Load the `smart_money` section of a YAML file."""
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
        return {
            "profitability": self.profitability.to_dict(),
            "risk": self.risk.to_dict(),
            "trading_style": self.trading_style.to_dict(),
            "specialties": self.specialties.to_dict(),
            "detection": self.detection.to_dict(),
            "correlation": self.correlation.to_dict(),
            "log_profiles": self.log_profiles,
            "log_signals": self.log_signals,
        }


# Default configuration instance
_default_config: Optional[SmartMoneyConfig] = None


def get_config() -> SmartMoneyConfig:
    """Get the default configuration."""
    global _default_config
    if _default_config is None:
        _default_config = SmartMoneyConfig()
    return _default_config


def set_config(config: SmartMoneyConfig) -> None:
    """Set the default configuration."""
    global _default_config
    _default_config = config


def load_config(path: Optional[Path] = None) -> SmartMoneyConfig:
    """Load configuration from file or return defaults."""
    if path and Path(path).exists():
        return SmartMoneyConfig.from_yaml(Path(path))
    return SmartMoneyConfig()
