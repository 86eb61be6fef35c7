"""
Smart Money Module - Wallet behavior profiling and cohort signals.

Scores individual wallets (profitability, win rate, hold time,
diversification, risk, style, specialties) and analyzes cohorts
of smart wallets for accumulation/distribution, airdrop
candidates and behavioral correlation.

Scores are explainable, rule-weighted heuristics; every weight
and threshold lives in SmartMoneyConfig.

Usage:
    from smart_money import SmartMoneyManager, WalletHistory

    manager = SmartMoneyManager()
    profiles = manager.profile_wallets(histories)
    signals = manager.detect_signals(profiles, recent_transactions)
"""

from .config import (
    CorrelationConfig,
    DetectionConfig,
    ProfitabilityWeights,
    RiskWeights,
    SmartMoneyConfig,
    SpecialtyKeywords,
    TradingStyleThresholds,
    get_config,
    load_config,
    set_config,
)
from .correlation import WalletCorrelationAnalyzer
from .detector import SmartMoneySignalDetector, filter_whale_transactions
from .exceptions import (
    ConfigurationError,
    InvalidRecordError,
    InvalidThresholdError,
    SmartMoneyError,
)
from .manager import SmartMoneyManager
from .models import (
    AirdropPrediction,
    SignalType,
    SmartMoneyProfile,
    SmartMoneySignal,
    TokenHolding,
    TradingStyle,
    TransactionType,
    WalletCorrelation,
    WalletHistory,
    WalletTransaction,
)
from .profiler import WalletBehaviorProfiler
from .schemas import (
    TokenHoldingSchema,
    WalletTransactionSchema,
    parse_holding,
    parse_holdings,
    parse_transaction,
    parse_transactions,
    parse_wallet_history,
)


__all__ = [
    # Config
    "CorrelationConfig",
    "DetectionConfig",
    "ProfitabilityWeights",
    "RiskWeights",
    "SmartMoneyConfig",
    "SpecialtyKeywords",
    "TradingStyleThresholds",
    "get_config",
    "load_config",
    "set_config",
    # Components
    "SmartMoneyManager",
    "WalletBehaviorProfiler",
    "SmartMoneySignalDetector",
    "WalletCorrelationAnalyzer",
    "filter_whale_transactions",
    # Exceptions
    "ConfigurationError",
    "InvalidRecordError",
    "InvalidThresholdError",
    "SmartMoneyError",
    # Models
    "AirdropPrediction",
    "SignalType",
    "SmartMoneyProfile",
    "SmartMoneySignal",
    "TokenHolding",
    "TradingStyle",
    "TransactionType",
    "WalletCorrelation",
    "WalletHistory",
    "WalletTransaction",
    # Schemas
    "TokenHoldingSchema",
    "WalletTransactionSchema",
    "parse_holding",
    "parse_holdings",
    "parse_transaction",
    "parse_transactions",
    "parse_wallet_history",
]
