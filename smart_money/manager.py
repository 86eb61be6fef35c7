"""
Smart Money Manager - Main orchestrator for the module.

Coordinates:
- Wallet profiling
- Cohort signal detection
- Airdrop prediction
- Wallet correlation

Batch methods isolate failures: a wallet whose profiling
raises gets a neutral profile and the batch continues.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Optional

from core.clock import ClockProtocol

from .config import SmartMoneyConfig, get_config, load_config
from .correlation import WalletCorrelationAnalyzer
from .detector import SmartMoneySignalDetector, TransactionsByWallet, filter_whale_transactions
from .models import (
    AirdropPrediction,
    SmartMoneyProfile,
    SmartMoneySignal,
    WalletCorrelation,
    WalletHistory,
    WalletTransaction,
)
from .profiler import WalletBehaviorProfiler


logger = logging.getLogger(__name__)


class SmartMoneyManager:
    """
    Main entry point for the Smart Money module.

    Usage:
        manager = SmartMoneyManager()
        profiles = manager.profile_wallets(histories)
        smart = manager.find_smart_money(histories)
        signals = manager.detect_signals(smart, recent_transactions)
    """

    def __init__(
        self,
        config: Optional[SmartMoneyConfig] = None,
        config_path: Optional[Path] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        if config:
            self.config = config
        elif config_path:
            self.config = load_config(config_path)
        else:
            self.config = get_config()

        self.profiler = WalletBehaviorProfiler(self.config)
        self.detector = SmartMoneySignalDetector(self.config, clock)
        self.correlation = WalletCorrelationAnalyzer(self.config)

        self._stats = {
            "profiled": 0,
            "failed": 0,
        }

        logger.info("SmartMoneyManager initialized")

    # =========================================================
    # PROFILING
    # =========================================================

    def profile_wallet(self, history: WalletHistory) -> SmartMoneyProfile:
        """Profile one wallet; neutral profile if analysis raises."""
        try:
            profile = self.profiler.analyze_wallet(
                history.transactions,
                history.holdings,
                address=history.address,
            )
        except Exception as e:
            self._stats["failed"] += 1
            logger.warning(f"Profiling failed for {history.address}: {e}")
            return SmartMoneyProfile.neutral(history.address)

        self._stats["profiled"] += 1
        return profile

    def profile_wallets(self, histories: Iterable[WalletHistory]) -> list[SmartMoneyProfile]:
        """One profile per wallet, in input order."""
        return [self.profile_wallet(history) for history in histories]

    def find_smart_money(self, histories: Iterable[WalletHistory]) -> list[SmartMoneyProfile]:
        """Profiles of the wallets that qualify as smart money."""
        smart: list[SmartMoneyProfile] = []
        for history in histories:
            profile = self.profile_wallet(history)
            if self.profiler.qualifies_as_smart_money(profile, len(history.transactions)):
                smart.append(profile)
        return smart

    # =========================================================
    # COHORT ANALYSIS
    # =========================================================

    def detect_signals(
        self,
        profiles: Sequence[SmartMoneyProfile],
        recent_transactions: TransactionsByWallet,
    ) -> list[SmartMoneySignal]:
        return self.detector.detect_signals(profiles, recent_transactions)

    def find_top_performers(self, profiles: Iterable[SmartMoneyProfile]) -> list[SmartMoneyProfile]:
        return self.detector.find_top_performers(profiles)

    def predict_airdrops(
        self,
        user_transactions: Iterable[WalletTransaction],
        smart_money_transactions: TransactionsByWallet,
    ) -> list[AirdropPrediction]:
        return self.detector.predict_airdrops(user_transactions, smart_money_transactions)

    def filter_whales(
        self,
        transactions: Iterable[WalletTransaction],
        min_value: Any,
    ) -> list[WalletTransaction]:
        return filter_whale_transactions(transactions, min_value)

    # =========================================================
    # CORRELATION
    # =========================================================

    def correlate(
        self,
        wallet_a: Sequence[WalletTransaction],
        wallet_b: Sequence[WalletTransaction],
    ) -> float:
        return self.correlation.correlate(wallet_a, wallet_b)

    def correlation_matrix(
        self,
        transactions_by_wallet: Mapping[str, Sequence[WalletTransaction]],
    ) -> list[WalletCorrelation]:
        return self.correlation.correlation_matrix(transactions_by_wallet)

    def get_stats(self) -> dict[str, int]:
        return dict(self._stats)
