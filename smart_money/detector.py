"""
Smart Money Signal Detector - Cohort-level patterns.

Analyzes a cohort of profiled smart wallets to detect:
- Accumulation (many smart wallets buying the same protocol)
- Distribution (many smart wallets selling the same protocol)
- Top performers
- Airdrop candidates (protocols widely adopted by the cohort)

Also filters whale-sized transactions.

All sorts are stable, so equal scores keep input order.
"""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from core.clock import ClockProtocol, resolve_clock

from .config import SmartMoneyConfig, get_config
from .exceptions import InvalidThresholdError
from .models import (
    AirdropPrediction,
    SignalType,
    SmartMoneyProfile,
    SmartMoneySignal,
    TransactionType,
    WalletTransaction,
)


logger = logging.getLogger(__name__)


TransactionsByWallet = Mapping[str, Sequence[WalletTransaction]]


@dataclass
class _ProtocolFlow:
    wallets: dict[str, None] = field(default_factory=dict)  # ordered set
    volume: float = 0.0


def _normalize_keys(transactions_by_wallet: TransactionsByWallet) -> dict[str, list[WalletTransaction]]:
    normalized: dict[str, list[WalletTransaction]] = {}
    for address, txs in transactions_by_wallet.items():
        normalized.setdefault(address.lower().strip(), []).extend(txs)
    return normalized


def filter_whale_transactions(
    transactions: Iterable[WalletTransaction],
    min_value: Any,
) -> list[WalletTransaction]:
    """
    Transactions whose value is at least `min_value`.

    `min_value` may be a number or a numeric string such as "100000".

    Raises:
        InvalidThresholdError: min_value is not a finite number
    """
    try:
        threshold = float(min_value)
    except (TypeError, ValueError):
        raise InvalidThresholdError("min_value", min_value)
    if not math.isfinite(threshold):
        raise InvalidThresholdError("min_value", min_value)

    return [tx for tx in transactions if float(tx.value or 0) >= threshold]


class SmartMoneySignalDetector:
    """
    Detects coordinated behavior in a smart wallet cohort.

    Usage:
        detector = SmartMoneySignalDetector()
        signals = detector.detect_signals(profiles, recent_transactions)
        for signal in signals:
            print(f"{signal.type.value} {signal.token}: {signal.confidence:.0f}")
    """

    def __init__(
        self,
        config: Optional[SmartMoneyConfig] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        self.config = config or get_config()
        self.detection_config = self.config.detection
        self._clock = clock

    # =========================================================
    # ACCUMULATION / DISTRIBUTION
    # =========================================================

    def _collect_flows(
        self,
        profiles: Sequence[SmartMoneyProfile],
        recent_transactions: TransactionsByWallet,
        tx_type: TransactionType,
    ) -> dict[str, _ProtocolFlow]:
        flows: dict[str, _ProtocolFlow] = {}
        transactions = _normalize_keys(recent_transactions)

        for profile in profiles:
            address = profile.address.lower().strip()
            for tx in transactions.get(address, ()):
                if not tx.protocol or tx.type != tx_type:
                    continue
                flow = flows.setdefault(tx.protocol, _ProtocolFlow())
                flow.wallets[address] = None
                flow.volume += tx.value

        return flows

    def _detect(
        self,
        profiles: Sequence[SmartMoneyProfile],
        recent_transactions: TransactionsByWallet,
        tx_type: TransactionType,
        signal_type: SignalType,
        verb: str,
    ) -> list[SmartMoneySignal]:
        cohort_size = len(profiles)
        if cohort_size == 0:
            return []

        d = self.detection_config
        now = resolve_clock(self._clock).now()
        signals: list[SmartMoneySignal] = []

        for protocol, flow in self._collect_flows(profiles, recent_transactions, tx_type).items():
            wallet_count = len(flow.wallets)
            wallet_pct = 100 * wallet_count / cohort_size

            if wallet_pct < d.min_wallet_pct or flow.volume <= d.significant_volume:
                continue

            signals.append(SmartMoneySignal(
                type=signal_type,
                token=protocol,
                confidence=min(wallet_pct * d.confidence_multiplier, 100.0),
                reason=(
                    f"{wallet_count} smart wallets ({wallet_pct:.1f}%) {verb} "
                    f"with ${flow.volume / 1000:.1f}K volume"
                ),
                smart_wallets=list(flow.wallets),
                volume=flow.volume,
                timestamp=now,
            ))

        signals.sort(key=lambda s: s.confidence, reverse=True)
        return signals

    def detect_accumulation(
        self,
        profiles: Sequence[SmartMoneyProfile],
        recent_transactions: TransactionsByWallet,
    ) -> list[SmartMoneySignal]:
        """`buy` signals for protocols a large enough share of the cohort is buying."""
        return self._detect(
            profiles, recent_transactions,
            TransactionType.BUY, SignalType.BUY, "accumulating",
        )

    def detect_distribution(
        self,
        profiles: Sequence[SmartMoneyProfile],
        recent_transactions: TransactionsByWallet,
    ) -> list[SmartMoneySignal]:
        """`sell` signals, symmetric to accumulation."""
        return self._detect(
            profiles, recent_transactions,
            TransactionType.SELL, SignalType.SELL, "distributing",
        )

    def detect_signals(
        self,
        profiles: Sequence[SmartMoneyProfile],
        recent_transactions: TransactionsByWallet,
    ) -> list[SmartMoneySignal]:
        """
        Accumulation signals, plus distribution signals when enabled.

        Sorted by confidence, highest first.
        """
        signals = self.detect_accumulation(profiles, recent_transactions)
        if self.detection_config.detect_distribution:
            signals.extend(self.detect_distribution(profiles, recent_transactions))
            signals.sort(key=lambda s: s.confidence, reverse=True)

        if self.config.log_signals:
            logger.info(f"Detected {len(signals)} smart money signals across {len(profiles)} wallets")
        return signals

    # =========================================================
    # RANKING
    # =========================================================

    def find_top_performers(self, profiles: Iterable[SmartMoneyProfile]) -> list[SmartMoneyProfile]:
        d = self.detection_config
        qualified = [
            p for p in profiles
            if p.profitability >= d.top_min_profitability
            and p.win_rate >= d.min_win_rate
            and p.roi > d.top_min_roi
        ]
        qualified.sort(key=lambda p: p.profitability, reverse=True)
        return qualified[: d.top_limit]

    # =========================================================
    # AIRDROP PREDICTION
    # =========================================================

    def predict_airdrops(
        self,
        user_transactions: Iterable[WalletTransaction],
        smart_money_transactions: TransactionsByWallet,
    ) -> list[AirdropPrediction]:
        """
        Protocols adopted by enough of the cohort, with the user's odds.

        Adoption is the share of cohort wallets that used the
        protocol at least once. Candidates are ranked by that
        distinct-wallet count rather than by raw transaction count,
        so one busy wallet cannot push a protocol up the list.
        """
        d = self.detection_config
        cohort = _normalize_keys(smart_money_transactions)
        cohort_size = len(cohort)
        if cohort_size == 0:
            return []

        user_protocols = {tx.protocol for tx in user_transactions if tx.protocol}

        users_by_protocol: dict[str, set[str]] = {}
        for address, txs in cohort.items():
            for tx in txs:
                if tx.protocol:
                    users_by_protocol.setdefault(tx.protocol, set()).add(address)

        ranked = sorted(users_by_protocol.items(), key=lambda item: len(item[1]), reverse=True)

        predictions: list[AirdropPrediction] = []
        for protocol, users in ranked[: d.airdrop_max_protocols]:
            adoption = 100 * len(users) / cohort_size
            if adoption < d.airdrop_min_adoption_pct:
                continue

            used = protocol in user_protocols
            if used:
                reasoning = (
                    f"You've used {protocol}. "
                    f"{adoption:.1f}% of smart wallets are active here."
                )
            else:
                reasoning = (
                    f"{adoption:.1f}% of smart wallets are using {protocol}. "
                    f"Consider trying it."
                )

            predictions.append(AirdropPrediction(
                protocol=protocol,
                probability=d.airdrop_used_probability if used else d.airdrop_unused_probability,
                reasoning=reasoning,
                adoption_rate=adoption,
                user_has_used=used,
            ))

        predictions.sort(key=lambda p: p.probability, reverse=True)
        return predictions
