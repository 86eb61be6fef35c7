"""
Wallet Correlation Analyzer - Pairwise behavioral similarity.

correlation(A, B) = mean(protocol overlap, timing overlap)

- protocol overlap: share of A's distinct protocols that B also used
  (asymmetric, from A's side)
- timing overlap: transaction pairs on the same protocol less than
  the timing window apart, over min(|A|, |B|), capped at 100

Pairs are compared exhaustively, O(n*m).
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import Optional

from core.numbers import clamp, safe_div

from .config import SmartMoneyConfig, get_config
from .models import WalletCorrelation, WalletTransaction


logger = logging.getLogger(__name__)


class WalletCorrelationAnalyzer:
    """Scores how closely one wallet's activity tracks another's."""

    def __init__(self, config: Optional[SmartMoneyConfig] = None) -> None:
        self.config = config or get_config()

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.config.correlation.timing_window_hours)

    def protocol_overlap(
        self,
        wallet_a: Sequence[WalletTransaction],
        wallet_b: Sequence[WalletTransaction],
    ) -> float:
        protocols_a = {tx.protocol for tx in wallet_a if tx.protocol}
        protocols_b = {tx.protocol for tx in wallet_b if tx.protocol}
        return safe_div(len(protocols_a & protocols_b), len(protocols_a)) * 100

    def timing_overlap(
        self,
        wallet_a: Sequence[WalletTransaction],
        wallet_b: Sequence[WalletTransaction],
    ) -> float:
        window = self.window
        pairs = 0
        for tx_a in wallet_a:
            if not tx_a.protocol:
                continue
            for tx_b in wallet_b:
                if tx_a.protocol == tx_b.protocol and abs(tx_a.timestamp - tx_b.timestamp) < window:
                    pairs += 1

        overlap = safe_div(pairs, min(len(wallet_a), len(wallet_b))) * 100
        return clamp(overlap, 0, 100)

    def analyze(
        self,
        wallet_a: Sequence[WalletTransaction],
        wallet_b: Sequence[WalletTransaction],
        address_a: str = "",
        address_b: str = "",
    ) -> WalletCorrelation:
        protocol = self.protocol_overlap(wallet_a, wallet_b)
        timing = self.timing_overlap(wallet_a, wallet_b)
        return WalletCorrelation(
            wallet_a=address_a,
            wallet_b=address_b,
            score=(protocol + timing) / 2,
            protocol_overlap=protocol,
            timing_overlap=timing,
        )

    def correlate(
        self,
        wallet_a: Sequence[WalletTransaction],
        wallet_b: Sequence[WalletTransaction],
    ) -> float:
        """Correlation score 0-100 of B relative to A."""
        return self.analyze(wallet_a, wallet_b).score

    def correlation_matrix(
        self,
        transactions_by_wallet: Mapping[str, Sequence[WalletTransaction]],
    ) -> list[WalletCorrelation]:
        """
        Scores for every ordered pair of distinct wallets.

        Both (A, B) and (B, A) are included since the score is
        asymmetric. Order follows the input mapping.
        """
        wallets = list(transactions_by_wallet.items())
        results: list[WalletCorrelation] = []
        for address_a, txs_a in wallets:
            for address_b, txs_b in wallets:
                if address_a == address_b:
                    continue
                results.append(self.analyze(txs_a, txs_b, address_a, address_b))

        logger.debug(f"Computed {len(results)} wallet correlations for {len(wallets)} wallets")
        return results
