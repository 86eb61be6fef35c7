"""
Wallet Behavior Profiler - Scores a single wallet.

Computes from transactions + holdings:
- Win rate (profitable holdings share)
- Average hold time (FIFO buy/sell matching)
- Diversification (Herfindahl-Hirschman based)
- Risk score (concentration + leverage + volatility)
- Trading style (decision table)
- Specialties (protocol-name keyword tally)
- Total PnL, ROI and the weighted profitability score

Every component guards its denominators and returns 0 for
degenerate input, so a profile never carries NaN or inf.
"""

import logging
from collections import defaultdict, deque
from typing import Optional, Sequence

from core.numbers import clamp, safe_div

from .config import SmartMoneyConfig, get_config
from .models import (
    SmartMoneyProfile,
    TokenHolding,
    TradingStyle,
    TransactionType,
    WalletTransaction,
)


logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 3600


class WalletBehaviorProfiler:
    """
    Profiles one wallet's trading behavior.

    Usage:
        profiler = WalletBehaviorProfiler()
        profile = profiler.analyze_wallet(transactions, holdings)
        print(f"Style: {profile.trading_style.value}")
    """

    def __init__(self, config: Optional[SmartMoneyConfig] = None) -> None:
        self.config = config or get_config()

    # =========================================================
    # COMPONENTS
    # =========================================================

    def calculate_win_rate(self, holdings: Sequence[TokenHolding]) -> float:
        """Percentage of holdings with positive PnL; 0 without holdings."""
        profitable = sum(1 for h in holdings if h.pnl > 0)
        return safe_div(profitable, len(holdings)) * 100

    def calculate_hold_times(self, transactions: Sequence[WalletTransaction]) -> list[float]:
        """
        Durations in days of every matched buy/sell pair.

        Transactions are scanned chronologically. Each sell closes
        the earliest open buy with the same position key. Sells
        with no open buy are ignored.
        """
        open_buys: dict[str, deque] = defaultdict(deque)
        durations: list[float] = []

        for tx in sorted(transactions, key=lambda t: t.timestamp):
            key = tx.position_key
            if not key:
                continue
            if tx.type == TransactionType.BUY:
                open_buys[key].append(tx.timestamp)
            elif tx.type == TransactionType.SELL and open_buys[key]:
                bought_at = open_buys[key].popleft()
                seconds = (tx.timestamp - bought_at).total_seconds()
                durations.append(seconds / SECONDS_PER_DAY)

        return durations

    def calculate_avg_hold_time(self, transactions: Sequence[WalletTransaction]) -> float:
        """Mean hold time in days; 0 when no pair was closed."""
        durations = self.calculate_hold_times(transactions)
        return safe_div(sum(durations), len(durations))

    def calculate_diversification(self, holdings: Sequence[TokenHolding]) -> float:
        """
        100 - 100 * HHI of position values, floored at 0.

        A single holding scores 0; N equal holdings score 100 * (1 - 1/N).
        """
        total_value = sum(h.position_value for h in holdings)
        if not holdings or total_value <= 0:
            return 0.0

        hhi = sum((h.position_value / total_value) ** 2 for h in holdings)
        return max(0.0, 100 - hhi * 100)

    def calculate_risk_score(
        self,
        holdings: Sequence[TokenHolding],
        transactions: Sequence[WalletTransaction],
    ) -> float:
        """Concentration + leverage + volatility components, clamped to [0, 100]."""
        weights = self.config.risk

        total_value = sum(h.position_value for h in holdings)
        max_share = 0.0
        if total_value > 0:
            max_share = max(h.position_value / total_value for h in holdings)
        concentration = max_share * weights.concentration

        leveraged = sum(
            1 for tx in transactions
            if tx.protocol and any(k in tx.protocol.lower() for k in weights.leverage_keywords)
        )
        leverage = min(
            weights.leverage,
            safe_div(leveraged, len(transactions)) * weights.leverage,
        )

        volatile = sum(
            1 for h in holdings
            if abs(h.pnl_percentage or 0.0) > weights.volatile_pnl_pct
        )
        volatility = safe_div(volatile, len(holdings)) * weights.volatility

        return clamp(concentration + leverage + volatility, 0, 100)

    def determine_trading_style(
        self,
        avg_hold_time: float,
        risk_score: float,
        win_rate: float,
    ) -> TradingStyle:
        t = self.config.trading_style
        if avg_hold_time < t.aggressive_max_hold_days and risk_score > t.aggressive_min_risk:
            return TradingStyle.AGGRESSIVE
        if (
            avg_hold_time > t.conservative_min_hold_days
            and risk_score < t.conservative_max_risk
            and win_rate > t.conservative_min_win_rate
        ):
            return TradingStyle.CONSERVATIVE
        return TradingStyle.MODERATE

    def identify_specialties(self, transactions: Sequence[WalletTransaction]) -> list[str]:
        """
        Top specialties by matching transaction count.

        One transaction can count toward several specialties.
        Ties keep the order in which specialties were first seen.
        """
        counts: dict[str, int] = {}
        categories = self.config.specialties.categories

        for tx in transactions:
            protocol = (tx.protocol or "").lower()
            if not protocol:
                continue
            for name, keywords in categories.items():
                if any(k in protocol for k in keywords):
                    counts[name] = counts.get(name, 0) + 1

        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [name for name, _ in ranked[: self.config.specialties.max_specialties]]

    def calculate_pnl_and_roi(self, holdings: Sequence[TokenHolding]) -> tuple[float, float]:
        """(total PnL, ROI percent); ROI is 0 when nothing was invested."""
        total_pnl = sum(h.pnl for h in holdings)
        invested = sum(h.cost_basis for h in holdings)
        return total_pnl, safe_div(total_pnl * 100, invested)

    def calculate_profitability(
        self,
        win_rate: float,
        roi: float,
        diversification: float,
    ) -> float:
        w = self.config.profitability
        normalized_roi = min(roi / w.roi_divisor, w.roi_cap)
        score = (
            win_rate * w.win_rate
            + normalized_roi * w.roi
            + diversification * w.diversification
        )
        return clamp(score, 0, 100)

    # =========================================================
    # MAIN API
    # =========================================================

    def analyze_wallet(
        self,
        transactions: Sequence[WalletTransaction],
        holdings: Sequence[TokenHolding],
        address: Optional[str] = None,
    ) -> SmartMoneyProfile:
        """
        Build the behavioral profile of one wallet.

        Args:
            transactions: Wallet transactions, any order
            holdings: Current token positions
            address: Wallet address (default: first transaction's sender)

        Returns:
            SmartMoneyProfile
        """
        if address is None:
            address = transactions[0].from_address if transactions else ""
        address = address.lower().strip()

        win_rate = self.calculate_win_rate(holdings)
        avg_hold_time = self.calculate_avg_hold_time(transactions)
        diversification = self.calculate_diversification(holdings)
        risk_score = self.calculate_risk_score(holdings, transactions)
        total_pnl, roi = self.calculate_pnl_and_roi(holdings)

        profile = SmartMoneyProfile(
            address=address,
            profitability=self.calculate_profitability(win_rate, roi, diversification),
            win_rate=win_rate,
            avg_hold_time=avg_hold_time,
            diversification_score=diversification,
            risk_score=risk_score,
            trading_style=self.determine_trading_style(avg_hold_time, risk_score, win_rate),
            specialties=tuple(self.identify_specialties(transactions)),
            total_pnl=total_pnl,
            roi=roi,
        )

        if self.config.log_profiles:
            logger.info(
                f"Profiled {address or '<unknown>'}: "
                f"profitability={profile.profitability:.1f}, win_rate={win_rate:.1f}, "
                f"risk={risk_score:.1f}, style={profile.trading_style.value}"
            )

        return profile

    def qualifies_as_smart_money(
        self,
        profile: SmartMoneyProfile,
        transaction_count: int,
    ) -> bool:
        """Enough history and a high enough win rate."""
        d = self.config.detection
        return transaction_count >= d.min_transactions and profile.win_rate >= d.min_win_rate
