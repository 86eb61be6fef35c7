"""
Smart Money Data Models - Wallet behavior and signal structures.

Transactions and holdings are the inputs; profiles, signals,
airdrop predictions and correlations are the outputs. Outputs
serialize to the camelCase shape the route layer expects.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from core.clock import ClockFactory, to_iso8601


class TransactionType(str, Enum):
    """Known transaction types. Other strings are accepted as-is."""
    BUY = "buy"
    SELL = "sell"
    SWAP = "swap"
    TRANSFER = "transfer"


class TradingStyle(Enum):
    """Trading style derived from hold time, risk and win rate."""
    AGGRESSIVE = "aggressive"
    MODERATE = "moderate"
    CONSERVATIVE = "conservative"


class SignalType(Enum):
    """Direction of a smart money signal."""
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


# =============================================================
# INPUTS
# =============================================================


@dataclass
class WalletTransaction:
    """
    A single wallet transaction.

    `protocol` is the protocol or token the transaction touched;
    transactions without one are excluded from protocol-keyed
    aggregates.
    """
    hash: str
    from_address: str
    to_address: str
    value: float
    timestamp: datetime
    protocol: Optional[str] = None
    type: str = TransactionType.TRANSFER.value
    success: bool = True

    def __post_init__(self) -> None:
        """Normalize addresses and type."""
        self.from_address = (self.from_address or "").lower().strip()
        self.to_address = (self.to_address or "").lower().strip()
        self.type = str(getattr(self.type, "value", self.type) or "").lower().strip()
        if self.protocol is not None and not self.protocol.strip():
            self.protocol = None

    @property
    def position_key(self) -> str:
        """Key used to pair buys with sells."""
        return self.protocol or self.to_address

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "from": self.from_address,
            "to": self.to_address,
            "value": self.value,
            "timestamp": to_iso8601(self.timestamp),
            "protocol": self.protocol,
            "type": self.type,
            "success": self.success,
        }


@dataclass
class TokenHolding:
    """
    A token position.

    `pnl` and `pnl_percentage` are derived from prices when not supplied.
    """
    token: str
    balance: float
    avg_buy_price: float
    current_price: float
    pnl: Optional[float] = None
    pnl_percentage: Optional[float] = None

    def __post_init__(self) -> None:
        if self.pnl is None:
            self.pnl = self.balance * (self.current_price - self.avg_buy_price)
        if self.pnl_percentage is None:
            if self.avg_buy_price:
                self.pnl_percentage = (
                    (self.current_price - self.avg_buy_price) / self.avg_buy_price * 100
                )
            else:
                self.pnl_percentage = 0.0

    @property
    def position_value(self) -> float:
        return self.balance * self.current_price

    @property
    def cost_basis(self) -> float:
        return self.balance * self.avg_buy_price

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "balance": self.balance,
            "avgBuyPrice": self.avg_buy_price,
            "currentPrice": self.current_price,
            "pnl": self.pnl,
            "pnlPercentage": self.pnl_percentage,
        }


@dataclass
class WalletHistory:
    """Everything the profiler needs for one wallet."""
    address: str
    transactions: list[WalletTransaction] = field(default_factory=list)
    holdings: list[TokenHolding] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.address = self.address.lower().strip()


# =============================================================
# OUTPUTS
# =============================================================


@dataclass(frozen=True)
class SmartMoneyProfile:
    """
    Behavioral profile of one wallet.

    Computed fresh per request; never mutated.
    """
    address: str
    profitability: float           # 0-100
    win_rate: float                # 0-100
    avg_hold_time: float           # days
    diversification_score: float   # 0-100
    risk_score: float              # 0-100, higher = riskier
    trading_style: TradingStyle
    specialties: tuple[str, ...] = ()
    total_pnl: float = 0.0
    roi: float = 0.0               # percent

    @classmethod
    def neutral(cls, address: str) -> "SmartMoneyProfile":
        """Profile used when a wallet cannot be analyzed."""
        return cls(
            address=address,
            profitability=0.0,
            win_rate=0.0,
            avg_hold_time=0.0,
            diversification_score=0.0,
            risk_score=0.0,
            trading_style=TradingStyle.MODERATE,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "profitability": self.profitability,
            "winRate": self.win_rate,
            "avgHoldTime": self.avg_hold_time,
            "diversificationScore": self.diversification_score,
            "riskScore": self.risk_score,
            "tradingStyle": self.trading_style.value,
            "specialties": list(self.specialties),
            "totalPnL": self.total_pnl,
            "roi": self.roi,
        }


@dataclass
class SmartMoneySignal:
    """Coordinated buying or selling by the smart wallet cohort."""
    type: SignalType
    token: str
    confidence: float  # 0-100
    reason: str
    smart_wallets: list[str] = field(default_factory=list)
    volume: float = 0.0
    timestamp: datetime = field(default_factory=lambda: ClockFactory.get_clock().now())

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "token": self.token,
            "confidence": self.confidence,
            "reason": self.reason,
            "smartWallets": list(self.smart_wallets),
            "volume": self.volume,
            "timestamp": to_iso8601(self.timestamp),
        }


@dataclass
class AirdropPrediction:
    """Likelihood of an airdrop for a protocol popular with smart wallets."""
    protocol: str
    probability: int
    reasoning: str
    adoption_rate: float  # percent of cohort
    user_has_used: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "protocol": self.protocol,
            "probability": self.probability,
            "reasoning": self.reasoning,
            "adoptionRate": self.adoption_rate,
            "userHasUsed": self.user_has_used,
        }


@dataclass
class WalletCorrelation:
    """Similarity of wallet B's behavior to wallet A's, from A's side."""
    wallet_a: str
    wallet_b: str
    score: float
    protocol_overlap: float
    timing_overlap: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "walletA": self.wallet_a,
            "walletB": self.wallet_b,
            "score": self.score,
            "protocolOverlap": self.protocol_overlap,
            "timingOverlap": self.timing_overlap,
        }
