"""
Pydantic Schemas for wallet transactions and holdings.

Accepts the camelCase JSON the route layer receives as well
as snake_case keys. Timestamps may be epoch milliseconds,
epoch seconds or ISO 8601 strings.
"""

from datetime import datetime
from typing import Any, Iterable, List, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.clock import parse_timestamp

from .exceptions import InvalidRecordError
from .models import TokenHolding, WalletHistory, WalletTransaction


logger = logging.getLogger(__name__)


# =============================================================
# TRANSACTIONS
# =============================================================

class WalletTransactionSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    hash: str
    from_address: str = Field(default="", alias="from")
    to_address: str = Field(default="", alias="to")
    value: float = 0.0
    timestamp: datetime
    protocol: Optional[str] = None
    type: str = "transfer"
    success: bool = True

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> datetime:
        parsed = parse_timestamp(value)
        if parsed is None:
            raise ValueError("timestamp is required")
        return parsed

    @field_validator("value", mode="before")
    @classmethod
    def _parse_value(cls, value: Any) -> Any:
        return 0.0 if value is None or value == "" else value

    def to_domain(self) -> WalletTransaction:
        return WalletTransaction(
            hash=self.hash,
            from_address=self.from_address,
            to_address=self.to_address,
            value=self.value,
            timestamp=self.timestamp,
            protocol=self.protocol,
            type=self.type,
            success=self.success,
        )


# =============================================================
# HOLDINGS
# =============================================================

class TokenHoldingSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    token: str
    balance: float
    avg_buy_price: float = Field(alias="avgBuyPrice")
    current_price: float = Field(alias="currentPrice")
    pnl: Optional[float] = None
    pnl_percentage: Optional[float] = Field(default=None, alias="pnlPercentage")

    def to_domain(self) -> TokenHolding:
        return TokenHolding(
            token=self.token,
            balance=self.balance,
            avg_buy_price=self.avg_buy_price,
            current_price=self.current_price,
            pnl=self.pnl,
            pnl_percentage=self.pnl_percentage,
        )


# =============================================================
# CONVERSION
# =============================================================

def parse_transaction(record: Any) -> WalletTransaction:
    """Validate one transaction; raises InvalidRecordError."""
    if isinstance(record, WalletTransaction):
        return record
    try:
        return WalletTransactionSchema.model_validate(record).to_domain()
    except (ValidationError, ValueError, TypeError) as e:
        raise InvalidRecordError(f"Malformed wallet transaction: {e}", record) from e


def parse_holding(record: Any) -> TokenHolding:
    """Validate one holding; raises InvalidRecordError."""
    if isinstance(record, TokenHolding):
        return record
    try:
        return TokenHoldingSchema.model_validate(record).to_domain()
    except (ValidationError, ValueError, TypeError) as e:
        raise InvalidRecordError(f"Malformed token holding: {e}", record) from e


def parse_transactions(records: Iterable[Any]) -> List[WalletTransaction]:
    """Validate transactions, skipping malformed ones."""
    result: List[WalletTransaction] = []
    for record in records:
        try:
            result.append(parse_transaction(record))
        except InvalidRecordError as e:
            logger.debug(e.message)
    return result


def parse_holdings(records: Iterable[Any]) -> List[TokenHolding]:
    """Validate holdings, skipping malformed ones."""
    result: List[TokenHolding] = []
    for record in records:
        try:
            result.append(parse_holding(record))
        except InvalidRecordError as e:
            logger.debug(e.message)
    return result


def parse_wallet_history(data: dict[str, Any]) -> WalletHistory:
    """Build a WalletHistory from `{address, transactions, holdings}`."""
    return WalletHistory(
        address=str(data.get("address", "")),
        transactions=parse_transactions(data.get("transactions") or []),
        holdings=parse_holdings(data.get("holdings") or []),
    )
