"""
Pydantic schemas for raw provider records.

Chain transactions and NFTs arrive as GoldRush-style dicts
fetched by the provider layer. They are validated here once,
at the boundary; everything downstream works with typed objects.
"""

from datetime import datetime
from typing import Any, Iterable, List, Optional, Union
import logging

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from core.clock import parse_timestamp

from .exceptions import InvalidRecordError


logger = logging.getLogger(__name__)


# =======================
# TRANSACTIONS
# =======================

class ChainTransaction(BaseModel):
    """Transaction item as returned by the chain data provider."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    tx_hash: str
    block_signed_at: Optional[datetime] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    value: Optional[str] = None
    value_quote: Optional[float] = None
    successful: bool = True

    @field_validator("block_signed_at", mode="before")
    @classmethod
    def _parse_signed_at(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @field_validator("from_address", "to_address", mode="before")
    @classmethod
    def _normalize_address(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip().lower()
        return text or None

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


# =======================
# NFTS
# =======================

class NFTRecord(BaseModel):
    """NFT item as returned by the chain data provider."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    contract_address: str
    token_id: Optional[str] = None
    contract_name: Optional[str] = None

    @field_validator("contract_address", mode="before")
    @classmethod
    def _normalize_contract(cls, value: Any) -> str:
        return str(value or "").strip().lower()

    @field_validator("token_id", mode="before")
    @classmethod
    def _stringify_token_id(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


# =======================
# COERCION
# =======================

def validate_transaction(record: Union[ChainTransaction, dict[str, Any]]) -> ChainTransaction:
    """Validate one raw transaction; raises InvalidRecordError."""
    if isinstance(record, ChainTransaction):
        return record
    try:
        return ChainTransaction.model_validate(record)
    except (ValidationError, ValueError, TypeError) as e:
        raise InvalidRecordError(f"Malformed transaction record: {e}", record) from e


def validate_nft(record: Union[NFTRecord, dict[str, Any]]) -> NFTRecord:
    """Validate one raw NFT record; raises InvalidRecordError."""
    if isinstance(record, NFTRecord):
        return record
    try:
        return NFTRecord.model_validate(record)
    except (ValidationError, ValueError, TypeError) as e:
        raise InvalidRecordError(f"Malformed NFT record: {e}", record) from e


def coerce_transactions(
    records: Iterable[Union[ChainTransaction, dict[str, Any]]],
) -> List[ChainTransaction]:
    """Validate raw transaction dicts, skipping malformed ones."""
    result: List[ChainTransaction] = []
    for record in records:
        try:
            result.append(validate_transaction(record))
        except InvalidRecordError as e:
            logger.debug(e.message)
    return result


def coerce_nfts(
    records: Iterable[Union[NFTRecord, dict[str, Any]]],
) -> List[NFTRecord]:
    """Validate raw NFT dicts, skipping malformed ones."""
    result: List[NFTRecord] = []
    for record in records:
        try:
            result.append(validate_nft(record))
        except InvalidRecordError as e:
            logger.debug(e.message)
    return result
