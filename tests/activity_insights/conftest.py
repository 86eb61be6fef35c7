"""Shared fixtures for Activity Insights tests."""

from datetime import datetime, timedelta, timezone

import pytest

from activity_insights import InsightsConfig
from core.clock import MockClock, to_iso8601


NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)

ZORA = "0x7777777f279eba3d3ad8f4e708545291a6fdba8b"
UNISWAP = "0x68b3465833fb72a70ecdf485e0e4c7bd8665fc45"
STARGATE = "0x8731d54e9d02c286767d56ac03e8037c07e01e98"
EIGENLAYER = "0x858646372cc42e1a627fce94aa7a7033e7cf075a"
UNKNOWN = "0x1234567890123456789012345678901234567890"


def make_tx(tx_hash, to_address, days_ago, **extra):
    """Raw provider transaction `days_ago` days before NOW."""
    record = {
        "tx_hash": tx_hash,
        "block_signed_at": to_iso8601(NOW - timedelta(days=days_ago)),
        "from_address": "0xWALLET",
        "to_address": to_address,
        "value": "0",
        "successful": True,
    }
    record.update(extra)
    return record


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Mock clock pinned to NOW."""
    return MockClock(NOW)


@pytest.fixture
def config():
    """Default thresholds with calculation logging off."""
    return InsightsConfig(log_calculations=False)


@pytest.fixture
def chain_transactions():
    """
    Four cataloged interactions and one uncataloged transfer.

    Base (8453): Zora 1d ago, Uniswap 2d ago, unknown 3d ago
    Ethereum (1): Stargate 40d ago, EigenLayer 100d ago
    """
    return {
        "8453": [
            make_tx("0xa1", ZORA, 1),
            make_tx("0xa2", UNISWAP, 2),
            make_tx("0xa3", UNKNOWN, 3),
        ],
        "1": [
            make_tx("0xb1", STARGATE, 40),
            make_tx("0xb2", EIGENLAYER, 100),
        ],
    }
