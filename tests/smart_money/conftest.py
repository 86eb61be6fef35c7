"""Shared fixtures for Smart Money tests."""

from datetime import datetime, timedelta, timezone

import pytest

from core.clock import MockClock
from smart_money import SmartMoneyConfig, SmartMoneyProfile, TradingStyle, WalletTransaction


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_tx(protocol, tx_type="transfer", days=0.0, value=0.0, wallet="0xwallet", tx_hash=None):
    """Wallet transaction `days` after T0."""
    return WalletTransaction(
        hash=tx_hash or f"0x{protocol}-{tx_type}-{days}",
        from_address=wallet,
        to_address="0xrouter",
        value=value,
        timestamp=T0 + timedelta(days=days),
        protocol=protocol,
        type=tx_type,
    )


def make_profile(address, profitability=0.0, win_rate=0.0, roi=0.0):
    return SmartMoneyProfile(
        address=address,
        profitability=profitability,
        win_rate=win_rate,
        avg_hold_time=0.0,
        diversification_score=0.0,
        risk_score=0.0,
        trading_style=TradingStyle.MODERATE,
        roi=roi,
    )


@pytest.fixture
def clock():
    return MockClock(T0)


@pytest.fixture
def config():
    """Default weights with logging off."""
    return SmartMoneyConfig(log_profiles=False, log_signals=False)
