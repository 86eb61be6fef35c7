"""
Tests for wallet correlation.

Correlation is the mean of protocol overlap and timing
overlap, both 0-100 and measured from wallet A's side.
"""

from datetime import timedelta

import pytest

from smart_money import CorrelationConfig, SmartMoneyConfig, WalletCorrelationAnalyzer

from .conftest import make_tx


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def analyzer(config):
    return WalletCorrelationAnalyzer(config)


@pytest.fixture
def wallet_a():
    return [make_tx("Uniswap", days=0), make_tx("Aave", days=1)]


@pytest.fixture
def wallet_b():
    return [make_tx("Uniswap", days=1 / 12), make_tx("Curve", days=5)]


# ============================================================
# CORRELATION TESTS
# ============================================================

class TestCorrelation:
    """Tests for pairwise correlation."""

    def test_partial_overlap(self, analyzer, wallet_a, wallet_b):
        result = analyzer.analyze(wallet_a, wallet_b, "0xa", "0xb")
        assert result.protocol_overlap == pytest.approx(50.0)
        assert result.timing_overlap == pytest.approx(50.0)
        assert result.score == pytest.approx(50.0)
        assert analyzer.correlate(wallet_a, wallet_b) == pytest.approx(50.0)

    def test_protocol_overlap_is_asymmetric(self, analyzer):
        narrow = [make_tx("Uniswap")]
        broad = [make_tx("Uniswap"), make_tx("Aave")]
        assert analyzer.protocol_overlap(narrow, broad) == 100.0
        assert analyzer.protocol_overlap(broad, narrow) == 50.0

    def test_timing_overlap_capped(self, analyzer):
        busy = [make_tx("Uniswap", tx_hash=f"0x{i}") for i in range(3)]
        single = [make_tx("Uniswap")]
        assert analyzer.timing_overlap(busy, single) == 100.0
        assert analyzer.correlate(busy, single) == 100.0

    def test_window_is_exclusive(self, analyzer):
        a = [make_tx("Uniswap", days=0)]
        b = [make_tx("Uniswap", days=1)]
        assert analyzer.timing_overlap(a, b) == 0.0

    def test_custom_window(self):
        config = SmartMoneyConfig(correlation=CorrelationConfig(timing_window_hours=48))
        analyzer = WalletCorrelationAnalyzer(config)
        assert analyzer.window == timedelta(hours=48)
        a = [make_tx("Uniswap", days=0)]
        b = [make_tx("Uniswap", days=1)]
        assert analyzer.timing_overlap(a, b) == 100.0

    def test_empty_wallets(self, analyzer, wallet_a):
        assert analyzer.correlate([], []) == 0.0
        assert analyzer.correlate(wallet_a, []) == 0.0

    def test_matrix(self, analyzer, wallet_a, wallet_b):
        matrix = analyzer.correlation_matrix({
            "0xa": wallet_a,
            "0xb": wallet_b,
            "0xc": [make_tx("Blur")],
        })
        pairs = [(c.wallet_a, c.wallet_b) for c in matrix]
        assert pairs == [
            ("0xa", "0xb"), ("0xa", "0xc"),
            ("0xb", "0xa"), ("0xb", "0xc"),
            ("0xc", "0xa"), ("0xc", "0xb"),
        ]
        assert all(0.0 <= c.score <= 100.0 for c in matrix)
