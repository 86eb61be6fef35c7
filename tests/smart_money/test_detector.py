"""
Tests for cohort signal detection.

============================================================
PURPOSE
============================================================
Verify that:
1. Accumulation fires only past both the wallet share and volume bars
2. Confidence scales with the share of the cohort and caps at 100
3. Top performers and airdrop candidates are filtered and ranked
4. The whale filter accepts numeric strings and rejects junk

============================================================
"""

import pytest

from smart_money import (
    DetectionConfig,
    InvalidThresholdError,
    SignalType,
    SmartMoneyConfig,
    SmartMoneySignalDetector,
    filter_whale_transactions,
)

from .conftest import T0, make_profile, make_tx


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def cohort():
    """Ten smart wallets."""
    return [make_profile(f"0xw{i}") for i in range(10)]


@pytest.fixture
def detector(config, clock):
    return SmartMoneySignalDetector(config, clock)


def _buys(wallets, protocol, value, tx_type="buy"):
    """Mapping keyed by upper-cased address, one transaction per wallet."""
    return {
        wallet.upper().replace("0X", "0x"): [make_tx(protocol, tx_type, value=value, wallet=wallet)]
        for wallet in wallets
    }


# ============================================================
# ACCUMULATION / DISTRIBUTION TESTS
# ============================================================

class TestAccumulation:
    """Tests for accumulation signals."""

    def test_three_of_ten_wallets(self, detector, cohort):
        recent = _buys(["0xw0", "0xw1", "0xw2"], "Pendle", 5000)
        [signal] = detector.detect_accumulation(cohort, recent)

        assert signal.type is SignalType.BUY
        assert signal.token == "Pendle"
        assert signal.confidence == pytest.approx(45.0)
        assert signal.volume == pytest.approx(15000.0)
        assert signal.smart_wallets == ["0xw0", "0xw1", "0xw2"]
        assert signal.reason == "3 smart wallets (30.0%) accumulating with $15.0K volume"
        assert signal.timestamp == T0

    def test_single_wallet_is_not_a_signal(self, detector, cohort):
        recent = _buys(["0xw0"], "Pendle", 50_000)
        assert detector.detect_accumulation(cohort, recent) == []

    def test_volume_must_exceed_threshold(self, detector, cohort):
        recent = _buys(["0xw0", "0xw1"], "Pendle", 5000)
        assert detector.detect_accumulation(cohort, recent) == []

    def test_minimum_share_is_inclusive(self, detector, cohort):
        recent = _buys(["0xw0", "0xw1"], "Pendle", 6000)
        [signal] = detector.detect_accumulation(cohort, recent)
        assert signal.confidence == pytest.approx(30.0)

    def test_confidence_capped(self, detector, cohort):
        recent = _buys([p.address for p in cohort], "Pendle", 5000)
        [signal] = detector.detect_accumulation(cohort, recent)
        assert signal.confidence == 100.0

    def test_repeat_buys_count_one_wallet(self, detector, cohort):
        recent = {"0xw0": [make_tx("Pendle", "buy", value=20_000, wallet="0xw0", tx_hash=f"0x{i}") for i in range(3)]}
        assert detector.detect_accumulation(cohort, recent) == []

    def test_wallets_outside_cohort_ignored(self, detector, cohort):
        recent = _buys(["0xstranger1", "0xstranger2", "0xstranger3"], "Pendle", 50_000)
        assert detector.detect_accumulation(cohort, recent) == []

    def test_empty_cohort(self, detector):
        assert detector.detect_accumulation([], _buys(["0xw0"], "Pendle", 50_000)) == []

    def test_checksummed_cohort_addresses(self, detector):
        cohort = [make_profile(f"0xAbC{i}") for i in range(10)]
        recent = {
            address: [make_tx("X", "buy", value=5000, wallet=address.lower())]
            for address in ["0xAbC0", "0xAbC1", "0xAbC2"]
        }
        [signal] = detector.detect_accumulation(cohort, recent)

        assert signal.confidence == pytest.approx(45.0)
        assert signal.smart_wallets == ["0xabc0", "0xabc1", "0xabc2"]


class TestDistribution:
    """Tests for distribution signals."""

    def test_sells(self, detector, cohort):
        recent = _buys(["0xw0", "0xw1", "0xw2"], "Pendle", 5000, tx_type="sell")
        [signal] = detector.detect_signals(cohort, recent)
        assert signal.type is SignalType.SELL
        assert "distributing" in signal.reason

    def test_distribution_can_be_disabled(self, clock, cohort):
        config = SmartMoneyConfig(
            detection=DetectionConfig(detect_distribution=False),
            log_signals=False,
        )
        detector = SmartMoneySignalDetector(config, clock)
        recent = _buys(["0xw0", "0xw1", "0xw2"], "Pendle", 5000, tx_type="sell")
        assert detector.detect_signals(cohort, recent) == []

    def test_sorted_by_confidence(self, detector, cohort):
        recent = _buys(["0xw0", "0xw1"], "Aave", 6000)
        for wallet in ["0xw5", "0xw6", "0xw7", "0xw8"]:
            recent[wallet] = [make_tx("Pendle", "sell", value=5000, wallet=wallet)]

        signals = detector.detect_signals(cohort, recent)
        assert [(s.token, s.type) for s in signals] == [
            ("Pendle", SignalType.SELL),
            ("Aave", SignalType.BUY),
        ]


# ============================================================
# RANKING TESTS
# ============================================================

class TestTopPerformers:
    def test_filter_and_rank(self, detector):
        profiles = [
            make_profile("0xa", profitability=80, win_rate=70, roi=150),
            make_profile("0xb", profitability=90, win_rate=70, roi=100),
            make_profile("0xc", profitability=75, win_rate=50, roi=200),
            make_profile("0xd", profitability=95, win_rate=65, roi=300),
        ]
        assert [p.address for p in detector.find_top_performers(profiles)] == ["0xd", "0xa"]

    def test_limit(self, clock):
        config = SmartMoneyConfig(detection=DetectionConfig(top_limit=1))
        detector = SmartMoneySignalDetector(config, clock)
        profiles = [make_profile(f"0x{i}", profitability=80, win_rate=70, roi=150) for i in range(3)]
        assert [p.address for p in detector.find_top_performers(profiles)] == ["0x0"]


# ============================================================
# AIRDROP TESTS
# ============================================================

class TestAirdropPrediction:
    def test_predictions(self, detector):
        smart = {
            "0xw0": [make_tx("Scroll"), make_tx("Scroll", days=1), make_tx("Blast")],
            "0xw1": [make_tx("Scroll"), make_tx("Blast")],
            "0xw2": [make_tx("Scroll")],
            "0xw3": [make_tx("Linea")],
        }
        user = [make_tx("Blast", wallet="0xuser")]

        predictions = detector.predict_airdrops(user, smart)

        assert [(p.protocol, p.probability, p.user_has_used) for p in predictions] == [
            ("Blast", 75, True),
            ("Scroll", 40, False),
        ]
        assert predictions[0].adoption_rate == pytest.approx(50.0)
        assert predictions[0].reasoning == "You've used Blast. 50.0% of smart wallets are active here."
        assert predictions[1].adoption_rate == pytest.approx(75.0)
        assert predictions[1].reasoning == "75.0% of smart wallets are using Scroll. Consider trying it."

    def test_empty_cohort(self, detector):
        assert detector.predict_airdrops([make_tx("Blast")], {}) == []

    def test_address_case_does_not_split_wallets(self, detector):
        smart = {
            "0xAbC0": [make_tx("Scroll")],
            "0xabc0": [make_tx("Scroll", days=1)],
            "0xabc1": [make_tx("Blast")],
        }
        predictions = detector.predict_airdrops([], smart)
        assert [(p.protocol, p.adoption_rate) for p in predictions] == [
            ("Scroll", pytest.approx(50.0)),
            ("Blast", pytest.approx(50.0)),
        ]


# ============================================================
# WHALE FILTER TESTS
# ============================================================

class TestWhaleFilter:
    @pytest.fixture
    def transactions(self):
        return [make_tx("Aave", value=v, tx_hash=f"0x{v}") for v in (50_000, 100_000, 250_000)]

    def test_numeric_string_threshold(self, transactions):
        whales = filter_whale_transactions(transactions, "100000")
        assert [tx.value for tx in whales] == [100_000, 250_000]

    def test_numeric_threshold(self, transactions):
        assert len(filter_whale_transactions(transactions, 0)) == 3

    @pytest.mark.parametrize("threshold", ["lots", None, "inf", float("nan")])
    def test_invalid_threshold(self, transactions, threshold):
        with pytest.raises(InvalidThresholdError):
            filter_whale_transactions(transactions, threshold)
