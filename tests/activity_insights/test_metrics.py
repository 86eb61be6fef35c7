"""
Tests for Activity Insights summary metrics.

============================================================
PURPOSE
============================================================
Verify that:
1. Coverage, engagement and most-active category agree with focus areas
2. Now-relative metrics are deterministic for a fixed "now"
3. Velocity, decay and momentum classify at their thresholds
4. Streaks count consecutive UTC days

============================================================
"""

from datetime import timedelta

import pytest

from activity_insights import (
    DecayStatus,
    InsightsConfig,
    MomentumDirection,
    MonthlyActivity,
    ProtocolInteraction,
    TimelineEntry,
    VelocityTrend,
    build_category_scores,
    build_focus_areas,
    build_protocol_breakdown,
    calculate_active_streak,
    calculate_coverage,
    calculate_decay,
    calculate_engagement_score,
    calculate_momentum,
    calculate_velocity,
    detect_protocol_interactions,
    find_dormant_protocols,
    find_most_active_category,
)
from activity_insights.metrics import average_interactions, count_new_protocols
from protocol_catalog import ProtocolCategory

from .conftest import NOW, UNISWAP, ZORA


def _entry(date, protocol="Uniswap"):
    return TimelineEntry(
        id=f"{date.isoformat()}-dex",
        tx_hash=date.isoformat(),
        date=date,
        protocol=protocol,
        category=ProtocolCategory.DEX,
        category_label="DEX",
        chain_id=8453,
        chain_name="Base",
        description=f"Interaction with {protocol} on Base",
    )


def _months(*counts):
    return [
        MonthlyActivity(month=f"2024-{i + 1:02d}", interaction_count=c, unique_protocols=1)
        for i, c in enumerate(counts)
    ]


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def breakdown(chain_transactions):
    return build_protocol_breakdown(detect_protocol_interactions(chain_transactions))


@pytest.fixture
def focus_areas(breakdown):
    return build_focus_areas(breakdown)


# ============================================================
# CATEGORY METRICS TESTS
# ============================================================

class TestCategoryMetrics:
    """Tests for coverage, engagement and most active category."""

    def test_coverage(self, focus_areas):
        coverage = calculate_coverage(focus_areas)
        assert coverage.score == 50
        assert coverage.total_categories == 8
        assert coverage.covered_categories == ["DEX", "Bridge", "Restaking", "NFT"]
        assert coverage.missing_categories == ["DeFi", "Infrastructure", "Tooling", "Other"]

    def test_coverage_empty(self):
        coverage = calculate_coverage(build_focus_areas([]))
        assert coverage.score == 0
        assert len(coverage.missing_categories) == 8

    def test_engagement_rounds_half_up(self, focus_areas):
        # Four categories at 11, four at 0 -> mean 5.5
        assert calculate_engagement_score(build_category_scores(focus_areas)) == 6

    def test_engagement_empty(self):
        assert calculate_engagement_score([]) == 0

    def test_most_active_tie_keeps_canonical_order(self, focus_areas):
        most_active = find_most_active_category(focus_areas)
        assert most_active.category is ProtocolCategory.DEX
        assert most_active.interaction_count == 1

    def test_most_active_by_interactions(self):
        interactions = [
            ProtocolInteraction("Uniswap", UNISWAP, 8453, 2),
            ProtocolInteraction("Zora", ZORA, 8453, 7),
        ]
        areas = build_focus_areas(build_protocol_breakdown(interactions))
        assert find_most_active_category(areas).label == "NFT"

    def test_most_active_none(self):
        assert find_most_active_category(build_focus_areas([])) is None


# ============================================================
# PROTOCOL METRICS TESTS
# ============================================================

class TestProtocolMetrics:
    """Tests for new and dormant protocols."""

    def test_new_protocols(self, breakdown):
        assert count_new_protocols(breakdown, NOW, 30) == 2

    def test_average_interactions(self, breakdown):
        assert average_interactions(breakdown) == 1.0
        assert average_interactions([]) == 0.0

    def test_dormant_longest_idle_first(self, breakdown):
        dormant = find_dormant_protocols(breakdown, NOW)
        assert [(d.protocol, d.days_since_interaction) for d in dormant] == [
            ("EigenLayer", 100),
            ("Stargate", 40),
        ]

    def test_unknown_last_interaction_ranks_first(self, breakdown):
        breakdown.append(build_protocol_breakdown([ProtocolInteraction("Zora", ZORA, 1, 1)])[0])
        dormant = find_dormant_protocols(breakdown, NOW)
        assert dormant[0].protocol == "Zora"
        assert dormant[0].days_since_interaction is None

    def test_dormant_limit(self):
        interactions = [
            ProtocolInteraction("Uniswap", UNISWAP, chain, 1, last_interaction=NOW - timedelta(days=60 + chain))
            for chain in range(8)
        ]
        dormant = find_dormant_protocols(build_protocol_breakdown(interactions), NOW)
        assert len(dormant) == 5
        assert dormant[0].days_since_interaction == 67


# ============================================================
# TIME-SERIES METRICS TESTS
# ============================================================

class TestVelocity:
    """Tests for interaction velocity."""

    def test_accelerating(self):
        timeline = [
            _entry(NOW - timedelta(days=1)),
            _entry(NOW - timedelta(days=2)),
            _entry(NOW - timedelta(days=40)),
            _entry(NOW - timedelta(days=100)),
        ]
        velocity = calculate_velocity(timeline, NOW)
        assert velocity.current_avg_daily == 0.07
        assert velocity.previous_avg_daily == 0.03
        assert velocity.percent_change == pytest.approx(133.3)
        assert velocity.delta_interactions == 1
        assert velocity.trend is VelocityTrend.ACCELERATING

    def test_cooling(self):
        timeline = [_entry(NOW - timedelta(days=d)) for d in (35, 40, 45)]
        velocity = calculate_velocity(timeline, NOW)
        assert velocity.percent_change == -100.0
        assert velocity.trend is VelocityTrend.COOLING

    def test_no_activity_is_steady(self):
        velocity = calculate_velocity([], NOW)
        assert velocity.percent_change == 0.0
        assert velocity.trend is VelocityTrend.STEADY

    def test_growth_from_nothing(self):
        velocity = calculate_velocity([_entry(NOW - timedelta(days=3))], NOW)
        assert velocity.percent_change == 100.0
        assert velocity.trend is VelocityTrend.ACCELERATING


class TestDecay:
    """Tests for interaction freshness."""

    @pytest.mark.parametrize("days,status", [
        (0, DecayStatus.FRESH),
        (7, DecayStatus.FRESH),
        (8, DecayStatus.WARM),
        (30, DecayStatus.WARM),
        (31, DecayStatus.STALE),
    ])
    def test_thresholds(self, days, status):
        decay = calculate_decay(NOW - timedelta(days=days), NOW)
        assert decay.days_since_interaction == days
        assert decay.status is status

    def test_unknown_is_stale(self):
        decay = calculate_decay(None, NOW)
        assert decay.days_since_interaction is None
        assert decay.status is DecayStatus.STALE

    def test_custom_thresholds(self):
        config = InsightsConfig(decay_fresh_days=1, decay_warm_days=2)
        assert calculate_decay(NOW - timedelta(days=3), NOW, config).status is DecayStatus.STALE


class TestMomentum:
    """Tests for month-over-month momentum."""

    def test_empty(self):
        momentum = calculate_momentum([])
        assert momentum.direction is MomentumDirection.STEADY
        assert momentum.percent_change == 0.0
        assert momentum.delta_interactions == 0

    def test_single_bucket(self):
        momentum = calculate_momentum(_months(5))
        assert momentum.direction is MomentumDirection.UP
        assert momentum.percent_change == 100.0
        assert momentum.delta_interactions == 5

    def test_threshold_is_exclusive(self):
        assert calculate_momentum(_months(10, 9)).direction is MomentumDirection.STEADY
        assert calculate_momentum(_months(10, 11)).direction is MomentumDirection.STEADY

    def test_directions(self):
        assert calculate_momentum(_months(10, 8)).direction is MomentumDirection.DOWN
        assert calculate_momentum(_months(1, 10, 12)).direction is MomentumDirection.UP


class TestStreak:
    """Tests for active-day streaks."""

    def test_consecutive_days(self):
        timeline = [
            _entry(NOW - timedelta(days=1)),
            _entry(NOW - timedelta(days=2)),
            _entry(NOW - timedelta(days=2, hours=3)),
            _entry(NOW - timedelta(days=40)),
        ]
        streak = calculate_active_streak(timeline)
        assert streak.active_days == 2
        assert streak.last_active_date == "2024-06-14"

    def test_empty(self):
        streak = calculate_active_streak([])
        assert streak.active_days == 0
        assert streak.last_active_date is None
