"""
Activity Insights - Summary Metrics.

============================================================
HEADLINE NUMBERS FOR A WALLET
============================================================

- coverage: share of categories with any activity
- dormant protocols: idle the longest
- velocity: last window vs the window before it
- decay: freshness of the most recent interaction
- momentum: last month vs the month before
- streak: consecutive active days up to the last active day
- engagement: mean category score

"Now"-relative metrics take `now` explicitly so results are
reproducible under a mock clock.

============================================================
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from core.clock import days_between, ensure_utc
from core.numbers import round_half_up, safe_div

from .config import InsightsConfig, get_config
from .models import (
    CategoryScore,
    CoverageMetrics,
    DecayMetrics,
    DecayStatus,
    DormantProtocol,
    FocusArea,
    MomentumDirection,
    MomentumMetrics,
    MonthlyActivity,
    MostActiveCategory,
    ProtocolBreakdownEntry,
    StreakMetrics,
    TimelineEntry,
    VelocityMetrics,
    VelocityTrend,
)


# =============================================================
# CATEGORY-LEVEL
# =============================================================


def calculate_coverage(focus_areas: Sequence[FocusArea]) -> CoverageMetrics:
    """Share of categories with at least one interaction."""
    covered = [a for a in focus_areas if a.interactions > 0]
    missing = [a for a in focus_areas if a.interactions == 0]
    total = len(focus_areas)
    return CoverageMetrics(
        score=int(round_half_up(safe_div(len(covered), total) * 100)),
        covered_categories=[a.category_label for a in covered],
        total_categories=total,
        missing_categories=[a.category_label for a in missing],
    )


def build_category_scores(focus_areas: Iterable[FocusArea]) -> List[CategoryScore]:
    return [CategoryScore.from_focus_area(area) for area in focus_areas]


def calculate_engagement_score(category_scores: Sequence[CategoryScore]) -> int:
    """Rounded mean of category scores; 0 with no categories."""
    if not category_scores:
        return 0
    mean = sum(c.score for c in category_scores) / len(category_scores)
    return int(round_half_up(mean))


def find_most_active_category(
    focus_areas: Sequence[FocusArea],
) -> Optional[MostActiveCategory]:
    """
    Category with the most interactions.

    Ties keep canonical category order. None when nothing is active.
    """
    best: Optional[FocusArea] = None
    for area in focus_areas:
        if area.interactions <= 0:
            continue
        if best is None or area.interactions > best.interactions:
            best = area
    if best is None:
        return None
    return MostActiveCategory(
        category=best.category,
        label=best.category_label,
        interaction_count=best.interactions,
    )


# =============================================================
# PROTOCOL-LEVEL
# =============================================================


def count_new_protocols(
    breakdown: Iterable[ProtocolBreakdownEntry],
    now: datetime,
    window_days: int = 30,
) -> int:
    """Entries whose first interaction falls within the last `window_days`."""
    cutoff = ensure_utc(now) - timedelta(days=window_days)
    return sum(
        1 for entry in breakdown
        if entry.first_interaction is not None
        and ensure_utc(entry.first_interaction) >= cutoff
    )


def average_interactions(breakdown: Sequence[ProtocolBreakdownEntry]) -> float:
    """Mean interactions per entry, 2 decimals; 0 for an empty breakdown."""
    total = sum(entry.interaction_count for entry in breakdown)
    return round_half_up(total / max(len(breakdown), 1), 2)


def find_dormant_protocols(
    breakdown: Iterable[ProtocolBreakdownEntry],
    now: datetime,
    config: Optional[InsightsConfig] = None,
) -> List[DormantProtocol]:
    """
    Protocols idle for at least `dormant_threshold_days`.

    Entries with no recorded last interaction rank first, then
    the longest idle. At most `dormant_limit` are returned.
    """
    config = config or get_config()
    candidates: List[Tuple[float, DormantProtocol]] = []

    for entry in breakdown:
        if entry.last_interaction is None:
            candidates.append((float("inf"), DormantProtocol(
                protocol=entry.protocol,
                category_label=entry.category_label,
                days_since_interaction=None,
            )))
            continue

        days = days_between(entry.last_interaction, now)
        if days < config.dormant_threshold_days:
            continue
        candidates.append((float(days), DormantProtocol(
            protocol=entry.protocol,
            category_label=entry.category_label,
            days_since_interaction=days,
            last_interaction=entry.last_interaction,
        )))

    candidates.sort(key=lambda item: item[0], reverse=True)
    return [dormant for _, dormant in candidates[:config.dormant_limit]]


# =============================================================
# TIME-SERIES
# =============================================================


def calculate_velocity(
    timeline: Iterable[TimelineEntry],
    now: datetime,
    config: Optional[InsightsConfig] = None,
) -> VelocityMetrics:
    """
    Average daily interactions in the current window vs the previous one.
    """
    config = config or get_config()
    window = config.velocity_window_days
    now = ensure_utc(now)
    current_start = now - timedelta(days=window)
    previous_start = now - timedelta(days=window * 2)

    current_count = 0
    previous_count = 0
    for event in timeline:
        event_date = ensure_utc(event.date)
        if event_date >= current_start:
            current_count += 1
        elif event_date >= previous_start:
            previous_count += 1

    current_avg = round_half_up(current_count / window, 2)
    previous_avg = round_half_up(previous_count / window, 2)

    if previous_avg == 0:
        percent_change = 100.0 if current_avg > 0 else 0.0
    else:
        percent_change = round_half_up((current_avg - previous_avg) / previous_avg * 100, 1)

    threshold = config.velocity_trend_threshold_pct
    if percent_change > threshold:
        trend = VelocityTrend.ACCELERATING
    elif percent_change < -threshold:
        trend = VelocityTrend.COOLING
    else:
        trend = VelocityTrend.STEADY

    return VelocityMetrics(
        current_avg_daily=current_avg,
        previous_avg_daily=previous_avg,
        percent_change=percent_change,
        delta_interactions=current_count - previous_count,
        trend=trend,
    )


def calculate_decay(
    last_interaction: Optional[datetime],
    now: datetime,
    config: Optional[InsightsConfig] = None,
) -> DecayMetrics:
    """Freshness of the most recent interaction; unknown is stale."""
    config = config or get_config()
    if last_interaction is None:
        return DecayMetrics(days_since_interaction=None, status=DecayStatus.STALE)

    days = days_between(last_interaction, now)
    if days <= config.decay_fresh_days:
        status = DecayStatus.FRESH
    elif days <= config.decay_warm_days:
        status = DecayStatus.WARM
    else:
        status = DecayStatus.STALE

    return DecayMetrics(days_since_interaction=days, status=status)


def calculate_momentum(
    monthly_activity: Sequence[MonthlyActivity],
    config: Optional[InsightsConfig] = None,
) -> MomentumMetrics:
    """
    Compare the two most recent monthly buckets.

    A lone bucket counts as growth from nothing.
    """
    config = config or get_config()
    if not monthly_activity:
        return MomentumMetrics(MomentumDirection.STEADY, 0.0, 0)

    current = monthly_activity[-1].interaction_count
    previous = monthly_activity[-2].interaction_count if len(monthly_activity) > 1 else 0
    delta = current - previous

    if previous == 0:
        percent_change = 100.0 if current > 0 else 0.0
    else:
        percent_change = round_half_up(delta / previous * 100, 1)

    threshold = config.momentum_threshold_pct
    if percent_change > threshold:
        direction = MomentumDirection.UP
    elif percent_change < -threshold:
        direction = MomentumDirection.DOWN
    else:
        direction = MomentumDirection.STEADY

    return MomentumMetrics(
        direction=direction,
        percent_change=percent_change,
        delta_interactions=delta,
    )


def calculate_active_streak(timeline: Iterable[TimelineEntry]) -> StreakMetrics:
    """
    Consecutive calendar days (UTC) with activity, counted back
    from the most recent active day.
    """
    active_days = {ensure_utc(entry.date).date() for entry in timeline}
    if not active_days:
        return StreakMetrics(active_days=0)

    last_day = max(active_days)
    streak = 0
    day = last_day
    while day in active_days:
        streak += 1
        day -= timedelta(days=1)

    return StreakMetrics(active_days=streak, last_active_date=last_day.isoformat())
