"""
Activity Insights - Main Engine.

============================================================
MAIN ORCHESTRATOR
============================================================

`build_protocol_insights` composes the aggregator and the
summary metrics into one ProtocolInsights result.

`ActivityInsightsEngine` holds the catalog, config and clock,
and isolates per-wallet failures: a wallet whose computation
raises gets empty insights instead of an exception.

============================================================
"""

from pathlib import Path
from typing import Iterable, Optional
import logging

from core.clock import ClockProtocol, resolve_clock
from protocol_catalog import ProtocolCatalog, get_default_catalog

from .activity import ChainNFTs, aggregate_user_activity
from .aggregator import (
    ChainTransactions,
    build_focus_areas,
    build_monthly_activity,
    build_protocol_breakdown,
    build_timeline,
)
from .config import InsightsConfig, get_config, load_config
from .metrics import (
    average_interactions,
    build_category_scores,
    calculate_active_streak,
    calculate_coverage,
    calculate_decay,
    calculate_engagement_score,
    calculate_momentum,
    calculate_velocity,
    count_new_protocols,
    find_dormant_protocols,
    find_most_active_category,
)
from .models import InsightsSummary, ProtocolInsights, ProtocolInteraction, UserActivity


logger = logging.getLogger(__name__)


def build_protocol_insights(
    address: str,
    interactions: Iterable[ProtocolInteraction],
    chain_transactions: ChainTransactions,
    catalog: Optional[ProtocolCatalog] = None,
    config: Optional[InsightsConfig] = None,
    clock: Optional[ClockProtocol] = None,
) -> ProtocolInsights:
    """
    Compute the complete protocol insights for one wallet.

    Args:
        address: Wallet address (echoed back, not validated)
        interactions: Pre-aggregated protocol interactions
        chain_transactions: {chain_id: [raw tx dict | ChainTransaction]}
        catalog: Protocol catalog (default: embedded catalog)
        config: Thresholds (default: module config)
        clock: Source of "now" (default: ClockFactory clock)

    Returns:
        ProtocolInsights
    """
    catalog = catalog or get_default_catalog()
    config = config or get_config()
    now = resolve_clock(clock).now()

    breakdown = build_protocol_breakdown(interactions, catalog)
    timeline = build_timeline(chain_transactions, catalog, config)
    monthly = build_monthly_activity(timeline, config)
    focus_areas = build_focus_areas(breakdown, config)
    category_scores = build_category_scores(focus_areas)

    last_interaction = timeline[0].date if timeline else None

    summary = InsightsSummary(
        total_protocols=len({entry.protocol for entry in breakdown}),
        active_categories=sum(1 for area in focus_areas if area.interactions > 0),
        new_protocols_last_30d=count_new_protocols(
            breakdown, now, config.new_protocol_window_days
        ),
        avg_interactions_per_protocol=average_interactions(breakdown),
        engagement_score=calculate_engagement_score(category_scores),
        momentum=calculate_momentum(monthly, config),
        streak=calculate_active_streak(timeline),
        velocity=calculate_velocity(timeline, now, config),
        decay=calculate_decay(last_interaction, now, config),
        coverage=calculate_coverage(focus_areas),
        last_interaction=last_interaction,
        most_active_category=find_most_active_category(focus_areas),
    )

    return ProtocolInsights(
        address=address,
        summary=summary,
        breakdown=breakdown,
        timeline=timeline,
        focus_areas=focus_areas,
        category_scores=category_scores,
        monthly_activity=monthly,
        dormant_protocols=find_dormant_protocols(breakdown, now, config),
        generated_at=now,
    )


class ActivityInsightsEngine:
    """
    Entry point for wallet activity analysis.

    Usage:
        engine = ActivityInsightsEngine()
        insights = engine.get_insights(address, interactions, chain_txs)
        activity = engine.get_user_activity(address, chain_txs, chain_nfts)
    """

    def __init__(
        self,
        catalog: Optional[ProtocolCatalog] = None,
        config: Optional[InsightsConfig] = None,
        config_path: Optional[Path] = None,
        clock: Optional[ClockProtocol] = None,
    ):
        if config:
            self._config = config
        elif config_path:
            self._config = load_config(config_path)
        else:
            self._config = get_config()

        self._catalog = catalog or get_default_catalog()
        self._clock = clock

        logger.info(f"ActivityInsightsEngine initialized with {len(self._catalog)} cataloged contracts")

    @property
    def config(self) -> InsightsConfig:
        return self._config

    @property
    def catalog(self) -> ProtocolCatalog:
        return self._catalog

    def get_insights(
        self,
        address: str,
        interactions: Iterable[ProtocolInteraction],
        chain_transactions: ChainTransactions,
    ) -> ProtocolInsights:
        """Protocol insights for one wallet; empty insights on failure."""
        try:
            insights = build_protocol_insights(
                address,
                interactions,
                chain_transactions,
                catalog=self._catalog,
                config=self._config,
                clock=self._clock,
            )
        except Exception as e:
            logger.warning(f"Insights computation failed for {address}: {e}")
            return self.empty_insights(address)

        if self._config.log_calculations:
            summary = insights.summary
            logger.info(
                f"Insights for {address}: "
                f"protocols={summary.total_protocols}, "
                f"categories={summary.active_categories}, "
                f"engagement={summary.engagement_score}"
            )
        return insights

    def empty_insights(self, address: str) -> ProtocolInsights:
        """Insights for a wallet with no activity: every category missing."""
        return build_protocol_insights(
            address,
            [],
            {},
            catalog=self._catalog,
            config=self._config,
            clock=self._clock,
        )

    def get_user_activity(
        self,
        address: str,
        chain_transactions: ChainTransactions,
        chain_nfts: Optional[ChainNFTs] = None,
    ) -> UserActivity:
        """Activity snapshot for eligibility checks; empty on failure."""
        try:
            activity = aggregate_user_activity(
                address,
                chain_transactions,
                chain_nfts,
                catalog=self._catalog,
            )
        except Exception as e:
            logger.warning(f"Activity aggregation failed for {address}: {e}")
            return UserActivity.empty(address)

        if self._config.log_calculations:
            logger.info(
                f"Activity for {address}: chains={len(activity.chains)}, "
                f"protocols={len(activity.protocols)}, nfts={len(activity.nfts)}"
            )
        return activity
