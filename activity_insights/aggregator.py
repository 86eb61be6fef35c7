"""
Activity Insights - Aggregator.

============================================================
DERIVED VIEWS OVER PROTOCOL ACTIVITY
============================================================

Turns interaction aggregates and raw chain transactions into:
- per-protocol breakdown (category + days active)
- reverse-chronological timeline of cataloged interactions
- monthly activity buckets
- per-category focus areas, always fully enumerated

All functions are pure: the same input (and catalog/config)
always produces the same output.

============================================================
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging

from core.clock import days_between
from core.numbers import round_half_up
from protocol_catalog import (
    ProtocolCatalog,
    ProtocolCategory,
    get_category_label,
    get_chain_name,
    get_default_catalog,
)

from .config import InsightsConfig, get_config
from .models import (
    FocusArea,
    FocusStatus,
    MonthlyActivity,
    ProtocolBreakdownEntry,
    ProtocolInteraction,
    TimelineEntry,
)
from .schemas import ChainTransaction, coerce_transactions


logger = logging.getLogger(__name__)


ChainTransactions = Mapping[Union[int, str], Iterable[Union[ChainTransaction, Dict[str, Any]]]]


CATEGORY_RECOMMENDATIONS: Dict[ProtocolCategory, str] = {
    ProtocolCategory.DEX: "Execute swaps or provide liquidity on a DEX to build trading history.",
    ProtocolCategory.BRIDGE: "Bridge assets across chains to qualify for interoperability airdrops.",
    ProtocolCategory.DEFI: "Supply or borrow assets on lending protocols to signal DeFi participation.",
    ProtocolCategory.RESTAKING: "Restake ETH or LSTs to capture restaking protocol points.",
    ProtocolCategory.NFT: "Mint or trade NFTs on creator platforms to remain eligible for cultural airdrops.",
    ProtocolCategory.INFRASTRUCTURE: "Interact with infrastructure protocols to diversify eligibility.",
    ProtocolCategory.TOOLING: "Use onchain tooling products to be an early adopter.",
    ProtocolCategory.OTHER: "Explore experimental protocols to diversify activity footprint.",
}


def iter_chains(chain_transactions: ChainTransactions):
    """
    Yield (chain_id, transactions) with integer chain ids.

    Keys that are not integers (JSON object keys arrive as
    strings) are converted; unconvertible keys are skipped.
    """
    for chain_key, transactions in chain_transactions.items():
        try:
            chain_id = int(chain_key)
        except (TypeError, ValueError):
            logger.warning(f"Skipping transactions under non-numeric chain id {chain_key!r}")
            continue
        yield chain_id, coerce_transactions(transactions or [])


# =============================================================
# BREAKDOWN
# =============================================================


def build_protocol_breakdown(
    interactions: Iterable[ProtocolInteraction],
    catalog: Optional[ProtocolCatalog] = None,
) -> List[ProtocolBreakdownEntry]:
    """
    Enrich each interaction with its category and active span.

    Uncataloged contracts are categorized as `other`.
    `days_active` is 0 when either endpoint timestamp is missing.
    """
    catalog = catalog or get_default_catalog()
    breakdown: List[ProtocolBreakdownEntry] = []

    for interaction in interactions:
        category = catalog.resolve_category(interaction.contract_address)
        breakdown.append(ProtocolBreakdownEntry(
            protocol=interaction.protocol,
            category=category,
            category_label=get_category_label(category),
            chain_id=interaction.chain_id,
            chain_name=get_chain_name(interaction.chain_id),
            interaction_count=interaction.interaction_count,
            first_interaction=interaction.first_interaction,
            last_interaction=interaction.last_interaction,
            days_active=days_between(
                interaction.first_interaction,
                interaction.last_interaction,
            ),
        ))

    return breakdown


# =============================================================
# TIMELINE
# =============================================================


def build_timeline(
    chain_transactions: ChainTransactions,
    catalog: Optional[ProtocolCatalog] = None,
    config: Optional[InsightsConfig] = None,
) -> List[TimelineEntry]:
    """
    One entry per transaction sent to a cataloged protocol.

    Sorted newest first and truncated to `timeline_limit`.
    Transactions to uncataloged contracts produce no entry;
    transactions without a signed-at time are skipped.
    """
    catalog = catalog or get_default_catalog()
    config = config or get_config()
    events: List[TimelineEntry] = []
    dropped = 0

    for chain_id, transactions in iter_chains(chain_transactions):
        chain_name = get_chain_name(chain_id)

        for tx in transactions:
            metadata = catalog.lookup(tx.to_address)
            if metadata is None:
                dropped += 1
                continue
            if tx.block_signed_at is None:
                logger.debug(f"Skipping timeline tx {tx.tx_hash}: no block_signed_at")
                continue

            category = metadata.category
            events.append(TimelineEntry(
                id=f"{tx.tx_hash}-{category.value}",
                tx_hash=tx.tx_hash,
                date=tx.block_signed_at,
                protocol=metadata.name,
                category=category,
                category_label=get_category_label(category),
                chain_id=chain_id,
                chain_name=chain_name,
                description=f"Interaction with {metadata.name} on {chain_name}",
            ))

    if dropped:
        logger.debug(f"Timeline dropped {dropped} transactions to uncataloged contracts")

    events.sort(key=lambda e: e.date, reverse=True)
    return events[:config.timeline_limit]


# =============================================================
# MONTHLY ACTIVITY
# =============================================================


def build_monthly_activity(
    timeline: Iterable[TimelineEntry],
    config: Optional[InsightsConfig] = None,
) -> List[MonthlyActivity]:
    """
    Bucket timeline entries by YYYY-MM.

    Ascending by month; only the most recent `monthly_limit`
    buckets are kept.
    """
    config = config or get_config()
    counts: Dict[str, int] = defaultdict(int)
    protocols: Dict[str, set] = defaultdict(set)

    for entry in timeline:
        month = entry.month
        counts[month] += 1
        protocols[month].add(entry.protocol)

    buckets = [
        MonthlyActivity(
            month=month,
            interaction_count=counts[month],
            unique_protocols=len(protocols[month]),
        )
        for month in sorted(counts)
    ]
    return buckets[-config.monthly_limit:]


# =============================================================
# FOCUS AREAS
# =============================================================


def focus_status(interactions: int, config: Optional[InsightsConfig] = None) -> FocusStatus:
    """strong >= threshold, needs_attention for any activity, else missing."""
    config = config or get_config()
    if interactions >= config.strong_threshold:
        return FocusStatus.STRONG
    if interactions > 0:
        return FocusStatus.NEEDS_ATTENTION
    return FocusStatus.MISSING


def focus_score(
    interactions: int,
    unique_protocols: int,
    config: Optional[InsightsConfig] = None,
) -> int:
    """0-100 blend of interaction volume and protocol diversity."""
    config = config or get_config()
    interaction_factor = min(interactions / config.focus_interaction_target, 1.0)
    diversity_factor = min(unique_protocols / config.focus_protocol_target, 1.0)
    blended = (
        interaction_factor * config.focus_interaction_weight
        + diversity_factor * config.focus_diversity_weight
    )
    return int(round_half_up(blended * 100))


def build_focus_areas(
    breakdown: Iterable[ProtocolBreakdownEntry],
    config: Optional[InsightsConfig] = None,
) -> List[FocusArea]:
    """
    One focus area per category, in canonical category order.

    Categories with no activity are included with status `missing`.
    """
    config = config or get_config()
    interactions: Dict[ProtocolCategory, int] = defaultdict(int)
    protocols: Dict[ProtocolCategory, set] = defaultdict(set)

    for entry in breakdown:
        interactions[entry.category] += entry.interaction_count
        protocols[entry.category].add(entry.protocol)

    areas: List[FocusArea] = []
    for category in ProtocolCategory:
        total = interactions.get(category, 0)
        unique = len(protocols.get(category, ()))
        areas.append(FocusArea(
            category=category,
            category_label=get_category_label(category),
            interactions=total,
            unique_protocols=unique,
            score=focus_score(total, unique, config),
            status=focus_status(total, config),
            recommendation=CATEGORY_RECOMMENDATIONS[category],
        ))

    return areas
