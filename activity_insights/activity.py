"""
Activity Insights - Raw Record Analysis.

============================================================
RAW PROVIDER RECORDS -> USER ACTIVITY SNAPSHOT
============================================================

Detects protocol interactions in chain transactions and
rolls them up into the per-chain, per-bridge and per-DEX
views that eligibility criteria are checked against.

Only transactions to cataloged contracts count as protocol
interactions. Bridge and DEX views are derived from those
interactions by catalog category.

============================================================
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
import logging

from protocol_catalog import (
    ProtocolCatalog,
    ProtocolCategory,
    get_chain_name,
    get_default_catalog,
)

from .aggregator import ChainTransactions, iter_chains
from .models import (
    BridgeActivity,
    ChainActivity,
    DexSwapActivity,
    NFTActivity,
    ProtocolInteraction,
    UserActivity,
)
from .schemas import NFTRecord, coerce_nfts


logger = logging.getLogger(__name__)


ChainNFTs = Mapping[Union[int, str], Iterable[Union[NFTRecord, Dict[str, Any]]]]


def _earliest(current: Optional[datetime], candidate: Optional[datetime]) -> Optional[datetime]:
    if candidate is None:
        return current
    if current is None or candidate < current:
        return candidate
    return current


def _latest(current: Optional[datetime], candidate: Optional[datetime]) -> Optional[datetime]:
    if candidate is None:
        return current
    if current is None or candidate > current:
        return candidate
    return current


# =============================================================
# CHAINS AND PROTOCOLS
# =============================================================


def analyze_chain_activity(chain_transactions: ChainTransactions) -> List[ChainActivity]:
    """
    Per-chain transaction count and activity span.

    Chains with no (valid) transactions are omitted.
    """
    activities: List[ChainActivity] = []

    for chain_id, transactions in iter_chains(chain_transactions):
        if not transactions:
            continue

        timestamps = sorted(
            tx.block_signed_at for tx in transactions if tx.block_signed_at is not None
        )
        activities.append(ChainActivity(
            chain_id=chain_id,
            chain_name=get_chain_name(chain_id),
            transaction_count=len(transactions),
            first_activity=timestamps[0] if timestamps else None,
            last_activity=timestamps[-1] if timestamps else None,
        ))

    return activities


def detect_protocol_interactions(
    chain_transactions: ChainTransactions,
    catalog: Optional[ProtocolCatalog] = None,
) -> List[ProtocolInteraction]:
    """
    One ProtocolInteraction per (protocol, contract, chain).

    Order follows first appearance in the input.
    """
    catalog = catalog or get_default_catalog()
    interactions: Dict[Tuple[str, str, int], ProtocolInteraction] = {}

    for chain_id, transactions in iter_chains(chain_transactions):
        for tx in transactions:
            if not tx.to_address:
                continue
            metadata = catalog.lookup(tx.to_address)
            if metadata is None:
                continue

            key = (metadata.name, tx.to_address, chain_id)
            existing = interactions.get(key)
            if existing is None:
                interactions[key] = ProtocolInteraction(
                    protocol=metadata.name,
                    contract_address=tx.to_address,
                    chain_id=chain_id,
                    interaction_count=1,
                    first_interaction=tx.block_signed_at,
                    last_interaction=tx.block_signed_at,
                )
                continue

            existing.interaction_count += 1
            existing.first_interaction = _earliest(existing.first_interaction, tx.block_signed_at)
            existing.last_interaction = _latest(existing.last_interaction, tx.block_signed_at)

    return list(interactions.values())


def analyze_nft_activity(chain_nfts: ChainNFTs) -> List[NFTActivity]:
    """One `mint` record per held NFT; the acquisition type is not inspected."""
    activities: List[NFTActivity] = []

    for chain_key, nfts in chain_nfts.items():
        try:
            chain_id = int(chain_key)
        except (TypeError, ValueError):
            logger.warning(f"Skipping NFTs under non-numeric chain id {chain_key!r}")
            continue

        for nft in coerce_nfts(nfts or []):
            activities.append(NFTActivity(
                contract_address=nft.contract_address,
                token_id=nft.token_id,
                chain_id=chain_id,
            ))

    return activities


# =============================================================
# BRIDGES AND DEXES
# =============================================================


def detect_bridge_activity(
    interactions: Iterable[ProtocolInteraction],
    catalog: Optional[ProtocolCatalog] = None,
) -> List[BridgeActivity]:
    """Aggregate bridge interactions per bridge protocol."""
    catalog = catalog or get_default_catalog()
    bridges: Dict[str, BridgeActivity] = {}

    for interaction in interactions:
        if catalog.resolve_category(interaction.contract_address) != ProtocolCategory.BRIDGE:
            continue

        existing = bridges.get(interaction.protocol)
        if existing is None:
            bridges[interaction.protocol] = BridgeActivity(
                bridge=interaction.protocol,
                from_chain=interaction.chain_id,
                count=interaction.interaction_count,
                last_bridge=interaction.last_interaction,
            )
            continue

        existing.count += interaction.interaction_count
        existing.last_bridge = _latest(existing.last_bridge, interaction.last_interaction)

    return list(bridges.values())


def detect_dex_activity(
    interactions: Iterable[ProtocolInteraction],
    catalog: Optional[ProtocolCatalog] = None,
) -> List[DexSwapActivity]:
    """Aggregate DEX interactions per (dex, chain)."""
    catalog = catalog or get_default_catalog()
    swaps: Dict[Tuple[str, int], DexSwapActivity] = {}

    for interaction in interactions:
        if catalog.resolve_category(interaction.contract_address) != ProtocolCategory.DEX:
            continue

        key = (interaction.protocol, interaction.chain_id)
        existing = swaps.get(key)
        if existing is None:
            swaps[key] = DexSwapActivity(
                dex=interaction.protocol,
                chain_id=interaction.chain_id,
                count=interaction.interaction_count,
                last_swap=interaction.last_interaction,
            )
            continue

        existing.count += interaction.interaction_count
        existing.last_swap = _latest(existing.last_swap, interaction.last_interaction)

    return list(swaps.values())


# =============================================================
# SNAPSHOT
# =============================================================


def aggregate_user_activity(
    address: str,
    chain_transactions: ChainTransactions,
    chain_nfts: Optional[ChainNFTs] = None,
    catalog: Optional[ProtocolCatalog] = None,
) -> UserActivity:
    """Build the full activity snapshot for one wallet."""
    catalog = catalog or get_default_catalog()
    protocols = detect_protocol_interactions(chain_transactions, catalog)

    return UserActivity(
        address=address,
        chains=analyze_chain_activity(chain_transactions),
        protocols=protocols,
        nfts=analyze_nft_activity(chain_nfts or {}),
        bridges=detect_bridge_activity(protocols, catalog),
        dex_swaps=detect_dex_activity(protocols, catalog),
    )
