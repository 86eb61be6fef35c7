"""
Protocol Catalog - Chain Names.

Static chain-id to display-name table for EVM networks the
data providers report on.
"""

from types import MappingProxyType
from typing import Mapping


CHAIN_ID_TO_NAME: Mapping[int, str] = MappingProxyType({
    1: "Ethereum",
    10: "Optimism",
    56: "BNB Chain",
    100: "Gnosis",
    137: "Polygon",
    250: "Fantom",
    324: "zkSync Era",
    1101: "Polygon zkEVM",
    5000: "Mantle",
    8453: "Base",
    34443: "Mode",
    42161: "Arbitrum",
    42170: "Arbitrum Nova",
    43114: "Avalanche",
    59144: "Linea",
    81457: "Blast",
    534352: "Scroll",
    7777777: "Zora",
})


def get_chain_name(chain_id: int) -> str:
    """Display name for a chain id; unknown ids render as 'Chain <id>'."""
    return CHAIN_ID_TO_NAME.get(chain_id) or f"Chain {chain_id}"
