"""
Tests for raw record validation and the user activity snapshot.

============================================================
PURPOSE
============================================================
Verify that:
1. Malformed provider records are skipped, not fatal
2. Only cataloged contracts produce protocol interactions
3. Bridge and DEX views derive from interaction categories
4. Chain and NFT views tolerate odd chain keys

============================================================
"""

from datetime import timedelta

import pytest

from activity_insights import (
    ChainTransaction,
    InvalidRecordError,
    ProtocolInteraction,
    aggregate_user_activity,
    analyze_chain_activity,
    analyze_nft_activity,
    coerce_transactions,
    detect_bridge_activity,
    detect_dex_activity,
    detect_protocol_interactions,
    validate_nft,
    validate_transaction,
)

from .conftest import EIGENLAYER, NOW, STARGATE, UNISWAP, ZORA, make_tx


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def chain_nfts():
    """NFT holdings keyed by chain id, with one unusable key."""
    return {
        "8453": [
            {"contract_address": "0xABCDEF", "token_id": 1},
            {"token_id": 2},
        ],
        "mainnet": [{"contract_address": "0x1", "token_id": "9"}],
    }


# ============================================================
# SCHEMA TESTS
# ============================================================

class TestRecordValidation:
    """Tests for provider record schemas."""

    def test_addresses_are_lowercased(self):
        tx = validate_transaction(make_tx("0x1", ZORA.upper().replace("0X", "0x"), 1))
        assert tx.to_address == ZORA
        assert tx.from_address == "0xwallet"

    def test_signed_at_is_parsed(self):
        tx = validate_transaction(make_tx("0x1", ZORA, 1))
        assert tx.block_signed_at == NOW - timedelta(days=1)

    def test_missing_hash_raises(self):
        with pytest.raises(InvalidRecordError):
            validate_transaction({"to_address": ZORA})

    def test_bad_timestamp_raises(self):
        with pytest.raises(InvalidRecordError):
            validate_transaction({"tx_hash": "0x1", "block_signed_at": "yesterday"})

    def test_typed_records_pass_through(self):
        tx = ChainTransaction(tx_hash="0x1")
        assert validate_transaction(tx) is tx

    def test_coerce_skips_malformed(self):
        records = [make_tx("0x1", ZORA, 1), {"to_address": ZORA}, make_tx("0x2", ZORA, 2)]
        assert [tx.tx_hash for tx in coerce_transactions(records)] == ["0x1", "0x2"]

    def test_nft_token_id_is_string(self):
        nft = validate_nft({"contract_address": "0xABC", "token_id": 7})
        assert nft.contract_address == "0xabc"
        assert nft.token_id == "7"


class TestProtocolInteractionFromDict:
    """Tests for interaction deserialization."""

    def test_camel_case(self):
        interaction = ProtocolInteraction.from_dict({
            "protocol": "Zora",
            "contractAddress": ZORA.upper().replace("0X", "0x"),
            "chainId": 8453,
            "interactionCount": 3,
            "firstInteraction": "2024-06-01T00:00:00Z",
            "lastInteraction": 1718409600000,
        })
        assert interaction.contract_address == ZORA
        assert interaction.interaction_count == 3
        assert interaction.first_interaction.isoformat() == "2024-06-01T00:00:00+00:00"
        assert interaction.last_interaction.isoformat() == "2024-06-15T00:00:00+00:00"

    def test_unparseable_timestamp_becomes_none(self):
        interaction = ProtocolInteraction.from_dict({
            "protocol": "Zora",
            "contract_address": ZORA,
            "chain_id": 8453,
            "first_interaction": "garbage",
        })
        assert interaction.first_interaction is None


# ============================================================
# INTERACTION DETECTION TESTS
# ============================================================

class TestDetectProtocolInteractions:
    """Tests for protocol interaction detection."""

    def test_only_cataloged_contracts(self, chain_transactions):
        interactions = detect_protocol_interactions(chain_transactions)
        assert [i.protocol for i in interactions] == ["Zora", "Uniswap", "Stargate", "EigenLayer"]

    def test_repeat_interactions_aggregate(self):
        transactions = {8453: [
            make_tx("0x1", UNISWAP, 10),
            make_tx("0x2", UNISWAP, 2),
            make_tx("0x3", UNISWAP, 5),
        ]}
        [interaction] = detect_protocol_interactions(transactions)
        assert interaction.interaction_count == 3
        assert interaction.first_interaction == NOW - timedelta(days=10)
        assert interaction.last_interaction == NOW - timedelta(days=2)

    def test_same_protocol_on_two_chains(self):
        transactions = {
            "8453": [make_tx("0x1", UNISWAP, 1)],
            "1": [make_tx("0x2", UNISWAP, 1)],
        }
        interactions = detect_protocol_interactions(transactions)
        assert [i.chain_id for i in interactions] == [8453, 1]

    def test_missing_signed_at(self):
        transactions = {"1": [{"tx_hash": "0x1", "to_address": ZORA}]}
        [interaction] = detect_protocol_interactions(transactions)
        assert interaction.interaction_count == 1
        assert interaction.first_interaction is None

    def test_empty_input(self):
        assert detect_protocol_interactions({}) == []


class TestChainAndNftActivity:
    """Tests for per-chain and NFT views."""

    def test_chain_activity(self, chain_transactions):
        chains = analyze_chain_activity(chain_transactions)
        assert [(c.chain_name, c.transaction_count) for c in chains] == [
            ("Base", 3),
            ("Ethereum", 2),
        ]
        assert chains[1].first_activity == NOW - timedelta(days=100)
        assert chains[1].last_activity == NOW - timedelta(days=40)

    def test_empty_and_invalid_chains_omitted(self):
        chains = analyze_chain_activity({"10": [], "zk": [make_tx("0x1", ZORA, 1)]})
        assert chains == []

    def test_nft_activity(self, chain_nfts):
        [nft] = analyze_nft_activity(chain_nfts)
        assert nft.contract_address == "0xabcdef"
        assert nft.token_id == "1"
        assert nft.chain_id == 8453
        assert nft.type == "mint"


class TestBridgeAndDexActivity:
    """Tests for category-derived views."""

    def test_bridges(self, chain_transactions):
        interactions = detect_protocol_interactions(chain_transactions)
        [bridge] = detect_bridge_activity(interactions)
        assert bridge.bridge == "Stargate"
        assert bridge.from_chain == 1
        assert bridge.to_chain == 0
        assert bridge.count == 1

    def test_bridge_counts_sum_across_chains(self):
        interactions = [
            ProtocolInteraction("Stargate", STARGATE, 1, 2, last_interaction=NOW - timedelta(days=9)),
            ProtocolInteraction("Stargate", STARGATE, 8453, 3, last_interaction=NOW - timedelta(days=4)),
        ]
        [bridge] = detect_bridge_activity(interactions)
        assert bridge.count == 5
        assert bridge.last_bridge == NOW - timedelta(days=4)

    def test_dexes_per_chain(self):
        interactions = [
            ProtocolInteraction("Uniswap", UNISWAP, 1, 2),
            ProtocolInteraction("Uniswap", UNISWAP, 8453, 3),
            ProtocolInteraction("EigenLayer", EIGENLAYER, 1, 1),
        ]
        swaps = detect_dex_activity(interactions)
        assert [(s.dex, s.chain_id, s.count) for s in swaps] == [
            ("Uniswap", 1, 2),
            ("Uniswap", 8453, 3),
        ]


class TestAggregateUserActivity:
    """Tests for the full snapshot."""

    def test_snapshot(self, chain_transactions, chain_nfts):
        activity = aggregate_user_activity("0xwallet", chain_transactions, chain_nfts)

        assert activity.address == "0xwallet"
        assert len(activity.chains) == 2
        assert len(activity.protocols) == 4
        assert len(activity.nfts) == 1
        assert [b.bridge for b in activity.bridges] == ["Stargate"]
        assert [d.dex for d in activity.dex_swaps] == ["Uniswap"]

    def test_to_dict_shape(self, chain_transactions):
        data = aggregate_user_activity("0xwallet", chain_transactions).to_dict()
        assert set(data) == {"address", "chains", "protocols", "nfts", "bridges", "dexSwaps"}
        assert data["protocols"][0]["contractAddress"] == ZORA
