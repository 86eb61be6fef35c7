"""
Activity Insights - Data Models.

============================================================
CORE DATA STRUCTURES
============================================================

Per-request derived views of a wallet's protocol activity:
- ProtocolInteraction: wallet x protocol x chain aggregate
- ProtocolBreakdownEntry: interaction + category + days active
- TimelineEntry: single cataloged interaction, newest first
- FocusArea / CategoryScore: per-category engagement
- MonthlyActivity: YYYY-MM buckets
- Summary metrics: coverage, velocity, decay, momentum, streak
- ProtocolInsights: everything above, as one result
- UserActivity: snapshot consumed by eligibility criteria

Nothing here is persisted; every object is rebuilt on each
request. `to_dict()` produces the camelCase JSON shape.

============================================================
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from core.clock import parse_timestamp, to_iso8601
from protocol_catalog import ProtocolCategory


def _iso(value: Optional[datetime]) -> Optional[str]:
    return to_iso8601(value) if value else None


# =============================================================
# ENUMS
# =============================================================


class FocusStatus(str, Enum):
    """Engagement status of a protocol category."""
    STRONG = "strong"                    # >= strong threshold interactions
    NEEDS_ATTENTION = "needs_attention"  # Some activity
    MISSING = "missing"                  # No activity


class VelocityTrend(str, Enum):
    ACCELERATING = "accelerating"
    STEADY = "steady"
    COOLING = "cooling"


class DecayStatus(str, Enum):
    FRESH = "fresh"
    WARM = "warm"
    STALE = "stale"


class MomentumDirection(str, Enum):
    UP = "up"
    STEADY = "steady"
    DOWN = "down"


# =============================================================
# INTERACTIONS
# =============================================================


@dataclass
class ProtocolInteraction:
    """
    A wallet's aggregate interactions with one protocol contract on one chain.
    """
    protocol: str
    contract_address: str
    chain_id: int
    interaction_count: int = 0
    first_interaction: Optional[datetime] = None
    last_interaction: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.contract_address = (self.contract_address or "").strip().lower()
        if self.interaction_count < 0:
            self.interaction_count = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol": self.protocol,
            "contractAddress": self.contract_address,
            "chainId": self.chain_id,
            "interactionCount": self.interaction_count,
            "firstInteraction": _iso(self.first_interaction),
            "lastInteraction": _iso(self.last_interaction),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProtocolInteraction":
        """Accepts camelCase or snake_case keys; unparseable timestamps become None."""
        def _get(camel: str, snake: str, default: Any = None) -> Any:
            return data.get(camel, data.get(snake, default))

        def _time(camel: str, snake: str) -> Optional[datetime]:
            try:
                return parse_timestamp(_get(camel, snake))
            except ValueError:
                return None

        return cls(
            protocol=str(_get("protocol", "protocol", "")),
            contract_address=str(_get("contractAddress", "contract_address", "")),
            chain_id=int(_get("chainId", "chain_id", 0)),
            interaction_count=int(_get("interactionCount", "interaction_count", 0) or 0),
            first_interaction=_time("firstInteraction", "first_interaction"),
            last_interaction=_time("lastInteraction", "last_interaction"),
        )


@dataclass
class ProtocolBreakdownEntry:
    """Interaction enriched with category and active span."""
    protocol: str
    category: ProtocolCategory
    category_label: str
    chain_id: int
    chain_name: str
    interaction_count: int
    first_interaction: Optional[datetime] = None
    last_interaction: Optional[datetime] = None
    days_active: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol": self.protocol,
            "category": self.category.value,
            "categoryLabel": self.category_label,
            "chainId": self.chain_id,
            "chainName": self.chain_name,
            "interactionCount": self.interaction_count,
            "firstInteraction": _iso(self.first_interaction),
            "lastInteraction": _iso(self.last_interaction),
            "daysActive": self.days_active,
        }


@dataclass
class TimelineEntry:
    """One interaction with a cataloged protocol."""
    id: str
    tx_hash: str
    date: datetime
    protocol: str
    category: ProtocolCategory
    category_label: str
    chain_id: int
    chain_name: str
    description: str

    @property
    def month(self) -> str:
        """YYYY-MM bucket key."""
        return self.date.strftime("%Y-%m")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "txHash": self.tx_hash,
            "date": to_iso8601(self.date),
            "protocol": self.protocol,
            "category": self.category.value,
            "categoryLabel": self.category_label,
            "chainId": self.chain_id,
            "chainName": self.chain_name,
            "description": self.description,
        }


# =============================================================
# CATEGORY VIEWS
# =============================================================


@dataclass
class FocusArea:
    """Aggregate engagement for one protocol category."""
    category: ProtocolCategory
    category_label: str
    interactions: int
    unique_protocols: int
    score: int
    status: FocusStatus
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "categoryLabel": self.category_label,
            "interactions": self.interactions,
            "uniqueProtocols": self.unique_protocols,
            "score": self.score,
            "status": self.status.value,
            "recommendation": self.recommendation,
        }


@dataclass
class CategoryScore:
    category: ProtocolCategory
    category_label: str
    score: int
    interactions: int
    unique_protocols: int
    status: FocusStatus

    @classmethod
    def from_focus_area(cls, area: FocusArea) -> "CategoryScore":
        return cls(
            category=area.category,
            category_label=area.category_label,
            score=area.score,
            interactions=area.interactions,
            unique_protocols=area.unique_protocols,
            status=area.status,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "categoryLabel": self.category_label,
            "score": self.score,
            "interactions": self.interactions,
            "uniqueProtocols": self.unique_protocols,
            "status": self.status.value,
        }


@dataclass
class MonthlyActivity:
    month: str  # YYYY-MM
    interaction_count: int
    unique_protocols: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "interactionCount": self.interaction_count,
            "uniqueProtocols": self.unique_protocols,
        }


# =============================================================
# SUMMARY METRICS
# =============================================================


@dataclass
class CoverageMetrics:
    score: int
    covered_categories: List[str]
    total_categories: int
    missing_categories: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "coveredCategories": list(self.covered_categories),
            "totalCategories": self.total_categories,
            "missingCategories": list(self.missing_categories),
        }


@dataclass
class VelocityMetrics:
    current_avg_daily: float
    previous_avg_daily: float
    percent_change: float
    delta_interactions: int
    trend: VelocityTrend

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentAvgDaily": self.current_avg_daily,
            "previousAvgDaily": self.previous_avg_daily,
            "percentChange": self.percent_change,
            "deltaInteractions": self.delta_interactions,
            "trend": self.trend.value,
        }


@dataclass
class DecayMetrics:
    days_since_interaction: Optional[int]
    status: DecayStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daysSinceInteraction": self.days_since_interaction,
            "status": self.status.value,
        }


@dataclass
class MomentumMetrics:
    direction: MomentumDirection
    percent_change: float
    delta_interactions: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "percentChange": self.percent_change,
            "deltaInteractions": self.delta_interactions,
        }


@dataclass
class StreakMetrics:
    active_days: int
    last_active_date: Optional[str] = None  # YYYY-MM-DD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activeDays": self.active_days,
            "lastActiveDate": self.last_active_date,
        }


@dataclass
class DormantProtocol:
    protocol: str
    category_label: str
    days_since_interaction: Optional[int]
    last_interaction: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol": self.protocol,
            "categoryLabel": self.category_label,
            "daysSinceInteraction": self.days_since_interaction,
            "lastInteraction": _iso(self.last_interaction),
        }


@dataclass
class MostActiveCategory:
    category: ProtocolCategory
    label: str
    interaction_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "label": self.label,
            "interactionCount": self.interaction_count,
        }


@dataclass
class InsightsSummary:
    """Headline numbers for a wallet's protocol activity."""
    total_protocols: int
    active_categories: int
    new_protocols_last_30d: int
    avg_interactions_per_protocol: float
    engagement_score: int
    momentum: MomentumMetrics
    streak: StreakMetrics
    velocity: VelocityMetrics
    decay: DecayMetrics
    coverage: CoverageMetrics
    last_interaction: Optional[datetime] = None
    most_active_category: Optional[MostActiveCategory] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalProtocols": self.total_protocols,
            "activeCategories": self.active_categories,
            "newProtocolsLast30d": self.new_protocols_last_30d,
            "avgInteractionsPerProtocol": self.avg_interactions_per_protocol,
            "engagementScore": self.engagement_score,
            "momentum": self.momentum.to_dict(),
            "streak": self.streak.to_dict(),
            "velocity": self.velocity.to_dict(),
            "decay": self.decay.to_dict(),
            "coverage": self.coverage.to_dict(),
            "lastInteraction": _iso(self.last_interaction),
            "mostActiveCategory": (
                self.most_active_category.to_dict() if self.most_active_category else None
            ),
        }


@dataclass
class ProtocolInsights:
    """Complete protocol insights for one wallet."""
    address: str
    summary: InsightsSummary
    breakdown: List[ProtocolBreakdownEntry]
    timeline: List[TimelineEntry]
    focus_areas: List[FocusArea]
    category_scores: List[CategoryScore]
    monthly_activity: List[MonthlyActivity]
    dormant_protocols: List[DormantProtocol]
    generated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "summary": self.summary.to_dict(),
            "breakdown": [e.to_dict() for e in self.breakdown],
            "timeline": [e.to_dict() for e in self.timeline],
            "focusAreas": [a.to_dict() for a in self.focus_areas],
            "categoryScores": [c.to_dict() for c in self.category_scores],
            "monthlyActivity": [m.to_dict() for m in self.monthly_activity],
            "dormantProtocols": [d.to_dict() for d in self.dormant_protocols],
            "generatedAt": to_iso8601(self.generated_at),
        }


# =============================================================
# USER ACTIVITY SNAPSHOT
# =============================================================


@dataclass
class ChainActivity:
    chain_id: int
    chain_name: str
    transaction_count: int
    first_activity: Optional[datetime] = None
    last_activity: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "chainName": self.chain_name,
            "transactionCount": self.transaction_count,
            "firstActivity": _iso(self.first_activity),
            "lastActivity": _iso(self.last_activity),
        }


@dataclass
class NFTActivity:
    contract_address: str
    token_id: Optional[str]
    chain_id: int
    type: str = "mint"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contractAddress": self.contract_address,
            "tokenId": self.token_id,
            "chainId": self.chain_id,
            "type": self.type,
        }


@dataclass
class BridgeActivity:
    bridge: str
    from_chain: int
    to_chain: int = 0  # Destination is not derivable from the source-chain record
    count: int = 0
    last_bridge: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bridge": self.bridge,
            "fromChain": self.from_chain,
            "toChain": self.to_chain,
            "count": self.count,
            "lastBridge": _iso(self.last_bridge),
        }


@dataclass
class DexSwapActivity:
    dex: str
    chain_id: int
    count: int = 0
    last_swap: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dex": self.dex,
            "chainId": self.chain_id,
            "count": self.count,
            "lastSwap": _iso(self.last_swap),
        }


@dataclass
class UserActivity:
    """
    Aggregated activity snapshot for one wallet.

    Eligibility criteria are evaluated against this.
    """
    address: str
    chains: List[ChainActivity] = field(default_factory=list)
    protocols: List[ProtocolInteraction] = field(default_factory=list)
    nfts: List[NFTActivity] = field(default_factory=list)
    bridges: List[BridgeActivity] = field(default_factory=list)
    dex_swaps: List[DexSwapActivity] = field(default_factory=list)

    @classmethod
    def empty(cls, address: str) -> "UserActivity":
        return cls(address=address)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "chains": [c.to_dict() for c in self.chains],
            "protocols": [p.to_dict() for p in self.protocols],
            "nfts": [n.to_dict() for n in self.nfts],
            "bridges": [b.to_dict() for b in self.bridges],
            "dexSwaps": [d.to_dict() for d in self.dex_swaps],
        }
