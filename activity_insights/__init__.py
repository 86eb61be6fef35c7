"""
Activity Insights.

============================================================
PROTOCOL ACTIVITY AGGREGATION FOR ONE WALLET
============================================================

Classifies a wallet's transactions against the protocol
catalog and derives:
- protocol breakdown, timeline, monthly activity
- per-category focus areas and scores
- coverage / velocity / decay / momentum / streak metrics
- the UserActivity snapshot used for eligibility checks

Pure and synchronous: no network, no storage. "Now" comes
from an injectable clock.

============================================================
USAGE
============================================================

```python
from activity_insights import ActivityInsightsEngine

engine = ActivityInsightsEngine()
interactions = engine.get_user_activity(address, chain_txs).protocols
insights = engine.get_insights(address, interactions, chain_txs)

print(insights.summary.engagement_score)
print([a.status.value for a in insights.focus_areas])
```

============================================================
"""

from .models import (
    FocusStatus,
    VelocityTrend,
    DecayStatus,
    MomentumDirection,
    ProtocolInteraction,
    ProtocolBreakdownEntry,
    TimelineEntry,
    FocusArea,
    CategoryScore,
    MonthlyActivity,
    CoverageMetrics,
    VelocityMetrics,
    DecayMetrics,
    MomentumMetrics,
    StreakMetrics,
    DormantProtocol,
    MostActiveCategory,
    InsightsSummary,
    ProtocolInsights,
    ChainActivity,
    NFTActivity,
    BridgeActivity,
    DexSwapActivity,
    UserActivity,
)
from .schemas import (
    ChainTransaction,
    NFTRecord,
    coerce_nfts,
    coerce_transactions,
    validate_nft,
    validate_transaction,
)
from .config import InsightsConfig, get_config, set_config, load_config
from .exceptions import ActivityInsightsError, ConfigurationError, InvalidRecordError
from .aggregator import (
    CATEGORY_RECOMMENDATIONS,
    build_protocol_breakdown,
    build_timeline,
    build_monthly_activity,
    build_focus_areas,
    focus_score,
    focus_status,
)
from .metrics import (
    calculate_coverage,
    find_dormant_protocols,
    calculate_velocity,
    calculate_decay,
    calculate_momentum,
    calculate_active_streak,
    build_category_scores,
    calculate_engagement_score,
    find_most_active_category,
)
from .activity import (
    analyze_chain_activity,
    detect_protocol_interactions,
    analyze_nft_activity,
    detect_bridge_activity,
    detect_dex_activity,
    aggregate_user_activity,
)
from .engine import ActivityInsightsEngine, build_protocol_insights


__all__ = [
    # Models
    "FocusStatus",
    "VelocityTrend",
    "DecayStatus",
    "MomentumDirection",
    "ProtocolInteraction",
    "ProtocolBreakdownEntry",
    "TimelineEntry",
    "FocusArea",
    "CategoryScore",
    "MonthlyActivity",
    "CoverageMetrics",
    "VelocityMetrics",
    "DecayMetrics",
    "MomentumMetrics",
    "StreakMetrics",
    "DormantProtocol",
    "MostActiveCategory",
    "InsightsSummary",
    "ProtocolInsights",
    "ChainActivity",
    "NFTActivity",
    "BridgeActivity",
    "DexSwapActivity",
    "UserActivity",
    # Schemas
    "ChainTransaction",
    "NFTRecord",
    "coerce_nfts",
    "coerce_transactions",
    "validate_nft",
    "validate_transaction",
    # Config
    "InsightsConfig",
    "get_config",
    "set_config",
    "load_config",
    # Exceptions
    "ActivityInsightsError",
    "ConfigurationError",
    "InvalidRecordError",
    # Aggregation
    "CATEGORY_RECOMMENDATIONS",
    "build_protocol_breakdown",
    "build_timeline",
    "build_monthly_activity",
    "build_focus_areas",
    "focus_score",
    "focus_status",
    # Metrics
    "calculate_coverage",
    "find_dormant_protocols",
    "calculate_velocity",
    "calculate_decay",
    "calculate_momentum",
    "calculate_active_streak",
    "build_category_scores",
    "calculate_engagement_score",
    "find_most_active_category",
    # Raw records
    "analyze_chain_activity",
    "detect_protocol_interactions",
    "analyze_nft_activity",
    "detect_bridge_activity",
    "detect_dex_activity",
    "aggregate_user_activity",
    # Engine
    "ActivityInsightsEngine",
    "build_protocol_insights",
]
