"""
Eligibility - Data Models.

============================================================
CRITERIA AND REPORTS
============================================================

A Criterion is a tagged variant: `kind` selects the handler,
`params` carries the kind-specific arguments.

    kind                   params
    ---------------------  ------------------------------
    chain                  chain
    chain_tx_count         chain, operator, value
    protocol               target
    nft_platform           target
    bridge_to              target
    bridge_count           operator, value
    cross_chain_tx         operator, value
    chain_protocol_count   chain, operator, value
    chain_balance          chain
    protocol_mention       target
    custom                 name, plus handler-specific keys

============================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


# =============================================================
# ENUMS
# =============================================================


class CriterionKind(str, Enum):
    """Kinds of eligibility criteria."""
    CHAIN = "chain"
    CHAIN_TX_COUNT = "chain_tx_count"
    PROTOCOL = "protocol"
    NFT_PLATFORM = "nft_platform"
    BRIDGE_TO = "bridge_to"
    BRIDGE_COUNT = "bridge_count"
    CROSS_CHAIN_TX = "cross_chain_tx"
    CHAIN_PROTOCOL_COUNT = "chain_protocol_count"
    CHAIN_BALANCE = "chain_balance"
    PROTOCOL_MENTION = "protocol_mention"
    CUSTOM = "custom"

    @property
    def is_numeric(self) -> bool:
        """Whether criteria of this kind compare a count with operator/value."""
        return self in NUMERIC_KINDS


NUMERIC_KINDS = frozenset({
    CriterionKind.CHAIN_TX_COUNT,
    CriterionKind.BRIDGE_COUNT,
    CriterionKind.CROSS_CHAIN_TX,
    CriterionKind.CHAIN_PROTOCOL_COUNT,
})


class ComparisonOperator(str, Enum):
    """Comparison operators, in the order they are matched when parsing."""
    GTE = ">="
    LTE = "<="
    GT = ">"
    LT = "<"
    EQ = "="

    def compare(self, actual: float, expected: float) -> bool:
        if self is ComparisonOperator.GTE:
            return actual >= expected
        if self is ComparisonOperator.LTE:
            return actual <= expected
        if self is ComparisonOperator.GT:
            return actual > expected
        if self is ComparisonOperator.LT:
            return actual < expected
        return actual == expected


class ProjectStatus(str, Enum):
    """Airdrop status of a tracked project."""
    CONFIRMED = "confirmed"
    RUMORED = "rumored"
    SPECULATIVE = "speculative"
    EXPIRED = "expired"


# =============================================================
# CRITERIA
# =============================================================


@dataclass(frozen=True)
class Criterion:
    """
    One declarative eligibility criterion.

    Params are frozen on construction.
    """
    kind: CriterionKind
    params: Mapping[str, Any] = field(default_factory=dict)
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", CriterionKind(self.kind))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def create(cls, kind: CriterionKind, description: str = "", **params: Any) -> "Criterion":
        return cls(kind=kind, params=params, description=description)

    @property
    def operator(self) -> ComparisonOperator:
        return ComparisonOperator(self.params.get("operator", ComparisonOperator.EQ))

    @property
    def value(self) -> Optional[int]:
        return self.params.get("value")

    @property
    def target(self) -> str:
        return str(self.params.get("target", "")).lower()

    @property
    def chain(self) -> str:
        return str(self.params.get("chain", "")).lower()

    def to_dict(self) -> Dict[str, Any]:
        params = dict(self.params)
        if isinstance(params.get("operator"), ComparisonOperator):
            params["operator"] = params["operator"].value
        return {
            "kind": self.kind.value,
            "params": params,
            "description": self.description,
        }


@dataclass
class CriterionResult:
    description: str
    met: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "met": self.met}


# =============================================================
# PROJECTS
# =============================================================


@dataclass
class Project:
    """A tracked airdrop project and its eligibility criteria."""
    project_id: str
    name: str
    status: ProjectStatus = ProjectStatus.SPECULATIVE
    criteria: List[Criterion] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "name": self.name,
            "status": self.status.value,
            "criteria": [c.to_dict() for c in self.criteria],
        }


@dataclass
class EligibilityReport:
    """Eligibility of one wallet for one project."""
    project_id: str
    name: str
    status: ProjectStatus
    score: int
    criteria: List[CriterionResult] = field(default_factory=list)

    @property
    def met_count(self) -> int:
        return sum(1 for result in self.criteria if result.met)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "name": self.name,
            "status": self.status.value,
            "score": self.score,
            "criteria": [c.to_dict() for c in self.criteria],
        }
