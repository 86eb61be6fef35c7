"""
Protocol Catalog - Data Models.

============================================================
CORE DATA STRUCTURES
============================================================

- ProtocolCategory: fixed enumeration of protocol categories
- ProtocolMetadata: immutable name / category / tags record

The declaration order of ProtocolCategory is the canonical
order for every per-category output (focus areas, scores).

============================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


# =============================================================
# ENUMS
# =============================================================


class ProtocolCategory(str, Enum):
    """Category of an on-chain protocol."""
    DEX = "dex"
    BRIDGE = "bridge"
    DEFI = "defi"
    RESTAKING = "restaking"
    NFT = "nft"
    INFRASTRUCTURE = "infrastructure"
    TOOLING = "tooling"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Human-readable label."""
        return CATEGORY_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> "ProtocolCategory":
        """
        Parse a category from an enum or case-insensitive string.

        Raises:
            ValueError: If the value is not a known category
        """
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


CATEGORY_LABELS: dict[ProtocolCategory, str] = {
    ProtocolCategory.DEX: "DEX",
    ProtocolCategory.BRIDGE: "Bridge",
    ProtocolCategory.DEFI: "DeFi",
    ProtocolCategory.RESTAKING: "Restaking",
    ProtocolCategory.NFT: "NFT",
    ProtocolCategory.INFRASTRUCTURE: "Infrastructure",
    ProtocolCategory.TOOLING: "Tooling",
    ProtocolCategory.OTHER: "Other",
}


# =============================================================
# METADATA
# =============================================================


@dataclass(frozen=True)
class ProtocolMetadata:
    """
    Static metadata for a known protocol contract.

    Instances are shared by every lookup and never mutated.
    """
    name: str
    category: ProtocolCategory
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        name: str,
        category: Any,
        tags: Iterable[str] = (),
    ) -> "ProtocolMetadata":
        return cls(
            name=name.strip(),
            category=ProtocolCategory.parse(category),
            tags=frozenset(t.strip().lower() for t in tags if t and t.strip()),
        )

    @property
    def category_label(self) -> str:
        return self.category.label

    def has_tag(self, tag: str) -> bool:
        return tag.lower() in self.tags

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category.value,
            "categoryLabel": self.category_label,
            "tags": sorted(self.tags),
        }
