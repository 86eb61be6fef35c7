"""
Protocol Catalog - Exceptions.

Raised only while loading a catalog. Lookups never raise:
unknown addresses resolve to the `other` category.
"""

from datetime import datetime
from typing import Any, Optional


class CatalogError(Exception):
    """Base exception for catalog loading errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.utcnow()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class UnknownCategoryError(CatalogError):
    """A catalog entry names a category outside the fixed enumeration."""

    def __init__(self, category: str, address: Optional[str] = None) -> None:
        self.category = category
        super().__init__(
            f"Unknown protocol category: {category!r}",
            details={"category": category, "address": address},
        )


class DuplicateAddressError(CatalogError):
    """The same contract address is registered twice with different metadata."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(
            f"Conflicting catalog entries for address {address}",
            details={"address": address},
        )
