"""
Protocol Catalog - Registry.

============================================================
STATIC CONTRACT REGISTRY
============================================================

Maps lowercase contract addresses to ProtocolMetadata.

- Loaded once from YAML (embedded protocols.yaml by default)
- Immutable after construction (read-only mapping)
- Lookups are case-insensitive and never raise
- Unknown addresses resolve to ProtocolCategory.OTHER

============================================================
"""

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional
import logging

import yaml

from .exceptions import CatalogError, DuplicateAddressError, UnknownCategoryError
from .models import CATEGORY_LABELS, ProtocolCategory, ProtocolMetadata


logger = logging.getLogger(__name__)


DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "protocols.yaml"


def normalize_address(address: Optional[str]) -> str:
    """Lowercase, stripped address; empty string for None."""
    return (address or "").strip().lower()


def get_category_label(category: ProtocolCategory) -> str:
    """Fixed display label for a category."""
    return CATEGORY_LABELS.get(category, CATEGORY_LABELS[ProtocolCategory.OTHER])


class ProtocolCatalog:
    """
    Read-only registry of known protocol contracts.

    Usage:
        catalog = get_default_catalog()

        meta = catalog.lookup("0x68B3465833fb72A70ecDF485E0e4C7bD8665Fc45")
        print(meta.name, meta.category.value)      # Uniswap dex

        catalog.resolve_category("0xdead...")      # ProtocolCategory.OTHER
    """

    def __init__(self, entries: Mapping[str, ProtocolMetadata]) -> None:
        normalized: dict[str, ProtocolMetadata] = {}
        for address, metadata in entries.items():
            key = normalize_address(address)
            if not key:
                raise CatalogError("Catalog entry with empty address")
            existing = normalized.get(key)
            if existing is not None and existing != metadata:
                raise DuplicateAddressError(key)
            normalized[key] = metadata
        self._entries: Mapping[str, ProtocolMetadata] = MappingProxyType(normalized)

    # =========================================================
    # CONSTRUCTION
    # =========================================================

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "ProtocolCatalog":
        """
        Build a catalog from `{address, name, category, tags}` records.

        Raises:
            CatalogError: On missing fields, unknown categories, or
                conflicting duplicate addresses
        """
        entries: dict[str, ProtocolMetadata] = {}
        for index, record in enumerate(records):
            address = normalize_address(record.get("address"))
            name = record.get("name")
            if not address or not name:
                raise CatalogError(
                    f"Catalog record {index} needs both address and name",
                    details={"index": index},
                )
            try:
                metadata = ProtocolMetadata.create(
                    name=str(name),
                    category=record.get("category", ProtocolCategory.OTHER.value),
                    tags=record.get("tags") or (),
                )
            except ValueError:
                raise UnknownCategoryError(str(record.get("category")), address)

            existing = entries.get(address)
            if existing is not None and existing != metadata:
                raise DuplicateAddressError(address)
            entries[address] = metadata
        return cls(entries)

    @classmethod
    def from_yaml(cls, path: Path) -> "ProtocolCatalog":
        """Load a catalog file with a top-level `protocols:` list."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        records = data.get("protocols")
        if not isinstance(records, list):
            raise CatalogError(
                f"Catalog file {path} has no 'protocols' list",
                details={"path": str(path)},
            )
        catalog = cls.from_records(records)
        logger.info(f"Loaded {len(catalog)} protocol contracts from {path}")
        return catalog

    # =========================================================
    # LOOKUPS
    # =========================================================

    def lookup(self, address: Optional[str]) -> Optional[ProtocolMetadata]:
        """Metadata for a contract address, or None if uncataloged."""
        key = normalize_address(address)
        if not key:
            return None
        return self._entries.get(key)

    def resolve_category(self, address: Optional[str]) -> ProtocolCategory:
        """Category for an address; uncataloged addresses are OTHER."""
        metadata = self.lookup(address)
        return metadata.category if metadata else ProtocolCategory.OTHER

    @staticmethod
    def categories() -> list[ProtocolCategory]:
        """Every category, in canonical order."""
        return list(ProtocolCategory)

    @staticmethod
    def get_category_label(category: ProtocolCategory) -> str:
        return get_category_label(category)

    def protocols_in_category(self, category: ProtocolCategory) -> list[str]:
        """Distinct protocol names in a category, in catalog order."""
        names: list[str] = []
        for metadata in self._entries.values():
            if metadata.category == category and metadata.name not in names:
                names.append(metadata.name)
        return names

    def protocol_names(self) -> list[str]:
        """Distinct protocol names, in catalog order."""
        return list(dict.fromkeys(m.name for m in self._entries.values()))

    # =========================================================
    # MAPPING PROTOCOL
    # =========================================================

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self.lookup(address) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> Iterable[tuple[str, ProtocolMetadata]]:
        return self._entries.items()

    def to_dict(self) -> dict[str, Any]:
        return {address: meta.to_dict() for address, meta in self._entries.items()}


# =============================================================
# DEFAULT CATALOG
# =============================================================


@lru_cache(maxsize=1)
def get_default_catalog() -> ProtocolCatalog:
    """The embedded catalog, loaded on first use and shared afterwards."""
    return ProtocolCatalog.from_yaml(DEFAULT_CATALOG_PATH)


def load_catalog(path: Optional[Path] = None) -> ProtocolCatalog:
    """
    Load a catalog from file or return the embedded default.

    Args:
        path: Optional path to a catalog YAML file

    Returns:
        ProtocolCatalog instance
    """
    if path is not None:
        return ProtocolCatalog.from_yaml(Path(path))
    return get_default_catalog()
