"""
Protocol Catalog.

Static registry mapping contract address -> {name, category, tags},
plus category labels and chain display names.

Usage:
    from protocol_catalog import get_default_catalog, ProtocolCategory

    catalog = get_default_catalog()
    meta = catalog.lookup("0x7777777f279eba3d3ad8f4e708545291a6fdba8b")
    assert meta.category is ProtocolCategory.NFT
"""

from .catalog import (
    DEFAULT_CATALOG_PATH,
    ProtocolCatalog,
    get_category_label,
    get_default_catalog,
    load_catalog,
    normalize_address,
)
from .chains import CHAIN_ID_TO_NAME, get_chain_name
from .exceptions import CatalogError, DuplicateAddressError, UnknownCategoryError
from .models import CATEGORY_LABELS, ProtocolCategory, ProtocolMetadata


__all__ = [
    "DEFAULT_CATALOG_PATH",
    "ProtocolCatalog",
    "get_category_label",
    "get_default_catalog",
    "load_catalog",
    "normalize_address",
    "CHAIN_ID_TO_NAME",
    "get_chain_name",
    "CatalogError",
    "DuplicateAddressError",
    "UnknownCategoryError",
    "CATEGORY_LABELS",
    "ProtocolCategory",
    "ProtocolMetadata",
]
