"""Core interfaces (ports) for dependency injection."""

from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.core.interfaces.inventory_store import IInventorySession, IInventoryStore

__all__ = [
    "ICatalogStore",
    "IInventorySession",
    "IInventoryStore",
]
