"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from stockledger.infrastructure.storage.sqlite.inventory_store import (
    SQLiteInventorySession,
    SQLiteInventoryStore,
)

# Singleton instances
_catalog_store: SQLiteCatalogStore | None = None
_inventory_store: SQLiteInventoryStore | None = None


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


def reset_stores() -> None:
    """Drop the singletons so the next call rebinds to the current pool."""
    global _catalog_store, _inventory_store
    _catalog_store = None
    _inventory_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteCatalogStore",
    "SQLiteInventorySession",
    "SQLiteInventoryStore",
    # Factory functions
    "get_catalog_store",
    "get_inventory_store",
    "reset_stores",
]
