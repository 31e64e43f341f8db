"""
Service factory functions for dependency injection.

This module wires the core ledger service for use cases.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from stockledger.core.services.stock_ledger import StockLedger

# Singleton service instances
_stock_ledger: StockLedger | None = None


def get_stock_ledger() -> StockLedger:
    """
    Get or create the StockLedger instance.

    The ledger holds no state of its own; every call works against the
    session it is handed, so one instance serves the whole process.
    """
    global _stock_ledger

    if _stock_ledger is None:
        _stock_ledger = StockLedger()
    return _stock_ledger


def reset_services() -> None:
    """Reset service singletons (for testing)."""
    global _stock_ledger
    _stock_ledger = None
