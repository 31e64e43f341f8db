"""Stock Ledger - inventory ledger and valuation engine for multi-branch back offices."""

__version__ = "1.0.0"
