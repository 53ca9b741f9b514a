"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

# Re-export schema functions
# Re-export all query functions
from finflex.store.queries import (
    get_transaction,
    insert_transaction,
    insert_transactions,
    load_profile,
    load_transactions,
    purge_all,
    replace_transaction,
    save_profile,
)
from finflex.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "get_transaction",
    "insert_transaction",
    "insert_transactions",
    "load_profile",
    "load_transactions",
    "purge_all",
    "replace_transaction",
    "save_profile",
]
