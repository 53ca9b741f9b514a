"""Database query functions.

These are the load/save operations for the profile and the transaction log.
The metrics engine never calls them; commands load data here and pass it in.
"""

import logging
import sqlite3
from dataclasses import replace
from pathlib import Path
from typing import Any

from finflex.domain.entry import parse_stored_category
from finflex.domain.models import Amount, Category, Profile, RiskAppetite, Timestamp, Transaction, category_label
from finflex.store.schema import get_db_path

logger = logging.getLogger(__name__)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    is_fixed = bool(row["is_fixed"])
    return Transaction(
        id=row["id"],
        amount=Amount(row["amount"]),
        category=parse_stored_category(row["category"], is_fixed),
        is_fixed=is_fixed,
        timestamp=Timestamp(row["timestamp"]),
        note=row["note"],
    )


def load_profile(db_path: Path | None = None) -> Profile | None:
    """Load the stored profile.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Profile, or None if onboarding has not happened yet.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM profile WHERE id = 1")
        row = cursor.fetchone()
        if row is None:
            return None
        return Profile(
            monthly_income=Amount(row["monthly_income"]),
            fixed_costs=Amount(row["fixed_costs"]),
            yearly_savings_goal=Amount(row["yearly_savings_goal"]),
            target_monthly_contribution=Amount(row["target_monthly_contribution"]),
            savings_ratio=row["savings_ratio"],
            name=row["name"],
            risk_appetite=RiskAppetite(row["risk_appetite"]),
            has_onboarded=bool(row["has_onboarded"]),
        )


def save_profile(profile: Profile, db_path: Path | None = None) -> None:
    """Insert or replace the stored profile.

    Args:
        profile: Profile to store.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT OR REPLACE INTO profile (
                    id, name, monthly_income, fixed_costs, yearly_savings_goal,
                    target_monthly_contribution, savings_ratio, risk_appetite, has_onboarded
                ) VALUES (1, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    profile.name,
                    profile.monthly_income,
                    profile.fixed_costs,
                    profile.yearly_savings_goal,
                    profile.target_monthly_contribution,
                    profile.savings_ratio,
                    profile.risk_appetite.value,
                    int(profile.has_onboarded),
                ),
            )
            conn.commit()
            logger.debug("Saved profile for '%s'", profile.name)
        except sqlite3.Error:
            conn.rollback()
            raise


def insert_transaction(
    amount: Amount,
    category: Category,
    is_fixed: bool,
    timestamp: Timestamp,
    note: str | None = None,
    db_path: Path | None = None,
) -> Transaction:
    """Insert a new transaction and return it with its assigned ID.

    Args:
        amount: Positive amount spent.
        category: Spend category or bill label.
        is_fixed: Whether this is a fixed bill.
        timestamp: Epoch milliseconds the entry is logged against.
        note: Optional free-text note.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The stored Transaction.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO transactions (amount, category, is_fixed, timestamp, note) VALUES (?, ?, ?, ?, ?)",
                (amount, category_label(category), int(is_fixed), timestamp, note),
            )
            conn.commit()
            txn_id = cursor.lastrowid
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.debug("Inserted transaction %s", txn_id)
    return Transaction(
        id=int(txn_id or 0),
        amount=amount,
        category=category,
        is_fixed=is_fixed,
        timestamp=timestamp,
        note=note,
    )


def insert_transactions(pending: list[Transaction], db_path: Path | None = None) -> list[Transaction]:
    """Insert several transactions in a single commit.

    Either every entry is stored or, on error, none is. The ids of the
    pending entries are ignored.

    Args:
        pending: Entries to store.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The stored Transactions with their assigned IDs, in input order.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    stored: list[Transaction] = []
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            for txn in pending:
                cursor.execute(
                    "INSERT INTO transactions (amount, category, is_fixed, timestamp, note) VALUES (?, ?, ?, ?, ?)",
                    (txn.amount, category_label(txn.category), int(txn.is_fixed), txn.timestamp, txn.note),
                )
                stored.append(replace(txn, id=int(cursor.lastrowid or 0)))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.debug("Inserted %d transactions", len(stored))
    return stored


def replace_transaction(transaction: Transaction, db_path: Path | None = None) -> bool:
    """Replace a stored transaction in full, keeping its ID.

    Args:
        transaction: New contents; its id selects the row to replace.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a row was replaced, False if the ID does not exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                UPDATE transactions
                SET amount = ?, category = ?, is_fixed = ?, timestamp = ?, note = ?
                WHERE id = ?
                """,
                (
                    transaction.amount,
                    transaction.label,
                    int(transaction.is_fixed),
                    transaction.timestamp,
                    transaction.note,
                    transaction.id,
                ),
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def get_transaction(txn_id: int, db_path: Path | None = None) -> Transaction | None:
    """Get one transaction by ID.

    Args:
        txn_id: Transaction ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Transaction, or None if not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT id, amount, category, is_fixed, timestamp, note FROM transactions WHERE id = ?",
            (txn_id,),
        )
        row = cursor.fetchone()
        return _row_to_transaction(row) if row else None


def load_transactions(db_path: Path | None = None, limit: int | None = None) -> list[Transaction]:
    """Load the transaction log, newest first.

    Args:
        db_path: Path to the database file. If None, uses default location.
        limit: Maximum number of transactions to return. If None, returns all.

    Returns:
        List of transactions ordered by timestamp descending.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = "SELECT id, amount, category, is_fixed, timestamp, note FROM transactions ORDER BY timestamp DESC, id DESC"
        params: list[Any] = []

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        cursor.execute(query, params)
        return [_row_to_transaction(row) for row in cursor.fetchall()]


def purge_all(db_path: Path | None = None) -> None:
    """Delete the profile and every transaction.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM transactions")
            cursor.execute("DELETE FROM profile")
            conn.commit()
            logger.info("Purged profile and transaction log")
        except sqlite3.Error:
            conn.rollback()
            raise
