"""sqlite schema for the profile and the transaction log, with in-place migrations."""

import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


def get_xdg_data_home() -> Path:
    """Base directory for user data ($XDG_DATA_HOME or ~/.local/share)."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Where the finflex database lives by default."""
    return get_xdg_data_home() / "finflex" / "finflex.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Whether 'finflex init' has created the database yet."""
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Safe to run on an existing database: tables are created only if missing
    and older databases are migrated in place.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        # Single-row table: the profile is one record per database
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS profile (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                name TEXT NOT NULL DEFAULT '',
                monthly_income REAL NOT NULL,
                fixed_costs REAL NOT NULL,
                yearly_savings_goal REAL NOT NULL,
                target_monthly_contribution REAL NOT NULL,
                savings_ratio REAL NOT NULL,
                risk_appetite TEXT NOT NULL DEFAULT 'medium',
                has_onboarded INTEGER NOT NULL DEFAULT 0
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                amount REAL NOT NULL,
                category TEXT NOT NULL,
                is_fixed INTEGER NOT NULL DEFAULT 0,
                timestamp INTEGER NOT NULL,
                note TEXT,
                created_at TEXT DEFAULT (datetime('now'))
            )
        """
        )

        # Databases created before note/created_at existed
        cursor.execute("PRAGMA table_info(transactions)")
        columns = [row[1] for row in cursor.fetchall()]

        if "note" not in columns:
            logger.debug("Adding 'note' column to transactions")
            cursor.execute("ALTER TABLE transactions ADD COLUMN note TEXT")

        if "created_at" not in columns:
            logger.debug("Adding 'created_at' column to transactions")
            cursor.execute("ALTER TABLE transactions ADD COLUMN created_at TEXT")
            cursor.execute("UPDATE transactions SET created_at = datetime('now') WHERE created_at IS NULL")

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_timestamp ON transactions(timestamp)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_category_timestamp ON transactions(category, timestamp)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
