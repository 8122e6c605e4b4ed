"""
Database connection management.

Provides SQLite connection for calculator state persistence.
"""

import os
import sqlite3
from pathlib import Path
from typing import Optional

DEFAULT_DB_PATH = ".hosting-calc.db"
DB_PATH_ENV_VAR = "HOSTING_CALC_DB"


def resolve_db_path(db_path: Optional[str] = None) -> str:
    """Pick the database file: explicit path, then environment, then default."""
    return db_path or os.environ.get(DB_PATH_ENV_VAR) or DEFAULT_DB_PATH


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Create and return a SQLite database connection.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLite connection
    """
    path = Path(db_path)
    conn = sqlite3.connect(str(path))
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
