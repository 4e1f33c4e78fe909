"""
Common database constants and utilities

File: database/common.py
Created: 2026-10-12
Last Modified: 2026-10-15
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Union

import aiosqlite

DATA_DIR = Path(__file__).parent.parent.parent / "data"
LOCAL_DB_PATH = DATA_DIR / "contacts.db"

# SQLite has a limit of ~999 variables per statement
MAX_QUERY_VARIABLES = 500


@asynccontextmanager
async def connect(db_path: Union[str, Path] = LOCAL_DB_PATH) -> AsyncIterator[aiosqlite.Connection]:
    """
    Open the local database with foreign keys enforced.

    The connection runs in autocommit mode; callers that need a unit of work
    issue BEGIN/COMMIT themselves.
    """
    async with aiosqlite.connect(db_path, isolation_level=None) as conn:
        await conn.execute("PRAGMA foreign_keys = ON")
        yield conn


__all__ = [
    "DATA_DIR",
    "LOCAL_DB_PATH",
    "MAX_QUERY_VARIABLES",
    "connect",
]
