"""
File: database/create_tables.py
Created: 2026-10-12
Last Modified: 2026-10-16
"""

import logging
from pathlib import Path
from typing import Union

from .common import LOCAL_DB_PATH, connect

log = logging.getLogger(__name__)


async def init_local_database(db_path: Union[str, Path] = LOCAL_DB_PATH) -> None:
    """
    Initialize the local SQLite database with required tables.

    Safe to call on every start: tables and indexes are only created when
    missing and existing rows are never touched.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async with connect(db_path) as conn:
        # Contacts table (true_id is the source's stable identifier)
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS contacts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                true_id TEXT UNIQUE,
                name TEXT,
                company TEXT,
                jobTitle TEXT,
                imageAvailable INTEGER
            )
        """)

        # Tags table
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS tags (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE
            )
        """)

        # Many-to-many link between contacts and tags
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS contact_tags (
                contact_id INTEGER NOT NULL,
                tag_id INTEGER NOT NULL,
                PRIMARY KEY (contact_id, tag_id),
                FOREIGN KEY (contact_id) REFERENCES contacts(id) ON DELETE CASCADE,
                FOREIGN KEY (tag_id) REFERENCES tags(id) ON DELETE CASCADE
            )
        """)

        # Lookups by tag (search, tag counts)
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_contact_tags_tag ON contact_tags(tag_id)")

        log.info(f"Local database initialized at {db_path}")


async def reset_local_database(db_path: Union[str, Path] = LOCAL_DB_PATH) -> None:
    """Drop every table and declare the schema again. Destroys all stored data."""
    async with connect(db_path) as conn:
        await conn.execute("DROP TABLE IF EXISTS contact_tags")
        await conn.execute("DROP TABLE IF EXISTS tags")
        await conn.execute("DROP TABLE IF EXISTS contacts")
        log.warning(f"Dropped all tables in {db_path}")

    await init_local_database(db_path)
