"""
Contact row operations.

File: database/contacts.py
Created: 2026-10-12
Last Modified: 2026-10-17
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import aiosqlite

from ..models import DeviceContact, StoredContact
from .common import LOCAL_DB_PATH, MAX_QUERY_VARIABLES, connect

log = logging.getLogger(__name__)


async def get_stored_contacts(
    true_ids: List[str],
    db_path: Union[str, Path] = LOCAL_DB_PATH,
) -> Dict[str, StoredContact]:
    """
    Get stored contacts for multiple external identifiers.

    Args:
        true_ids: External identifiers to look up
        db_path: Local database path

    Returns:
        Dict mapping true_id to StoredContact (only includes found entries)
    """
    if not true_ids:
        return {}

    results: Dict[str, StoredContact] = {}

    async with connect(db_path) as conn:
        for i in range(0, len(true_ids), MAX_QUERY_VARIABLES):
            batch = true_ids[i : i + MAX_QUERY_VARIABLES]
            placeholders = ",".join("?" * len(batch))

            async with conn.execute(
                f"""
                SELECT id, true_id, name, company, jobTitle, imageAvailable
                FROM contacts
                WHERE true_id IN ({placeholders})
                """,
                batch,
            ) as cursor:
                columns = [description[0] for description in cursor.description]
                async for row in cursor:
                    stored = StoredContact.from_db_row(dict(zip(columns, row)))
                    results[stored.true_id] = stored

    return results


async def upsert_contact(conn: aiosqlite.Connection, contact: DeviceContact) -> None:
    """
    Insert a contact, or overwrite the tracked fields of the existing row.

    The existing row keeps its internal id so its tag links stay valid.
    """
    if not contact.true_id:
        return

    fields = contact.normalized()
    await conn.execute(
        """
        INSERT INTO contacts (true_id, name, company, jobTitle, imageAvailable)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(true_id) DO UPDATE SET
            name = excluded.name,
            company = excluded.company,
            jobTitle = excluded.jobTitle,
            imageAvailable = excluded.imageAvailable
        """,
        (
            contact.true_id,
            fields["name"],
            fields["company"],
            fields["job_title"],
            1 if fields["image_available"] else 0,
        ),
    )


async def get_contact_db_id(conn: aiosqlite.Connection, true_id: Optional[str]) -> Optional[int]:
    """Resolve an external identifier to the internal contact id."""
    if not true_id:
        return None

    async with conn.execute(
        "SELECT id FROM contacts WHERE true_id = ? LIMIT 1",
        (true_id,),
    ) as cursor:
        row = await cursor.fetchone()
        return row[0] if row else None
