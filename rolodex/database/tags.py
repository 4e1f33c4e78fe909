"""
Tag and link operations, and the single unit of work that persists an import.

File: database/tags.py
Created: 2026-10-12
Last Modified: 2026-10-18
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import aiosqlite

from ..models import DeviceContact, TagAssignment, WriteSummary
from .common import LOCAL_DB_PATH, connect
from .contacts import get_contact_db_id, upsert_contact

log = logging.getLogger(__name__)


async def get_all_tags(db_path: Union[str, Path] = LOCAL_DB_PATH) -> List[str]:
    """Every tag name, in creation order."""
    async with connect(db_path) as conn:
        async with conn.execute("SELECT name FROM tags ORDER BY id ASC") as cursor:
            return [row[0] async for row in cursor]


async def upsert_tag(conn: aiosqlite.Connection, tag_name: str) -> Optional[int]:
    """
    Resolve a tag name to its id, creating the tag if needed.

    Args:
        conn: Open connection (inside the caller's transaction)
        tag_name: Tag name; surrounding whitespace is trimmed

    Returns:
        Tag id, or None for an empty name
    """
    tag_name = tag_name.strip()
    if not tag_name:
        return None

    async with conn.execute(
        "SELECT id FROM tags WHERE name = ? LIMIT 1",
        (tag_name,),
    ) as cursor:
        row = await cursor.fetchone()
        if row:
            return row[0]

    cursor = await conn.execute("INSERT INTO tags (name) VALUES (?)", (tag_name,))
    return cursor.lastrowid


async def link_contact_to_tag(
    conn: aiosqlite.Connection,
    contact_id: Optional[int],
    tag_id: Optional[int],
) -> bool:
    """Link a contact to a tag. Returns True only if a new link row was created."""
    if not contact_id or not tag_id:
        return False

    # PRIMARY KEY (contact_id, tag_id) makes repeats a no-op
    cursor = await conn.execute(
        "INSERT OR IGNORE INTO contact_tags (contact_id, tag_id) VALUES (?, ?)",
        (contact_id, tag_id),
    )
    return cursor.rowcount > 0


async def _count_tags(conn: aiosqlite.Connection) -> int:
    async with conn.execute("SELECT COUNT(*) FROM tags") as cursor:
        row = await cursor.fetchone()
        return row[0] if row else 0


async def write_contacts_and_tags(
    contacts: List[DeviceContact],
    assignments: List[TagAssignment],
    db_path: Union[str, Path] = LOCAL_DB_PATH,
) -> WriteSummary:
    """
    Upsert changed contacts and merge their tags in one transaction.

    Either every contact, tag and link from this call is committed or none
    is. Assignments whose true_id does not resolve to a stored contact are
    skipped.

    Args:
        contacts: New or edited contacts to upsert
        assignments: Tag assignments from the tagging service
        db_path: Local database path

    Returns:
        WriteSummary with the counts of rows written
    """
    summary = WriteSummary()

    async with connect(db_path) as conn:
        await conn.execute("BEGIN IMMEDIATE")
        try:
            tags_before = await _count_tags(conn)

            for contact in contacts:
                if not contact.true_id:
                    continue
                await upsert_contact(conn, contact)
                summary.contacts_written += 1

            for assignment in assignments:
                contact_id = await get_contact_db_id(conn, assignment.true_id)
                if contact_id is None:
                    log.debug(f"No stored contact for {assignment.true_id!r}, skipping its tags")
                    summary.assignments_skipped += 1
                    continue

                for tag_name in assignment.tags:
                    tag_id = await upsert_tag(conn, tag_name)
                    if await link_contact_to_tag(conn, contact_id, tag_id):
                        summary.links_created += 1

            summary.tags_created = await _count_tags(conn) - tags_before
            await conn.execute("COMMIT")
        except Exception:
            await conn.execute("ROLLBACK")
            log.error("Rolled back contact/tag write", exc_info=True)
            raise

    log.info(
        f"Wrote {summary.contacts_written} contacts, {summary.tags_created} new tags, "
        f"{summary.links_created} new links ({summary.assignments_skipped} assignments skipped)"
    )
    return summary
