"""
Read-only queries for displaying and searching contacts.

File: database/views.py
Created: 2026-10-13
Last Modified: 2026-10-19
"""

import logging
from pathlib import Path
from typing import Dict, List, Tuple, Union

from ..models import ContactWithTags
from .common import LOCAL_DB_PATH, connect

log = logging.getLogger(__name__)

# One row per (contact, tag) link; contacts without tags appear once with a NULL tag
CONTACTS_WITH_TAGS_QUERY = """
    SELECT c.id, c.name, t.name
    FROM contacts c
    LEFT JOIN contact_tags ct ON c.id = ct.contact_id
    LEFT JOIN tags t ON ct.tag_id = t.id
    {where}
    ORDER BY c.name ASC, c.id ASC, t.id ASC
"""


def _group_rows(rows) -> List[ContactWithTags]:
    """Fold ordered (id, name, tag) rows into one ContactWithTags per contact."""
    contacts: List[ContactWithTags] = []
    for contact_id, name, tag_name in rows:
        if not contacts or contacts[-1].id != contact_id:
            contacts.append(ContactWithTags(id=contact_id, name=name or "", tags=[]))
        if tag_name:
            contacts[-1].tags.append(tag_name)
    return contacts


async def fetch_contacts_with_tags(db_path: Union[str, Path] = LOCAL_DB_PATH) -> List[ContactWithTags]:
    """
    Get every contact with the names of its tags, ordered by name.

    Returns:
        List of ContactWithTags (contacts without tags have an empty list)
    """
    async with connect(db_path) as conn:
        async with conn.execute(CONTACTS_WITH_TAGS_QUERY.format(where="")) as cursor:
            contacts = _group_rows(await cursor.fetchall())

    log.debug(f"Fetched {len(contacts)} contacts with tags")
    return contacts


async def search_contacts_by_tag(
    query: str,
    db_path: Union[str, Path] = LOCAL_DB_PATH,
) -> List[ContactWithTags]:
    """
    Find contacts with at least one tag whose name contains `query`.

    Matching is case-insensitive. Each result carries all of the contact's
    tags, not only the matching ones.
    """
    query = query.strip()
    if not query:
        return []

    where = """
        WHERE c.id IN (
            SELECT ct2.contact_id
            FROM contact_tags ct2
            JOIN tags t2 ON ct2.tag_id = t2.id
            WHERE t2.name LIKE ? ESCAPE '\\'
        )
    """
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

    async with connect(db_path) as conn:
        async with conn.execute(
            CONTACTS_WITH_TAGS_QUERY.format(where=where),
            (f"%{escaped}%",),
        ) as cursor:
            contacts = _group_rows(await cursor.fetchall())

    log.info(f"Tag search {query!r} matched {len(contacts)} contacts")
    return contacts


async def get_tag_counts(db_path: Union[str, Path] = LOCAL_DB_PATH) -> List[Tuple[str, int]]:
    """Tag names with the number of linked contacts, most used first."""
    async with connect(db_path) as conn:
        async with conn.execute(
            """
            SELECT t.name, COUNT(ct.contact_id) AS uses
            FROM tags t
            LEFT JOIN contact_tags ct ON t.id = ct.tag_id
            GROUP BY t.id
            ORDER BY uses DESC, t.name ASC
            """
        ) as cursor:
            return [(row[0], row[1]) async for row in cursor]


async def get_store_stats(db_path: Union[str, Path] = LOCAL_DB_PATH) -> Dict[str, int]:
    """
    Get row counts for the local store.

    Returns:
        Dict with counts: contacts, tags, links, untagged_contacts
    """
    stats = {
        "contacts": 0,
        "tags": 0,
        "links": 0,
        "untagged_contacts": 0,
    }

    async with connect(db_path) as conn:
        async with conn.execute("SELECT COUNT(*) FROM contacts") as cursor:
            row = await cursor.fetchone()
            stats["contacts"] = row[0] if row else 0

        async with conn.execute("SELECT COUNT(*) FROM tags") as cursor:
            row = await cursor.fetchone()
            stats["tags"] = row[0] if row else 0

        async with conn.execute("SELECT COUNT(*) FROM contact_tags") as cursor:
            row = await cursor.fetchone()
            stats["links"] = row[0] if row else 0

        async with conn.execute(
            """
            SELECT COUNT(*) FROM contacts c
            WHERE NOT EXISTS (SELECT 1 FROM contact_tags ct WHERE ct.contact_id = c.id)
            """
        ) as cursor:
            row = await cursor.fetchone()
            stats["untagged_contacts"] = row[0] if row else 0

    return stats
