"""
File: database/__init__.py
Created: 2026-10-12
Last Modified: 2026-10-18
"""

from .common import LOCAL_DB_PATH, connect
from .create_tables import init_local_database, reset_local_database
from .contacts import (
    get_stored_contacts,
    upsert_contact,
    get_contact_db_id,
)
from .tags import (
    get_all_tags,
    upsert_tag,
    link_contact_to_tag,
    write_contacts_and_tags,
)
from .views import (
    fetch_contacts_with_tags,
    search_contacts_by_tag,
    get_tag_counts,
    get_store_stats,
)

__all__ = [
    "LOCAL_DB_PATH",
    "connect",
    "init_local_database",
    "reset_local_database",
    "get_stored_contacts",
    "upsert_contact",
    "get_contact_db_id",
    "get_all_tags",
    "upsert_tag",
    "link_contact_to_tag",
    "write_contacts_and_tags",
    "fetch_contacts_with_tags",
    "search_contacts_by_tag",
    "get_tag_counts",
    "get_store_stats",
]
