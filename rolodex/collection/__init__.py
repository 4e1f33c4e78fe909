"""
Reads device contacts from a contact source (JSONL export or macOS Contacts)

File: collection/__init__.py
Created: 2026-10-13
Last Modified: 2026-10-17
"""

from .sources import (
    ContactPage,
    ContactSource,
    DEFAULT_PAGE_SIZE,
    JsonlContactSource,
    PermissionStatus,
    build_contact_source,
    read_all_contacts,
)
from .addressbook import AddressBookContactSource, find_addressbook_databases

__all__ = [
    "AddressBookContactSource",
    "ContactPage",
    "ContactSource",
    "DEFAULT_PAGE_SIZE",
    "JsonlContactSource",
    "PermissionStatus",
    "build_contact_source",
    "find_addressbook_databases",
    "read_all_contacts",
]
