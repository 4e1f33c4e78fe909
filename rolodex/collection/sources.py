"""
Contact sources: where device contacts come from.

A source answers a permission query and serves contacts page by page, the
same shape a phone's contacts API has. Sources are read-only.

File: collection/sources.py
Created: 2026-10-13
Last Modified: 2026-10-17
"""

import asyncio
import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional, Protocol, Union

from pydantic import BaseModel, Field, ValidationError

from ..models import DeviceContact

log = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


class ContactPage(BaseModel):
    """One page of contacts from a source."""

    data: List[DeviceContact] = Field(default_factory=list)
    has_next_page: bool = Field(False, description="Whether another page follows this one")


class ContactSource(Protocol):
    """Read-only supplier of device contact snapshots."""

    async def request_permission(self) -> PermissionStatus:
        """Ask for (or report) access to the contacts."""
        ...

    async def get_contacts(self, page_size: int, page_offset: int) -> ContactPage:
        """Return up to `page_size` contacts starting at `page_offset`."""
        ...


async def read_all_contacts(
    source: ContactSource,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[DeviceContact]:
    """
    Read every contact from a source, page by page, in source order.

    Args:
        source: Contact source (permission must already be granted)
        page_size: Contacts requested per page

    Returns:
        All contacts the source reported
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")

    contacts: List[DeviceContact] = []
    offset = 0
    while True:
        page = await source.get_contacts(page_size=page_size, page_offset=offset)
        contacts.extend(page.data)
        if not page.has_next_page or not page.data:
            break
        offset += len(page.data)

    log.info(f"Read {len(contacts)} contacts from {type(source).__name__}")
    return contacts


def slice_page(contacts: List[DeviceContact], page_size: int, page_offset: int) -> ContactPage:
    data = contacts[page_offset : page_offset + page_size]
    return ContactPage(data=data, has_next_page=page_offset + page_size < len(contacts))


class JsonlContactSource:
    """
    Contacts exported as JSONL, one object per line.

    Each line uses the phone export shape:
    {"id": "...", "name": "...", "company": "...", "jobTitle": "...", "imageAvailable": true}
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._contacts: Optional[List[DeviceContact]] = None

    async def request_permission(self) -> PermissionStatus:
        if not self.path.is_file():
            log.warning(f"Contacts file not found: {self.path}")
            return PermissionStatus.DENIED
        if not os.access(self.path, os.R_OK):
            log.warning(f"Contacts file is not readable: {self.path}")
            return PermissionStatus.DENIED
        return PermissionStatus.GRANTED

    def _load(self) -> List[DeviceContact]:
        contacts = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValueError(f"{self.path}:{line_number}: invalid JSON ({e})") from e
                try:
                    contacts.append(DeviceContact.model_validate(data))
                except ValidationError as e:
                    raise ValueError(f"{self.path}:{line_number}: invalid contact ({e})") from e
        return contacts

    async def get_contacts(self, page_size: int, page_offset: int) -> ContactPage:
        if self._contacts is None:
            self._contacts = await asyncio.to_thread(self._load)
        return slice_page(self._contacts, page_size, page_offset)


def build_contact_source(config) -> ContactSource:
    """Create the contact source named by `config.source`."""
    if config.source == "jsonl":
        return JsonlContactSource(config.contacts_file)
    if config.source == "addressbook":
        from .addressbook import AddressBookContactSource

        db_paths = [config.addressbook_db] if config.addressbook_db else None
        return AddressBookContactSource(db_paths)
    raise ValueError(f"Unknown contact source: {config.source!r} (expected 'jsonl' or 'addressbook')")
