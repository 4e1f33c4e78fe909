"""
macOS Contacts (AddressBook) source.

Reads the Contacts app's Core Data store read-only. Access needs Full Disk
Access (or Contacts access) for the terminal; without it SQLite cannot open
the file and the source reports permission as denied.

File: collection/addressbook.py
Created: 2026-10-14
Last Modified: 2026-10-17
"""

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..models import DeviceContact
from .sources import ContactPage, PermissionStatus, slice_page

log = logging.getLogger(__name__)

ADDRESSBOOK_ROOT = Path.home() / "Library" / "Application Support" / "AddressBook"
ADDRESSBOOK_DB_NAME = "AddressBook-v22.abcddb"

# Column names vary across macOS versions
IMAGE_COLUMNS = ("ZTHUMBNAILIMAGEDATA", "ZIMAGEDATA")


def find_addressbook_databases(root: Path = ADDRESSBOOK_ROOT) -> List[Path]:
    """
    Find every AddressBook database (one per account source, plus the legacy one).
    """
    paths = []
    sources_dir = root / "Sources"
    if sources_dir.is_dir():
        for source_dir in sorted(sources_dir.iterdir()):
            db_path = source_dir / ADDRESSBOOK_DB_NAME
            if db_path.exists():
                paths.append(db_path)

    legacy_path = root / ADDRESSBOOK_DB_NAME
    if legacy_path.exists():
        paths.append(legacy_path)

    return paths


def _open_read_only(db_path: Path) -> sqlite3.Connection:
    return sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)


def _read_database(db_path: Path) -> List[DeviceContact]:
    conn = _open_read_only(db_path)
    try:
        columns = {row[1] for row in conn.execute("PRAGMA table_info(ZABCDRECORD)")}
        image_columns = [c for c in IMAGE_COLUMNS if c in columns]
        if image_columns:
            image_expr = " OR ".join(f"{c} IS NOT NULL" for c in image_columns)
            image_expr = f"CASE WHEN {image_expr} THEN 1 ELSE 0 END"
        else:
            image_expr = "0"

        query = f"""
            SELECT
                ZUNIQUEID,
                ZFIRSTNAME,
                ZLASTNAME,
                ZORGANIZATION,
                ZJOBTITLE,
                {image_expr} AS has_image
            FROM ZABCDRECORD
            WHERE ZFIRSTNAME IS NOT NULL OR ZLASTNAME IS NOT NULL OR ZORGANIZATION IS NOT NULL
            ORDER BY Z_PK
        """

        contacts = []
        for unique_id, first_name, last_name, organization, job_title, has_image in conn.execute(query):
            name = f"{first_name or ''} {last_name or ''}".strip() or (organization or "")
            contacts.append(
                DeviceContact(
                    true_id=unique_id,
                    name=name,
                    company=organization,
                    job_title=job_title,
                    image_available=bool(has_image),
                )
            )
        return contacts
    finally:
        conn.close()


class AddressBookContactSource:
    """Contacts from the macOS Contacts app."""

    def __init__(self, db_paths: Optional[Sequence[Union[str, Path]]] = None):
        self.db_paths = [Path(p) for p in db_paths] if db_paths else find_addressbook_databases()
        self._contacts: Optional[List[DeviceContact]] = None

    async def request_permission(self) -> PermissionStatus:
        if not self.db_paths:
            log.warning(f"No AddressBook database found under {ADDRESSBOOK_ROOT}")
            return PermissionStatus.DENIED

        def probe() -> PermissionStatus:
            for db_path in self.db_paths:
                try:
                    conn = _open_read_only(db_path)
                    try:
                        conn.execute("SELECT 1 FROM ZABCDRECORD LIMIT 1").fetchall()
                    finally:
                        conn.close()
                except sqlite3.Error as e:
                    log.warning(f"Cannot read AddressBook database {db_path}: {e}")
                    return PermissionStatus.DENIED
            return PermissionStatus.GRANTED

        return await asyncio.to_thread(probe)

    def _load(self) -> List[DeviceContact]:
        contacts: List[DeviceContact] = []
        seen = set()
        for db_path in self.db_paths:
            for contact in _read_database(db_path):
                # The same record can be mirrored into more than one source
                if contact.true_id in seen:
                    continue
                seen.add(contact.true_id)
                contacts.append(contact)
        log.debug(f"Loaded {len(contacts)} AddressBook records from {len(self.db_paths)} database(s)")
        return contacts

    async def get_contacts(self, page_size: int, page_offset: int) -> ContactPage:
        if self._contacts is None:
            self._contacts = await asyncio.to_thread(self._load)
        return slice_page(self._contacts, page_size, page_offset)
