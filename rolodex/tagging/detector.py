"""
Decides which device contacts are new or edited since the last import.

File: tagging/detector.py
Created: 2026-10-13
Last Modified: 2026-10-17
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..database import LOCAL_DB_PATH, get_stored_contacts
from ..models import ChangeKind, ContactChange, DeviceContact, StoredContact

log = logging.getLogger(__name__)


def classify_contact(contact: DeviceContact, stored: Optional[StoredContact]) -> ChangeKind:
    """
    Compare a snapshot against its stored row.

    Text fields are compared after trimming, with missing values as ''.
    The image flag is compared as a boolean, with missing as False.
    """
    if stored is None:
        return ChangeKind.NEW
    if contact.normalized() != stored.normalized():
        return ChangeKind.EDITED
    return ChangeKind.UNCHANGED


async def detect_changes(
    contacts: List[DeviceContact],
    db_path: Union[str, Path] = LOCAL_DB_PATH,
) -> List[ContactChange]:
    """
    Find the contacts that need tagging.

    Args:
        contacts: Snapshots from the contact source
        db_path: Local database path

    Returns:
        New and edited contacts, in source order. Contacts without an
        external identifier are left out.
    """
    with_ids = [c for c in contacts if c.true_id]
    if len(with_ids) < len(contacts):
        log.debug(f"Ignoring {len(contacts) - len(with_ids)} contacts without an identifier")

    stored = await get_stored_contacts(list({c.true_id for c in with_ids}), db_path)

    changes = []
    for contact in with_ids:
        kind = classify_contact(contact, stored.get(contact.true_id))
        if kind != ChangeKind.UNCHANGED:
            changes.append(ContactChange(contact=contact, kind=kind))

    new_count = sum(1 for c in changes if c.kind == ChangeKind.NEW)
    log.info(
        f"Detected {new_count} new and {len(changes) - new_count} edited contacts "
        f"out of {len(with_ids)}"
    )
    return changes
