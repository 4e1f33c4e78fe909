"""
Import workflow: read contacts, detect changes, tag, persist.

File: sync/importer.py
Created: 2026-10-14
Last Modified: 2026-10-18
"""

import fcntl
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..collection import (
    DEFAULT_PAGE_SIZE,
    ContactSource,
    PermissionStatus,
    build_contact_source,
    read_all_contacts,
)
from ..config import LOG_DIR, RolodexConfig
from ..database import (
    LOCAL_DB_PATH,
    fetch_contacts_with_tags,
    get_all_tags,
    init_local_database,
    write_contacts_and_tags,
)
from ..llm import TaggingClient, build_tagging_client
from ..models import ChangeKind, ContactWithTags, ImportReport, ImportStatus
from ..tagging import DEFAULT_BATCH_SIZE, detect_changes, synthesize_tags

log = logging.getLogger(__name__)

LOCK_FILE = LOG_DIR / "rolodex_import.lock"


async def import_contacts(
    source: ContactSource,
    client: TaggingClient,
    db_path: Union[str, Path] = LOCAL_DB_PATH,
    batch_size: int = DEFAULT_BATCH_SIZE,
    page_size: int = DEFAULT_PAGE_SIZE,
    show_progress: bool = False,
) -> ImportReport:
    """
    Import contacts from a source and tag the ones that changed.

    Nothing is written unless permission is granted and at least one contact
    is new or edited. All writes happen in one transaction at the end.

    Args:
        source: Contact source
        client: Tagging service client
        db_path: Local database path (schema must already exist)
        batch_size: Contacts per tagging request
        page_size: Contacts per source page
        show_progress: Show a progress bar while tagging

    Returns:
        ImportReport describing what happened
    """
    start_time = datetime.now()

    status = await source.request_permission()
    if status != PermissionStatus.GRANTED:
        log.warning(f"Contacts permission not granted ({status.value}), nothing imported")
        return ImportReport(status=ImportStatus.PERMISSION_DENIED)

    contacts = await read_all_contacts(source, page_size=page_size)
    if not contacts:
        log.info("No contacts found in source")
        return ImportReport(status=ImportStatus.NO_CONTACTS)

    with_ids = sum(1 for c in contacts if c.true_id)
    changes = await detect_changes(contacts, db_path)
    new_count = sum(1 for c in changes if c.kind == ChangeKind.NEW)

    report = ImportReport(
        status=ImportStatus.UP_TO_DATE,
        contacts_read=len(contacts),
        skipped_without_id=len(contacts) - with_ids,
        new=new_count,
        edited=len(changes) - new_count,
        unchanged=with_ids - len(changes),
    )

    if not changes:
        log.info("No new or edited contacts found, nothing to tag")
        return report

    changed_contacts = [c.contact for c in changes]
    vocabulary = await get_all_tags(db_path)

    synthesis = await synthesize_tags(
        client,
        changed_contacts,
        vocabulary,
        batch_size=batch_size,
        show_progress=show_progress,
    )

    summary = await write_contacts_and_tags(changed_contacts, synthesis.assignments, db_path)

    report.status = ImportStatus.COMPLETED
    report.batches_succeeded = len(synthesis.succeeded_batches)
    report.batches_failed = len(synthesis.failed_batches)
    report.tags_created = summary.tags_created
    report.links_created = summary.links_created
    report.assignments_skipped = summary.assignments_skipped

    elapsed = datetime.now() - start_time
    log.info(
        f"Imported {report.changed} changed contacts ({report.new} new, {report.edited} edited) "
        f"in {elapsed.total_seconds():.1f}s"
    )
    if report.batches_failed:
        log.warning(f"{report.batches_failed} tagging batch(es) failed; their contacts were saved without tags")

    return report


async def run_import(
    config: RolodexConfig,
    source: Optional[ContactSource] = None,
    client: Optional[TaggingClient] = None,
    show_progress: bool = False,
) -> Tuple[ImportReport, List[ContactWithTags]]:
    """
    Bootstrap the store, import once, and read back the display rows.

    Args:
        config: Runtime configuration
        source: Contact source (built from config if omitted)
        client: Tagging client (built from config if omitted)
        show_progress: Show a progress bar while tagging

    Returns:
        Tuple of (ImportReport, contacts with tags ordered by name)
    """
    await init_local_database(config.db_path)

    if source is None:
        source = build_contact_source(config)
    if client is None:
        client = build_tagging_client(config)

    report = await import_contacts(
        source,
        client,
        db_path=config.db_path,
        batch_size=config.batch_size,
        page_size=config.page_size,
        show_progress=show_progress,
    )
    contacts = await fetch_contacts_with_tags(config.db_path)
    return report, contacts


class FileLock:
    """Context manager for file-based locking to prevent concurrent imports"""
    def __init__(self, lock_file: Path = LOCK_FILE):
        self.lock_file = lock_file
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        self.lock_fd = None

    def __enter__(self):
        self.lock_fd = open(self.lock_file, 'w')
        try:
            # Non-blocking: fail immediately if another import holds the lock
            fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            self.lock_fd.write(f"{os.getpid()}\n{datetime.now().isoformat()}\n")
            self.lock_fd.flush()
            return self
        except OSError:
            self.lock_fd.close()
            self.lock_fd = None
            raise RuntimeError("Another import is already running")

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.lock_fd:
            fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_UN)
            self.lock_fd.close()
            self.lock_file.unlink(missing_ok=True)
