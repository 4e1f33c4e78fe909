"""
Models for change detection, tag synthesis, and import results.

File: models/tagging.py
Created: 2026-10-12
Last Modified: 2026-10-18
"""

from enum import Enum
from typing import List, Literal, Union

from pydantic import BaseModel, Field

from .contact import DeviceContact


class ChangeKind(str, Enum):
    NEW = "new"
    EDITED = "edited"
    UNCHANGED = "unchanged"


class ContactChange(BaseModel):
    """A device contact that differs from what is stored."""

    contact: DeviceContact
    kind: ChangeKind


class TagAssignment(BaseModel):
    """Tags the tagging service attributed to one contact."""

    true_id: str = Field(..., description="External identifier echoed back by the service")
    tags: List[str] = Field(default_factory=list, description="Tag names, trimmed")


class BatchSuccess(BaseModel):
    """A batch whose response parsed cleanly."""

    ok: Literal[True] = True
    batch_index: int = Field(..., ge=0)
    assignments: List[TagAssignment] = Field(default_factory=list)


class BatchFailure(BaseModel):
    """A batch that was dropped (network or parse error). Contributes no tags."""

    ok: Literal[False] = False
    batch_index: int = Field(..., ge=0)
    true_ids: List[str] = Field(default_factory=list, description="Contacts in the dropped batch")
    reason: str = Field(..., description="Why the batch was dropped")


BatchResult = Union[BatchSuccess, BatchFailure]


class SynthesisResult(BaseModel):
    """
    Aggregate of every batch in one synthesis run.

    `assignments` holds the successful batches' output in batch order and
    `vocabulary` is the starting vocabulary followed by every tag first seen
    during the run.
    """

    assignments: List[TagAssignment] = Field(default_factory=list)
    vocabulary: List[str] = Field(default_factory=list)
    batches: List[BatchResult] = Field(default_factory=list)

    @property
    def succeeded_batches(self) -> List[BatchSuccess]:
        return [b for b in self.batches if isinstance(b, BatchSuccess)]

    @property
    def failed_batches(self) -> List[BatchFailure]:
        return [b for b in self.batches if isinstance(b, BatchFailure)]


class WriteSummary(BaseModel):
    """Counts from one persistence unit of work."""

    contacts_written: int = Field(0, ge=0)
    tags_created: int = Field(0, ge=0)
    links_created: int = Field(0, ge=0)
    assignments_skipped: int = Field(0, ge=0, description="Assignments whose true_id did not resolve")


class ImportStatus(str, Enum):
    COMPLETED = "completed"
    UP_TO_DATE = "up_to_date"
    NO_CONTACTS = "no_contacts"
    PERMISSION_DENIED = "permission_denied"


class ImportReport(BaseModel):
    """Outcome of one import run."""

    status: ImportStatus
    contacts_read: int = Field(0, ge=0)
    skipped_without_id: int = Field(0, ge=0)
    new: int = Field(0, ge=0)
    edited: int = Field(0, ge=0)
    unchanged: int = Field(0, ge=0)
    batches_succeeded: int = Field(0, ge=0)
    batches_failed: int = Field(0, ge=0)
    tags_created: int = Field(0, ge=0)
    links_created: int = Field(0, ge=0)
    assignments_skipped: int = Field(0, ge=0)

    @property
    def changed(self) -> int:
        return self.new + self.edited
