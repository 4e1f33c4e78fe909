"""
Shared data models for the Rolodex project.
"""

from .contact import ContactWithTags, DeviceContact, StoredContact
from .tagging import (
    BatchFailure,
    BatchResult,
    BatchSuccess,
    ChangeKind,
    ContactChange,
    ImportReport,
    ImportStatus,
    SynthesisResult,
    TagAssignment,
    WriteSummary,
)

__all__ = [
    "BatchFailure",
    "BatchResult",
    "BatchSuccess",
    "ChangeKind",
    "ContactChange",
    "ContactWithTags",
    "DeviceContact",
    "ImportReport",
    "ImportStatus",
    "StoredContact",
    "SynthesisResult",
    "TagAssignment",
    "WriteSummary",
]
