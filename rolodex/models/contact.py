"""
Contact models: device snapshots, stored rows, and display rows.

File: models/contact.py
Created: 2026-10-12
Last Modified: 2026-10-17
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeviceContact(BaseModel):
    """
    One contact as reported by a contact source.

    Every field except the identifier may be missing on a given device, so
    consumers should go through `normalized()` rather than reading the raw
    attributes.
    """
    # Exports may carry numeric ids
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    true_id: Optional[str] = Field(None, alias="id", description="Stable external identifier from the source")
    name: Optional[str] = Field(None, description="Display name (often embeds affiliations)")
    company: Optional[str] = Field(None, description="Company / organization")
    job_title: Optional[str] = Field(None, alias="jobTitle", description="Job title")
    image_available: Optional[bool] = Field(None, alias="imageAvailable", description="Whether the contact has a photo")

    def normalized(self) -> Dict[str, Any]:
        """Trimmed tracked fields, with absent values as '' / False."""
        return {
            "name": (self.name or "").strip(),
            "company": (self.company or "").strip(),
            "job_title": (self.job_title or "").strip(),
            "image_available": bool(self.image_available),
        }


class StoredContact(BaseModel):
    """A row of the `contacts` table."""

    id: int = Field(..., description="Internal row identifier")
    true_id: str = Field(..., description="Stable external identifier")
    name: str = Field("", description="Display name")
    company: str = Field("", description="Company / organization")
    job_title: str = Field("", description="Job title")
    image_available: bool = Field(False, description="Whether the contact has a photo")

    def normalized(self) -> Dict[str, Any]:
        return {
            "name": (self.name or "").strip(),
            "company": (self.company or "").strip(),
            "job_title": (self.job_title or "").strip(),
            "image_available": bool(self.image_available),
        }

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> "StoredContact":
        """Create a StoredContact from a `contacts` row dict."""
        return cls(
            id=row["id"],
            true_id=row["true_id"],
            name=row.get("name") or "",
            company=row.get("company") or "",
            job_title=row.get("jobTitle") or "",
            image_available=row.get("imageAvailable") == 1,
        )


class ContactWithTags(BaseModel):
    """A contact joined with the names of its tags, for display."""

    id: int = Field(..., description="Internal row identifier")
    name: str = Field("", description="Display name")
    tags: List[str] = Field(default_factory=list, description="Tag names linked to this contact")

    @property
    def tags_display(self) -> str:
        return ", ".join(self.tags)
