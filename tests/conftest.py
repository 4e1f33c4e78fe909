"""Shared fixtures: temporary stores, an in-memory contact source, a scripted tagging client."""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import pytest

from rolodex.collection import ContactPage, PermissionStatus
from rolodex.collection.sources import slice_page
from rolodex.database import init_local_database
from rolodex.models import DeviceContact

Responder = Callable[[dict], Union[str, None, Exception]]


class StaticContactSource:
    """Contact source backed by a list, with a configurable permission answer."""

    def __init__(
        self,
        contacts: List[DeviceContact],
        permission: PermissionStatus = PermissionStatus.GRANTED,
    ):
        self.contacts = list(contacts)
        self.permission = permission
        self.page_requests: List[tuple] = []

    async def request_permission(self) -> PermissionStatus:
        return self.permission

    async def get_contacts(self, page_size: int, page_offset: int) -> ContactPage:
        self.page_requests.append((page_size, page_offset))
        return slice_page(self.contacts, page_size, page_offset)


class FakeTaggingClient:
    """
    Tagging client that answers from a responder function.

    The responder receives the decoded request payload and returns reply
    text, None, or an exception to raise.
    """

    def __init__(self, responder: Optional[Responder] = None):
        self.responder = responder or tags_from_table({})
        self.payloads: List[dict] = []
        self.system_prompts: List[str] = []

    async def complete_json(self, system_prompt: str, user_message: str) -> Optional[str]:
        assert user_message.startswith("INPUT: ")
        payload = json.loads(user_message[len("INPUT: "):])
        self.payloads.append(payload)
        self.system_prompts.append(system_prompt)

        reply = self.responder(payload)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def request_count(self) -> int:
        return len(self.payloads)

    @property
    def requested_ids(self) -> List[str]:
        return [c["true_id"] for p in self.payloads for c in p["contacts"]]


def tags_from_table(table: Dict[str, List[str]]) -> Responder:
    """Responder that tags each requested contact from a lookup table."""

    def respond(payload: dict) -> str:
        return json.dumps({
            "contacts": [
                {"true_id": c["true_id"], "tags": table.get(c["true_id"], [])}
                for c in payload["contacts"]
            ]
        })

    return respond


def make_contact(true_id: Optional[str], name: str = "", company: str = "", job_title: str = "",
                 image_available: bool = False) -> DeviceContact:
    return DeviceContact(
        true_id=true_id,
        name=name,
        company=company,
        job_title=job_title,
        image_available=image_available,
    )


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "contacts.db"


@pytest.fixture
async def store(db_path: Path) -> Path:
    """An initialized, empty local store."""
    await init_local_database(db_path)
    return db_path
