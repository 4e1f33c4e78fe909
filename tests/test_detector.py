"""Change detection: new / edited / unchanged classification."""

import pytest

from rolodex.database import write_contacts_and_tags
from rolodex.models import ChangeKind, DeviceContact, StoredContact
from rolodex.tagging import classify_contact, detect_changes

from conftest import make_contact


def _stored(**overrides) -> StoredContact:
    fields = dict(id=1, true_id="A1", name="Jane", company="Intel", job_title="Engineer", image_available=False)
    fields.update(overrides)
    return StoredContact(**fields)


def test_missing_row_is_new():
    assert classify_contact(make_contact("A1", "Jane"), None) == ChangeKind.NEW


def test_identical_after_trimming_is_unchanged():
    contact = make_contact("A1", "  Jane ", "Intel  ", " Engineer")
    assert classify_contact(contact, _stored()) == ChangeKind.UNCHANGED


@pytest.mark.parametrize(
    "field, value",
    [
        ("name", "Jane Doe"),
        ("company", "AMD"),
        ("job_title", "Manager"),
        ("image_available", True),
    ],
)
def test_any_tracked_field_change_is_edited(field, value):
    contact = make_contact("A1", "Jane", "Intel", "Engineer")
    contact = contact.model_copy(update={field: value})
    assert classify_contact(contact, _stored()) == ChangeKind.EDITED


def test_absent_fields_compare_as_empty_and_false():
    contact = DeviceContact(true_id="A1")
    stored = _stored(name="", company="", job_title="", image_available=False)
    assert classify_contact(contact, stored) == ChangeKind.UNCHANGED


def test_text_comparison_is_case_sensitive():
    assert classify_contact(make_contact("A1", "jane", "Intel", "Engineer"), _stored()) == ChangeKind.EDITED


async def test_detect_changes_keeps_source_order_and_skips_unchanged(store):
    await write_contacts_and_tags(
        [make_contact("B", "Bob", "Acme"), make_contact("C", "Cy")],
        [],
        store,
    )

    snapshots = [
        make_contact("D", "Dee"),
        make_contact("C", "Cy"),
        make_contact(None, "No Id"),
        make_contact("B", "Bob", "Acme Corp"),
        make_contact("A", "Al"),
    ]

    changes = await detect_changes(snapshots, store)

    assert [(c.contact.true_id, c.kind) for c in changes] == [
        ("D", ChangeKind.NEW),
        ("B", ChangeKind.EDITED),
        ("A", ChangeKind.NEW),
    ]


async def test_detect_changes_on_empty_input(store):
    assert await detect_changes([], store) == []
