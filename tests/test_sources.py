"""Contact sources: JSONL exports and the macOS AddressBook database."""

import json
import sqlite3

import pytest

from rolodex.collection import (
    AddressBookContactSource,
    JsonlContactSource,
    PermissionStatus,
    build_contact_source,
    find_addressbook_databases,
    read_all_contacts,
)
from rolodex.config import RolodexConfig


def _write_jsonl(path, records):
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n\n", encoding="utf-8")


async def test_jsonl_source_reads_export_shape(tmp_path):
    path = tmp_path / "contacts.jsonl"
    _write_jsonl(path, [
        {"id": "A1", "name": "Jane Smith Intel", "company": "Intel", "jobTitle": "Software Engineer", "imageAvailable": True},
        {"id": "B2", "name": "Fahad Misk"},
    ])
    source = JsonlContactSource(path)

    assert await source.request_permission() == PermissionStatus.GRANTED
    contacts = await read_all_contacts(source, page_size=1)

    assert [c.true_id for c in contacts] == ["A1", "B2"]
    assert contacts[0].job_title == "Software Engineer"
    assert contacts[0].image_available is True
    assert contacts[1].company is None
    assert contacts[1].normalized() == {"name": "Fahad Misk", "company": "", "job_title": "", "image_available": False}


async def test_jsonl_missing_file_is_denied(tmp_path):
    source = JsonlContactSource(tmp_path / "nope.jsonl")
    assert await source.request_permission() == PermissionStatus.DENIED


async def test_jsonl_invalid_line_reports_location(tmp_path):
    path = tmp_path / "contacts.jsonl"
    path.write_text('{"id": "A1"}\n{oops\n', encoding="utf-8")

    with pytest.raises(ValueError, match=":2:"):
        await read_all_contacts(JsonlContactSource(path))


async def test_jsonl_numeric_ids_are_read_as_strings(tmp_path):
    path = tmp_path / "contacts.jsonl"
    _write_jsonl(path, [{"id": 42, "name": "Jane"}, {"id": "B2", "name": "Bob"}])

    contacts = await read_all_contacts(JsonlContactSource(path))

    assert [c.true_id for c in contacts] == ["42", "B2"]


async def test_jsonl_non_object_line_reports_location(tmp_path):
    path = tmp_path / "contacts.jsonl"
    path.write_text('{"id": "A1"}\n["not", "a", "contact"]\n', encoding="utf-8")

    with pytest.raises(ValueError, match=":2: invalid contact"):
        await read_all_contacts(JsonlContactSource(path))


def _make_addressbook(path, rows, with_image_column=True):
    conn = sqlite3.connect(path)
    image_column = ", ZTHUMBNAILIMAGEDATA BLOB" if with_image_column else ""
    conn.execute(f"""
        CREATE TABLE ZABCDRECORD (
            Z_PK INTEGER PRIMARY KEY,
            ZUNIQUEID TEXT,
            ZFIRSTNAME TEXT,
            ZLASTNAME TEXT,
            ZORGANIZATION TEXT,
            ZJOBTITLE TEXT{image_column}
        )
    """)
    for row in rows:
        if not with_image_column:
            row = row[:5]
        placeholders = ",".join("?" * len(row))
        columns = "ZUNIQUEID, ZFIRSTNAME, ZLASTNAME, ZORGANIZATION, ZJOBTITLE"
        if with_image_column:
            columns += ", ZTHUMBNAILIMAGEDATA"
        conn.execute(f"INSERT INTO ZABCDRECORD ({columns}) VALUES ({placeholders})", row)
    conn.commit()
    conn.close()


async def test_addressbook_source_reads_records(tmp_path):
    db_path = tmp_path / "AddressBook-v22.abcddb"
    _make_addressbook(db_path, [
        ("U1:ABPerson", "Jane", "Smith Intel", "Intel", "Software Engineer", b"\x89PNG"),
        ("U2:ABPerson", None, None, "Acme Corp", None, None),
        ("U3:ABGroup", None, None, None, None, None),
    ])
    source = AddressBookContactSource([db_path])

    assert await source.request_permission() == PermissionStatus.GRANTED
    contacts = await read_all_contacts(source)

    assert [(c.true_id, c.name, c.company, c.image_available) for c in contacts] == [
        ("U1:ABPerson", "Jane Smith Intel", "Intel", True),
        ("U2:ABPerson", "Acme Corp", "Acme Corp", False),
    ]


async def test_addressbook_without_image_columns(tmp_path):
    db_path = tmp_path / "AddressBook-v22.abcddb"
    _make_addressbook(db_path, [("U1", "Jane", None, None, None, None)], with_image_column=False)

    contacts = await read_all_contacts(AddressBookContactSource([db_path]))

    assert [(c.name, c.image_available) for c in contacts] == [("Jane", False)]


async def test_addressbook_dedupes_across_sources(tmp_path):
    first = tmp_path / "a.abcddb"
    second = tmp_path / "b.abcddb"
    _make_addressbook(first, [("U1", "Jane", None, None, None, None)])
    _make_addressbook(second, [("U1", "Jane", None, None, None, None), ("U2", "Bob", None, None, None, None)])

    contacts = await read_all_contacts(AddressBookContactSource([first, second]))

    assert [c.true_id for c in contacts] == ["U1", "U2"]


async def test_addressbook_unreadable_is_denied(tmp_path):
    not_a_db = tmp_path / "AddressBook-v22.abcddb"
    not_a_db.write_bytes(b"definitely not sqlite" * 100)

    source = AddressBookContactSource([not_a_db])
    assert await source.request_permission() == PermissionStatus.DENIED


def test_find_addressbook_databases(tmp_path):
    (tmp_path / "Sources" / "S1").mkdir(parents=True)
    (tmp_path / "Sources" / "S2").mkdir(parents=True)
    (tmp_path / "Sources" / "S1" / "AddressBook-v22.abcddb").touch()
    (tmp_path / "AddressBook-v22.abcddb").touch()

    assert find_addressbook_databases(tmp_path) == [
        tmp_path / "Sources" / "S1" / "AddressBook-v22.abcddb",
        tmp_path / "AddressBook-v22.abcddb",
    ]


def test_build_contact_source_from_config(tmp_path):
    jsonl = build_contact_source(RolodexConfig(source="jsonl", contacts_file=tmp_path / "c.jsonl"))
    assert isinstance(jsonl, JsonlContactSource)
    assert jsonl.path == tmp_path / "c.jsonl"

    book = build_contact_source(RolodexConfig(source="addressbook", addressbook_db=tmp_path / "x.abcddb"))
    assert isinstance(book, AddressBookContactSource)
    assert book.db_paths == [tmp_path / "x.abcddb"]
