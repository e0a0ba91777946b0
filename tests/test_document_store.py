"""Tests for the JSON document store."""

import json
from pathlib import Path

import pytest

from story_planner.db.exceptions import StorageCorruptedError
from story_planner.db.migration import (
    MIGRATED_USER_ID,
    CurrentShape,
    LegacyShape,
    decode_shape,
    migrate_legacy,
)
from story_planner.db.repositories import document_repository
from story_planner.db.repositories.document_repository import DocumentStore
from story_planner.domains.documents.entities import (
    Document,
    Segment,
    User,
    SEED_FIELD_ID,
    SYSTEM_USER_ID,
)
from story_planner.domains.documents.services import DocumentService


def write_json(path: Path, data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def test_missing_file_is_seeded(store: DocumentStore, data_file: Path) -> None:
    """First load creates and persists the seed document."""
    document = store.load()

    assert document.version == 1
    assert document.users == {}
    assert document.fields[SEED_FIELD_ID][0].user_id == SYSTEM_USER_ID
    assert data_file.exists()
    assert json.loads(data_file.read_text())["version"] == 1


def test_current_shape_is_returned_as_stored(store: DocumentStore, data_file: Path) -> None:
    stored = {
        "users": {"bob": {"userId": "bob", "name": "Bob", "color": "#00f"}},
        "fields": {"f1": [{"userId": "bob", "text": "X", "createdAt": 5}]},
        "version": 7,
    }
    write_json(data_file, stored)

    document = store.load()

    assert document.version == 7
    assert document.users["bob"] == User("bob", "Bob", "#00f")
    assert document.to_dict() == stored


def test_legacy_file_is_migrated_and_overwritten(store: DocumentStore, data_file: Path) -> None:
    """A flat mapping of strings is converted and written back."""
    write_json(data_file, {"s1": "hello", "s2": ""})

    document = store.load()

    assert list(document.fields) == ["s1"]
    assert document.fields["s1"] == [Segment(MIGRATED_USER_ID, "hello")]
    assert document.version == 1
    assert MIGRATED_USER_ID in document.users

    persisted = json.loads(data_file.read_text())
    assert persisted["version"] == 1
    assert persisted["fields"]["s1"] == [{"userId": MIGRATED_USER_ID, "text": "hello"}]


def test_legacy_non_string_values_are_skipped() -> None:
    document = migrate_legacy({"a": "text", "b": 3, "c": None, "d": ["x"]})
    assert list(document.fields) == ["a"]


def test_partial_current_shape_is_treated_as_legacy() -> None:
    """Without a numeric version the file is a legacy mapping."""
    raw = {"users": {}, "fields": {}, "version": "2"}
    assert isinstance(decode_shape(raw), LegacyShape)
    assert isinstance(decode_shape({"users": {}, "fields": {}, "version": 2}), CurrentShape)


def test_boolean_version_is_not_numeric() -> None:
    assert isinstance(decode_shape({"users": {}, "fields": {}, "version": True}), LegacyShape)


def test_invalid_json_is_fatal(store: DocumentStore, data_file: Path) -> None:
    data_file.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageCorruptedError):
        store.load()

    assert data_file.read_text() == "{not json"


def test_non_object_json_is_fatal(store: DocumentStore, data_file: Path) -> None:
    write_json(data_file, ["a", "b"])

    with pytest.raises(StorageCorruptedError):
        store.load()


def test_malformed_segment_in_current_shape_is_fatal(store: DocumentStore, data_file: Path) -> None:
    write_json(data_file, {"users": {}, "fields": {"f1": [{"text": "no author"}]}, "version": 3})

    with pytest.raises(StorageCorruptedError):
        store.load()


def test_save_replaces_whole_document(store: DocumentStore, data_file: Path) -> None:
    document = Document(
        users={"alice": User("alice", "Alice", "#f00")},
        fields={"f1": [Segment("alice", "hi", {"note": "x"})]},
        version=4,
    )

    store.save(document)

    assert store.load() == document
    leftovers = [p for p in data_file.parent.iterdir() if p.name.endswith(".tmp")]
    assert leftovers == []


def test_failed_save_keeps_previous_document(
    store: DocumentStore, data_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """An error while writing never leaves a partial document behind."""
    store.load()
    before = data_file.read_text()

    def broken_dump(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(json, "dump", broken_dump)

    with pytest.raises(OSError):
        store.save(Document.create_seed())

    assert data_file.read_text() == before
    assert [p.name for p in data_file.parent.iterdir()] == [data_file.name]


def test_unicode_text_round_trips(store: DocumentStore) -> None:
    document = Document(fields={"f1": [Segment("alice", "Жили-были ✨")]})
    store.save(document)
    assert store.load().fields["f1"][0].text == "Жили-были ✨"


def test_float_version_is_current_shape(store: DocumentStore, data_file: Path) -> None:
    """A version written as 5.0 keeps the stored data instead of migrating it."""
    write_json(data_file, {
        "users": {"bob": {"userId": "bob", "name": "Bob", "color": "#00f"}},
        "fields": {"f1": [{"userId": "bob", "text": "X"}]},
        "version": 5.0,
    })

    document = store.load()

    assert document.version == 5
    assert isinstance(document.version, int)
    assert document.fields["f1"] == [Segment("bob", "X")]
    assert MIGRATED_USER_ID not in document.users

    store.save(document)
    assert json.loads(data_file.read_text())["version"] == 5


def test_migration_rechecks_file_under_lock(
    store: DocumentStore, data_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A reader holding a stale legacy snapshot must not undo a newer save."""
    write_json(data_file, {"s1": "hello"})
    calls = []

    def decode_then_save_elsewhere(raw):
        shape = decode_shape(raw)
        if not calls:
            calls.append(shape)
            result = DocumentService(store).save_field(
                "alice", "f1", [{"userId": "alice", "text": "hi"}]
            )
            assert result.version == 2
        return shape

    monkeypatch.setattr(document_repository, "decode_shape", decode_then_save_elsewhere)

    document = store.load()

    assert isinstance(calls[0], LegacyShape)
    assert document.version == 2
    assert document.fields["f1"] == [Segment("alice", "hi")]
    persisted = json.loads(data_file.read_text())
    assert persisted["version"] == 2
    assert persisted["fields"]["f1"] == [{"userId": "alice", "text": "hi"}]


def test_unknown_properties_survive_save(store: DocumentStore, data_file: Path) -> None:
    """Extra user and top-level keys are kept through a load and save."""
    stored = {
        "users": {"bob": {"userId": "bob", "name": "Bob", "color": "#00f", "avatar": "b.png"}},
        "fields": {},
        "version": 3,
        "title": "My story",
    }
    write_json(data_file, stored)

    document = store.load()
    assert document.to_dict() == stored

    store.save(document)
    assert json.loads(data_file.read_text()) == stored
