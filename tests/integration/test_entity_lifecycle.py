"""Integration tests for an entity collection lifecycle."""

from __future__ import annotations

import json

import pytest

from docket import (
    DocketClient,
    DocketConfig,
    DocketEntityNotFoundError,
    ObjectShape,
    Primitive,
)


def test_person_collection_lifecycle(tmp_path, docket_config: DocketConfig) -> None:
    """Insert, update and delete should be reflected on disk."""
    client = DocketClient(docket_config)
    people = client.collection(
        "people",
        ObjectShape({"name": Primitive("string"), "age": Primitive("number")}),
    )

    assigned_id = people.insert({"name": "Ann", "age": 30})
    all_after_insert = people.get_all()
    people.update({"id": 1, "name": "Ann", "age": 31})
    age_after_update = people.get_by_id(1)["age"]
    people.delete(1)

    assert assigned_id == 1
    assert all_after_insert == [{"id": 1, "name": "Ann", "age": 30}]
    assert age_after_update == 31
    assert people.get_all() == []
    with pytest.raises(DocketEntityNotFoundError):
        people.get_by_id(1)
    payload = json.loads((tmp_path / "collections" / "people.json").read_text(encoding="utf-8"))
    assert payload == {"nextId": 2, "items": []}


def test_corrupt_collection_is_reset_on_open(tmp_path, docket_config: DocketConfig) -> None:
    """Reopening a corrupted collection should yield an empty document."""
    collection_path = tmp_path / "collections" / "notes.json"
    collection_path.parent.mkdir(parents=True)
    collection_path.write_text("not json at all", encoding="utf-8")
    client = DocketClient(docket_config)

    notes = client.collection("notes", {"text": "string"})

    assert notes.get_all() == []
    assert json.loads(collection_path.read_text(encoding="utf-8")) == {"nextId": 1, "items": []}


def test_counter_survives_reopen(docket_config: DocketConfig) -> None:
    """A reopened collection should continue numbering after the last id."""
    first = DocketClient(docket_config).collection("notes", {"text": "string"})
    first.insert({"text": "a"})
    first.insert({"text": "b"})
    first.delete(2)

    reopened = DocketClient(docket_config).collection("notes", {"text": "string"})

    assert reopened.insert({"text": "c"}) == 3
