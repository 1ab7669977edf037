"""Unit tests for the collection SDK client."""

from __future__ import annotations

import json

import pytest

from core.config import DocketConfig
from core.errors import DocketConfigError
from store.collection_sdk import DocketClient
from tests.fixture_paths import copy_fixture


def test_collection_creates_document_under_data_root(tmp_path, docket_config: DocketConfig) -> None:
    """Opening a collection should create its document file."""
    client = DocketClient(docket_config)

    client.collection("people", {"name": "string"})

    payload = json.loads((tmp_path / "collections" / "people.json").read_text(encoding="utf-8"))
    assert payload == {"nextId": 1, "items": []}


def test_list_collections_returns_sorted_names(docket_config: DocketConfig) -> None:
    """Listing should report every collection document."""
    client = DocketClient(docket_config)
    client.collection("zebras", {"name": "string"})
    client.collection("apples", {"name": "string"})

    names = client.list_collections()

    assert names == ["apples", "zebras"]


def test_list_collections_is_empty_without_data(docket_config: DocketConfig) -> None:
    """A fresh data root should list no collections."""
    assert DocketClient(docket_config).list_collections() == []


@pytest.mark.parametrize("bad_name", ["", "../escape", "a/b", "name.json", "line\n"])
def test_collection_rejects_invalid_names(docket_config: DocketConfig, bad_name: str) -> None:
    """Names that are not plain identifiers should be refused."""
    client = DocketClient(docket_config)

    with pytest.raises(DocketConfigError):
        client.collection(bad_name, {"name": "string"})

    assert client.list_collections() == []


def test_collection_reads_existing_fixture(tmp_path, docket_config: DocketConfig) -> None:
    """Existing documents should be opened with their counter intact."""
    copy_fixture("collections/books.json", tmp_path / "collections")
    client = DocketClient(docket_config)

    books = client.collection(
        "books",
        {"title": "string", "authors": ["string"], "published": {"number", "undefined"}},
    )

    assert books.next_id == 4
    assert [book["title"] for book in books.get_all()] == ["Dune", "Emma"]
