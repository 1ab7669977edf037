"""File-backed entity store.

This module owns the id lifecycle of one entity collection and exposes
CRUD operations over a validated JSON document. Every operation reads the
whole document and every mutation rewrites it.
"""

from __future__ import annotations

import contextlib
import dataclasses
from collections.abc import Mapping, MutableMapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, ContextManager, Generic, TypeVar

from core.config import DocketConfig
from core.constants import (
    CORRUPT_BACKUP_INFIX,
    ENTITY_ID_FIELD,
    FIRST_ENTITY_ID,
    RECOVERY_POLICY_BACKUP,
    RECOVERY_POLICY_RAISE,
)
from core.errors import (
    DocketConformanceError,
    DocketEntityNotFoundError,
    DocketInvalidIdError,
    DocketIoError,
    DocketParseError,
)
from core.logging_config import configure_logging, get_logger
from core.types import DumpFn, ReviveFn, StorageDocument
from schema.conformance import ensure_conforms
from schema.descriptors import TypeDescriptor, parse_descriptor
from store.document_codec import item_to_payload, read_document, write_document
from store.file_locks import path_lock

_LOGGER = get_logger(__name__)

T = TypeVar("T")


class EntityStore(Generic[T]):
    """Repository persisting one entity collection as a JSON document.

    Entities are mappings with an "id" key or objects with an ``id``
    attribute. Ids are positive integers assigned on insert and never
    reused, even after deletion.
    """

    def __init__(
        self,
        file_path: Path | str,
        item_descriptor: Any,
        *,
        revive: ReviveFn | None = None,
        dump: DumpFn | None = None,
        config: DocketConfig | None = None,
    ) -> None:
        """Create a store bound to one document file.

        Args:
            file_path: Collection JSON path.
            item_descriptor: Tagged descriptor or shorthand for stored items.
            revive: Optional transform from wire items to runtime items.
            dump: Optional transform from runtime items to wire items.
            config: Optional runtime configuration.

        Raises:
            DocketDescriptorError: If the item descriptor is malformed.
        """
        self._file_path = Path(file_path)
        self._item_descriptor: TypeDescriptor = parse_descriptor(item_descriptor)
        self._revive = revive
        self._dump = dump
        self._config = config or DocketConfig()
        self._next_id = FIRST_ENTITY_ID
        configure_logging(self._config.log_level)

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def next_id(self) -> int:
        """Id the next insert will assign, as known to this store."""
        return self._next_id

    def initialize(self) -> None:
        """Load the id counter, creating an empty document when needed.

        An unreadable document is handled by the configured recovery
        policy: "reset" overwrites it, "backup" moves it aside first and
        "raise" propagates the read error.

        Raises:
            DocketIoError: If the fresh document cannot be written.
            DocketDescriptorError: If the item descriptor is malformed.
        """
        with self._guard():
            file_existed = self._file_path.exists()
            try:
                document = self._read()
            except (DocketIoError, DocketParseError, DocketConformanceError) as error:
                if file_existed and self._config.recovery_policy == RECOVERY_POLICY_RAISE:
                    raise
                self._recover(error, file_existed)
                return
            self._next_id = document.next_id
            _LOGGER.info(
                "store_initialized",
                file_path=str(self._file_path),
                next_id=self._next_id,
                item_count=len(document.items),
            )

    def get_all(self) -> list[T]:
        """Return every stored entity in insertion order."""
        with self._guard():
            return self._read().items

    def get_by_id(self, entity_id: int) -> T:
        """Return the entity with the given id.

        Args:
            entity_id: Positive entity id.

        Returns:
            Matching entity.

        Raises:
            DocketInvalidIdError: If the id is not a positive integer.
            DocketEntityNotFoundError: If no entity has this id.
        """
        _require_positive_id(entity_id)
        with self._guard():
            items = self._read().items
            return items[self._index_of(items, entity_id)]

    def insert(self, value: T) -> int:
        """Assign a fresh id to an entity and append it.

        Mutable values receive the id in place; frozen dataclasses are
        stored as a copy carrying the id. The id is assigned before the
        entity is validated, so a rejected mutable value keeps an id that
        was never stored.

        Args:
            value: Entity to store; any existing id is overwritten.

        Returns:
            Assigned id.

        Raises:
            DocketConformanceError: If the entity does not match the item
                descriptor; the document is left untouched.
        """
        with self._guard():
            document = self._read()
            assigned_id = max(self._next_id, document.next_id)
            stored = _with_entity_id(value, assigned_id)
            self._ensure_storable(stored)
            self._next_id = assigned_id + 1
            items = document.items
            items.append(stored)
            self._write(items, document.next_id)
            _LOGGER.info(
                "entity_inserted",
                file_path=str(self._file_path),
                entity_id=assigned_id,
            )
            return assigned_id

    def update(self, value: T) -> None:
        """Replace the stored entity that has the same id as ``value``.

        Raises:
            DocketInvalidIdError: If the value id is not a positive integer.
            DocketEntityNotFoundError: If no entity has this id.
            DocketConformanceError: If the value does not match the item
                descriptor; the document is left untouched.
        """
        entity_id = _entity_id(value)
        _require_positive_id(entity_id)
        with self._guard():
            document = self._read()
            items = document.items
            index = self._index_of(items, entity_id)
            self._ensure_storable(value)
            items[index] = value
            self._write(items, document.next_id)
            _LOGGER.info(
                "entity_updated",
                file_path=str(self._file_path),
                entity_id=entity_id,
            )

    def delete(self, entity_id: int) -> None:
        """Remove the entity with the given id.

        Raises:
            DocketInvalidIdError: If the id is not a positive integer.
            DocketEntityNotFoundError: If no entity has this id.
        """
        _require_positive_id(entity_id)
        with self._guard():
            document = self._read()
            items = document.items
            del items[self._index_of(items, entity_id)]
            self._write(items, document.next_id)
            _LOGGER.info(
                "entity_deleted",
                file_path=str(self._file_path),
                entity_id=entity_id,
            )

    def _read(self) -> StorageDocument[T]:
        document = read_document(self._file_path, self._item_descriptor, self._revive)
        _check_identities(self._file_path, document)
        return document

    def _write(self, items: list[T], disk_next_id: int = FIRST_ENTITY_ID) -> None:
        # The persisted counter never moves below what is already on disk.
        self._next_id = max(self._next_id, disk_next_id)
        write_document(
            self._file_path,
            StorageDocument(next_id=self._next_id, items=items),
            dump=self._dump,
            indent=self._config.json_indent,
        )

    def _ensure_storable(self, item: Any) -> None:
        """Reject entities whose wire form would fail the next read."""
        payload = (self._dump or item_to_payload)(item)
        ensure_conforms(payload, self._item_descriptor, f"entity for {self._file_path}")

    def _guard(self) -> ContextManager[Any]:
        if self._config.serialize_writes:
            return path_lock(self._file_path)
        return contextlib.nullcontext()

    def _index_of(self, items: list[T], entity_id: int) -> int:
        for index, item in enumerate(items):
            if _entity_id(item) == entity_id:
                return index
        raise DocketEntityNotFoundError(
            f"No entity under id {entity_id} was found in {self._file_path}.",
            entity_id,
        )

    def _recover(self, error: Exception, file_existed: bool) -> None:
        """Replace an unreadable or missing document with an empty one."""
        if file_existed and self._config.recovery_policy == RECOVERY_POLICY_BACKUP:
            backup_path = _backup_path(self._file_path)
            try:
                self._file_path.replace(backup_path)
            except OSError as backup_error:
                raise DocketIoError(
                    f"Failed to back up unreadable document {self._file_path} "
                    f"to {backup_path}: {backup_error}."
                ) from backup_error
            _LOGGER.warning(
                "corrupt_document_backed_up",
                file_path=str(self._file_path),
                backup_path=str(backup_path),
            )
        self._next_id = FIRST_ENTITY_ID
        self._write([])
        _LOGGER.warning(
            "store_recovered",
            file_path=str(self._file_path),
            error_type=type(error).__name__,
            file_existed=file_existed,
            recovery_policy=self._config.recovery_policy,
        )


def _is_positive_id(entity_id: object) -> bool:
    return isinstance(entity_id, int) and not isinstance(entity_id, bool) and entity_id > 0


def _require_positive_id(entity_id: object) -> None:
    if not _is_positive_id(entity_id):
        raise DocketInvalidIdError(
            f"Entity id must be a positive integer, got {entity_id!r}."
        )


def _entity_id(item: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get(ENTITY_ID_FIELD)
    return getattr(item, ENTITY_ID_FIELD, None)


def _with_entity_id(item: Any, entity_id: int) -> Any:
    """Set the id on an entity, copying frozen dataclasses."""
    if isinstance(item, MutableMapping):
        item[ENTITY_ID_FIELD] = entity_id
        return item
    if dataclasses.is_dataclass(item) and item.__dataclass_params__.frozen:
        return dataclasses.replace(item, **{ENTITY_ID_FIELD: entity_id})
    setattr(item, ENTITY_ID_FIELD, entity_id)
    return item


def _check_identities(file_path: Path, document: StorageDocument[Any]) -> None:
    """Validate that item ids are positive, unique and below the counter."""
    seen_ids: set[int] = set()
    for item in document.items:
        entity_id = _entity_id(item)
        if not _is_positive_id(entity_id):
            raise DocketConformanceError(
                f"Document {file_path} holds an item with invalid id {entity_id!r}.",
                item,
            )
        if entity_id in seen_ids:
            raise DocketConformanceError(
                f"Document {file_path} holds duplicate id {entity_id}.",
                item,
            )
        if entity_id >= document.next_id:
            raise DocketConformanceError(
                f"Document {file_path} holds id {entity_id} which is not below "
                f"nextId {document.next_id}.",
                item,
            )
        seen_ids.add(entity_id)


def _backup_path(file_path: Path) -> Path:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return file_path.with_name(f"{file_path.name}{CORRUPT_BACKUP_INFIX}{timestamp}")
