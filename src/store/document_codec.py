"""Collection document persistence helpers.

This module isolates JSON document IO for entity collections.
It validates every payload before it is handed to the store.
"""

from __future__ import annotations

import dataclasses
import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from core.constants import (
    DEFAULT_JSON_INDENT,
    ITEMS_FIELD,
    NEXT_ID_FIELD,
    TEMP_FILE_SUFFIX,
)
from core.errors import (
    DocketConformanceError,
    DocketEncodeError,
    DocketIoError,
    DocketParseError,
)
from core.logging_config import get_logger
from core.types import DumpFn, ReviveFn, StorageDocument
from schema.conformance import ensure_conforms
from schema.descriptors import (
    HomogeneousArray,
    ObjectShape,
    Primitive,
    TypeDescriptor,
)

_LOGGER = get_logger(__name__)


def document_descriptor(item_descriptor: TypeDescriptor) -> ObjectShape:
    """Build the descriptor of a whole collection document.

    Args:
        item_descriptor: Descriptor of one stored item.

    Returns:
        Object shape with a numeric counter and an item list.
    """
    return ObjectShape(
        {
            NEXT_ID_FIELD: Primitive("number"),
            ITEMS_FIELD: HomogeneousArray(item_descriptor),
        }
    )


def read_json_file(file_path: Path, descriptor: TypeDescriptor) -> Any:
    """Read a JSON file and validate its payload.

    Args:
        file_path: JSON file path.
        descriptor: Expected payload shape.

    Returns:
        Parsed payload.

    Raises:
        DocketIoError: If the file cannot be read.
        DocketParseError: If the content is not well-formed JSON.
        DocketConformanceError: If the payload does not match the descriptor.
    """
    try:
        raw_bytes = file_path.read_bytes()
    except OSError as error:
        raise DocketIoError(
            f"Failed to read {file_path}: {error.strerror or error}. "
            "Check that the file exists and is readable."
        ) from error
    try:
        payload = json.loads(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError as error:
        raise DocketParseError(
            f"Failed to decode {file_path} as UTF-8: {error.reason}."
        ) from error
    except json.JSONDecodeError as error:
        raise DocketParseError(
            f"Failed to parse {file_path}: {error.msg} "
            f"(line {error.lineno}, column {error.colno})."
        ) from error
    ensure_conforms(payload, descriptor, str(file_path))
    return payload


def read_document(
    file_path: Path,
    item_descriptor: TypeDescriptor,
    revive: ReviveFn | None = None,
) -> StorageDocument[Any]:
    """Read and validate a collection document.

    Args:
        file_path: Collection JSON path.
        item_descriptor: Descriptor every stored item must satisfy.
        revive: Optional transform from wire items to runtime items.

    Returns:
        Typed storage document.

    Raises:
        DocketIoError: If the file cannot be read.
        DocketParseError: If the content is not well-formed JSON.
        DocketConformanceError: If the document does not match.
    """
    payload = read_json_file(file_path, document_descriptor(item_descriptor))
    next_id = payload[NEXT_ID_FIELD]
    if isinstance(next_id, float) and next_id.is_integer():
        next_id = int(next_id)
    if not isinstance(next_id, int) or next_id < 1:
        raise DocketConformanceError(
            f"Document {file_path} has invalid {NEXT_ID_FIELD} {next_id!r}: "
            "expected a positive integer.",
            payload,
        )
    items = list(payload[ITEMS_FIELD])
    if revive is not None:
        items = [revive(item) for item in items]
    return StorageDocument(next_id=next_id, items=items)


def write_document(
    file_path: Path,
    document: StorageDocument[Any],
    dump: DumpFn | None = None,
    indent: int = DEFAULT_JSON_INDENT,
) -> None:
    """Atomically overwrite a collection document.

    Args:
        file_path: Collection JSON path.
        document: Document to persist.
        dump: Optional transform from runtime items to JSON-safe payloads.
        indent: Indentation width.

    Raises:
        DocketEncodeError: If an item cannot be serialized.
        DocketIoError: If the file cannot be written.
    """
    to_payload = dump or item_to_payload
    payload = {
        NEXT_ID_FIELD: document.next_id,
        ITEMS_FIELD: [to_payload(item) for item in document.items],
    }
    try:
        content = json.dumps(payload, indent=indent, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as error:
        raise DocketEncodeError(
            f"Failed to serialize document for {file_path}: {error}. "
            "Pass a dump function that returns JSON-safe values."
        ) from error
    try:
        _atomic_write_text(file_path, content)
    except OSError as error:
        raise DocketIoError(
            f"Failed to write {file_path}: {error.strerror or error}. "
            "Check directory permissions and free space."
        ) from error
    _LOGGER.debug(
        "document_written",
        file_path=str(file_path),
        next_id=document.next_id,
        item_count=len(document.items),
    )


def item_to_payload(item: Any) -> dict[str, Any]:
    """Convert a runtime item into a JSON-safe mapping.

    Args:
        item: Mapping or dataclass instance.

    Returns:
        Plain dictionary preserving field order.

    Raises:
        DocketEncodeError: If the item type is not supported.
    """
    if isinstance(item, Mapping):
        return dict(item)
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return dataclasses.asdict(item)
    raise DocketEncodeError(
        f"Cannot serialize item of type {type(item).__name__}. "
        "Store mappings or dataclasses, or pass a dump function."
    )


def _atomic_write_text(file_path: Path, content: str) -> None:
    """Write content through a same-directory temp file and rename."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=str(file_path.parent),
        prefix=f".{file_path.name}.",
        suffix=TEMP_FILE_SUFFIX,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp_handle:
            tmp_handle.write(content)
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        os.replace(tmp_name, file_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
