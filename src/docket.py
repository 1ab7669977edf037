"""Public SDK surface for Docket.

This module provides a stable import path for library users.
It re-exports the client, the store and the descriptor model.
"""

from __future__ import annotations

from core.config import DocketConfig
from core.errors import (
    DocketConfigError,
    DocketConformanceError,
    DocketDescriptorError,
    DocketEncodeError,
    DocketEntityNotFoundError,
    DocketError,
    DocketInvalidIdError,
    DocketIoError,
    DocketParseError,
)
from core.types import StorageDocument
from schema.conformance import conforms, ensure_conforms, runtime_type_name
from schema.descriptors import (
    UNDEFINED,
    Alternatives,
    FixedTuple,
    HomogeneousArray,
    ObjectShape,
    Predicate,
    Primitive,
    TypeDescriptor,
    parse_descriptor,
)
from store.collection_sdk import DocketClient
from store.document_codec import read_document, read_json_file, write_document
from store.entity_store import EntityStore

__all__ = [
    "UNDEFINED",
    "Alternatives",
    "DocketClient",
    "DocketConfig",
    "DocketConfigError",
    "DocketConformanceError",
    "DocketDescriptorError",
    "DocketEncodeError",
    "DocketEntityNotFoundError",
    "DocketError",
    "DocketInvalidIdError",
    "DocketIoError",
    "DocketParseError",
    "EntityStore",
    "FixedTuple",
    "HomogeneousArray",
    "ObjectShape",
    "Predicate",
    "Primitive",
    "StorageDocument",
    "TypeDescriptor",
    "conforms",
    "ensure_conforms",
    "parse_descriptor",
    "read_document",
    "read_json_file",
    "runtime_type_name",
    "write_document",
]
