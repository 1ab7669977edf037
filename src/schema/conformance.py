"""Structural conformance evaluation.

This module decides whether an untyped value (typically parsed JSON)
satisfies a type descriptor, recursing through nested descriptors.
"""

from __future__ import annotations

import reprlib
from collections.abc import Mapping
from typing import Any

from core.errors import DocketConformanceError, DocketDescriptorError
from schema.descriptors import (
    UNDEFINED,
    Alternatives,
    FixedTuple,
    HomogeneousArray,
    ObjectShape,
    Predicate,
    Primitive,
    TypeDescriptor,
)


def runtime_type_name(value: Any) -> str:
    """Return the primitive type tag of a runtime value.

    None is tagged "object" and only UNDEFINED is tagged "undefined".

    Args:
        value: Any runtime value.

    Returns:
        One of the supported primitive type names.
    """
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if callable(value):
        return "function"
    return "object"


def conforms(value: Any, descriptor: TypeDescriptor) -> bool:
    """Determine whether a value satisfies a type descriptor.

    A predicate's result is coerced with ``bool()``, so any truthy
    return counts as a match. Exceptions raised by a predicate propagate.

    Args:
        value: Candidate value of unknown shape.
        descriptor: Tagged type descriptor.

    Returns:
        True when the value conforms.

    Raises:
        DocketDescriptorError: If the descriptor is malformed.
    """
    if isinstance(descriptor, Primitive):
        return runtime_type_name(value) == descriptor.name
    if isinstance(descriptor, Predicate):
        return bool(descriptor.test(value))
    if isinstance(descriptor, FixedTuple):
        return _conforms_fixed_tuple(value, descriptor)
    if isinstance(descriptor, HomogeneousArray):
        return _conforms_homogeneous_array(value, descriptor)
    if isinstance(descriptor, Alternatives):
        return any(conforms(value, option) for option in descriptor.options)
    if isinstance(descriptor, ObjectShape):
        return _conforms_object_shape(value, descriptor)
    raise DocketDescriptorError(
        f"Unsupported type descriptor {descriptor!r}. "
        "Build descriptors with schema.descriptors or parse_descriptor()."
    )


def ensure_conforms(value: Any, descriptor: TypeDescriptor, context: str) -> None:
    """Raise when a value does not satisfy a type descriptor.

    Args:
        value: Candidate value.
        descriptor: Tagged type descriptor.
        context: Human-readable origin of the value, e.g. a file path.

    Raises:
        DocketConformanceError: If the value does not conform.
    """
    if not conforms(value, descriptor):
        raise DocketConformanceError(
            f"Data from {context} does not conform to the required type: "
            f"{reprlib.repr(value)}",
            value,
        )


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _conforms_fixed_tuple(value: Any, descriptor: FixedTuple) -> bool:
    """Match a sequence position by position."""
    if not descriptor.positions:
        raise DocketDescriptorError("FixedTuple descriptor has no positions.")
    if not _is_sequence(value) or len(value) != len(descriptor.positions):
        return False
    return all(
        conforms(item, position) for item, position in zip(value, descriptor.positions)
    )


def _conforms_homogeneous_array(value: Any, descriptor: HomogeneousArray) -> bool:
    """Match every item of a sequence against one descriptor."""
    if descriptor.element is None:
        raise DocketDescriptorError("HomogeneousArray descriptor has no element.")
    if not _is_sequence(value):
        return False
    return all(conforms(item, descriptor.element) for item in value)


def _conforms_object_shape(value: Any, descriptor: ObjectShape) -> bool:
    """Match declared fields, ignoring any extra ones."""
    if value is None or value is UNDEFINED or _is_sequence(value):
        return False
    if runtime_type_name(value) not in ("object", "function"):
        return False
    for field_name, field_descriptor in descriptor.fields.items():
        if not conforms(_field_value(value, field_name), field_descriptor):
            return False
    return True


def _field_value(value: Any, field_name: str) -> Any:
    # Mappings by key, anything else by attribute.
    if isinstance(value, Mapping):
        return value.get(field_name, UNDEFINED)
    return getattr(value, field_name, UNDEFINED)
