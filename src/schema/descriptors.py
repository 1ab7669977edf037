"""Recursive type descriptor model.

This module defines one frozen dataclass per descriptor kind and a parser
for the compact shorthand notation (strings, lists, sets, dicts, callables).
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from dataclasses import dataclass
from typing import Any, Callable, Union

from core.constants import SUPPORTED_PRIMITIVE_NAMES
from core.errors import DocketDescriptorError


class _Undefined:
    """Marker for an absent value, distinct from None (JSON null)."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class Primitive:
    """Matches values whose runtime type tag equals ``name``."""

    name: str

    def __post_init__(self) -> None:
        if self.name not in SUPPORTED_PRIMITIVE_NAMES:
            raise DocketDescriptorError(
                f"Unknown primitive type name '{self.name}'. "
                f"Use one of: {', '.join(SUPPORTED_PRIMITIVE_NAMES)}."
            )


@dataclass(frozen=True)
class Predicate:
    """Matches values for which ``test`` returns a truthy result."""

    test: Callable[[Any], bool]

    def __post_init__(self) -> None:
        if not callable(self.test):
            raise DocketDescriptorError(
                f"Predicate requires a callable test, got {self.test!r}."
            )


@dataclass(frozen=True)
class ObjectShape:
    """Matches objects whose declared fields all conform.

    Undeclared fields on the candidate are ignored.
    """

    fields: Mapping[str, "TypeDescriptor"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", dict(self.fields))
        for field_name, field_descriptor in self.fields.items():
            _require_descriptor(field_descriptor, f"ObjectShape field '{field_name}'")


@dataclass(frozen=True)
class FixedTuple:
    """Matches sequences position by position with an exact length."""

    positions: tuple["TypeDescriptor", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", tuple(self.positions))
        if len(self.positions) < 2:
            raise DocketDescriptorError(
                "FixedTuple requires at least two position descriptors, "
                f"got {len(self.positions)}. "
                "Use HomogeneousArray for a list of uniform items."
            )
        for position in self.positions:
            _require_descriptor(position, "FixedTuple position")


@dataclass(frozen=True)
class HomogeneousArray:
    """Matches sequences of any length whose items all conform."""

    element: "TypeDescriptor"

    def __post_init__(self) -> None:
        _require_descriptor(self.element, "HomogeneousArray element")


@dataclass(frozen=True)
class Alternatives:
    """Matches values conforming to at least one option."""

    options: tuple["TypeDescriptor", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))
        for option in self.options:
            _require_descriptor(option, "Alternatives option")


TypeDescriptor = Union[
    Primitive,
    Predicate,
    ObjectShape,
    FixedTuple,
    HomogeneousArray,
    Alternatives,
]

DESCRIPTOR_TYPES = (
    Primitive,
    Predicate,
    ObjectShape,
    FixedTuple,
    HomogeneousArray,
    Alternatives,
)


def parse_descriptor(shorthand: Any) -> TypeDescriptor:
    """Convert compact descriptor notation into tagged descriptors.

    Args:
        shorthand: A tagged descriptor, a primitive name, a callable,
            a list/tuple (one item for homogeneous arrays, two or more
            for fixed tuples), a set of alternatives, or a mapping of
            field descriptors.

    Returns:
        Equivalent tagged descriptor.

    Raises:
        DocketDescriptorError: If the shorthand is empty or unsupported.
    """
    if isinstance(shorthand, DESCRIPTOR_TYPES):
        return shorthand
    if isinstance(shorthand, str):
        return Primitive(shorthand)
    if isinstance(shorthand, (list, tuple)):
        return _parse_sequence(shorthand)
    if isinstance(shorthand, Set):
        return Alternatives(tuple(parse_descriptor(option) for option in shorthand))
    if isinstance(shorthand, Mapping):
        return ObjectShape(
            {str(key): parse_descriptor(value) for key, value in shorthand.items()}
        )
    if callable(shorthand):
        return Predicate(shorthand)
    raise DocketDescriptorError(
        f"Unsupported type descriptor {shorthand!r} of type {type(shorthand).__name__}."
    )


def _parse_sequence(shorthand: list[Any] | tuple[Any, ...]) -> TypeDescriptor:
    """Split the arity-overloaded array shorthand."""
    if not shorthand:
        raise DocketDescriptorError(
            "Type descriptor array requires at least one item."
        )
    if len(shorthand) == 1:
        return HomogeneousArray(parse_descriptor(shorthand[0]))
    return FixedTuple(tuple(parse_descriptor(item) for item in shorthand))


def _require_descriptor(candidate: Any, role: str) -> None:
    if not isinstance(candidate, DESCRIPTOR_TYPES):
        raise DocketDescriptorError(
            f"{role} must be a type descriptor, got {candidate!r}. "
            "Use parse_descriptor() to convert shorthand notation."
        )
