"""Shared typed models.

This module defines the persisted document model used by the codec
and the entity store, plus the callable aliases they accept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

ReviveFn = Callable[[Any], Any]
DumpFn = Callable[[Any], Any]


@dataclass(frozen=True)
class StorageDocument(Generic[T]):
    """Full contents of one collection file.

    Attributes:
        next_id: Id the next inserted entity will receive.
        items: Entities in insertion order.
    """

    next_id: int
    items: list[T]
