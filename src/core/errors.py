"""Docket exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class DocketError(Exception):
    """Base exception for all Docket failures."""


class DocketConfigError(DocketError):
    """Raised for invalid runtime configuration."""


class DocketDescriptorError(DocketError):
    """Raised for malformed type descriptors."""


class DocketConformanceError(DocketError):
    """Raised when parsed data does not satisfy its type descriptor.

    Attributes:
        value: The nonconforming payload, kept for diagnostics.
    """

    def __init__(self, message: str, value: object) -> None:
        super().__init__(message)
        self.value = value


class DocketParseError(DocketError):
    """Raised when stored bytes are not well-formed JSON."""


class DocketIoError(DocketError):
    """Raised when a document file cannot be read or written."""


class DocketEncodeError(DocketError):
    """Raised when an item cannot be serialized into a document."""


class DocketInvalidIdError(DocketError):
    """Raised when an entity id is not a positive integer."""


class DocketEntityNotFoundError(DocketError):
    """Raised when no entity with the requested id exists.

    Attributes:
        entity_id: The id that was looked up.
    """

    def __init__(self, message: str, entity_id: int) -> None:
        super().__init__(message)
        self.entity_id = entity_id
