"""Runtime configuration model for Docket.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RECOVERY_POLICY,
    SUPPORTED_LOG_LEVELS,
    SUPPORTED_RECOVERY_POLICIES,
)
from core.errors import DocketConfigError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class DocketConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for collection files.
        json_indent: Indentation width of written documents.
        recovery_policy: What initialize does with an unreadable document.
        serialize_writes: Whether operations on one file path are serialized.
        log_level: Minimum structured log level.
    """

    data_root: Path = DEFAULT_DATA_ROOT
    json_indent: int = DEFAULT_JSON_INDENT
    recovery_policy: str = DEFAULT_RECOVERY_POLICY
    serialize_writes: bool = True
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "DocketConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DocketConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("DOCKET_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            json_indent=_parse_json_indent(
                os.getenv("DOCKET_JSON_INDENT", str(DEFAULT_JSON_INDENT))
            ),
            recovery_policy=_parse_choice(
                "DOCKET_RECOVERY_POLICY",
                os.getenv("DOCKET_RECOVERY_POLICY", DEFAULT_RECOVERY_POLICY),
                SUPPORTED_RECOVERY_POLICIES,
            ),
            serialize_writes=_parse_flag(
                "DOCKET_SERIALIZE_WRITES", os.getenv("DOCKET_SERIALIZE_WRITES", "true")
            ),
            log_level=_parse_choice(
                "DOCKET_LOG_LEVEL",
                os.getenv("DOCKET_LOG_LEVEL", DEFAULT_LOG_LEVEL),
                SUPPORTED_LOG_LEVELS,
            ),
        )


def _parse_json_indent(raw_value: str) -> int:
    """Parse the document indentation environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Non-negative indentation width.

    Raises:
        DocketConfigError: If value is not a non-negative integer.
    """
    try:
        indent = int(raw_value)
    except ValueError as error:
        raise DocketConfigError(
            "Invalid DOCKET_JSON_INDENT value: "
            f"expected integer, got '{raw_value}'. "
            "Set DOCKET_JSON_INDENT to a numeric value."
        ) from error
    if indent < 0:
        raise DocketConfigError(
            f"Invalid DOCKET_JSON_INDENT value: expected >= 0, got {indent}."
        )
    return indent


def _parse_choice(env_name: str, raw_value: str, choices: tuple[str, ...]) -> str:
    """Parse an enumerated environment value case-insensitively."""
    value = raw_value.strip().lower()
    if value not in choices:
        raise DocketConfigError(
            f"Invalid {env_name} value: got '{raw_value}'. "
            f"Use one of: {', '.join(choices)}."
        )
    return value


def _parse_flag(env_name: str, raw_value: str) -> bool:
    """Parse a boolean environment value."""
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise DocketConfigError(
        f"Invalid {env_name} value: expected a boolean, got '{raw_value}'. "
        "Use true/false, yes/no, on/off or 1/0."
    )
