"""Core constants used across Docket modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".docket")
COLLECTIONS_DIR_NAME = "collections"
COLLECTION_FILE_SUFFIX = ".json"
COLLECTION_NAME_PATTERN = r"^[A-Za-z0-9_-]+$"
NEXT_ID_FIELD = "nextId"
ITEMS_FIELD = "items"
ENTITY_ID_FIELD = "id"
FIRST_ENTITY_ID = 1
DEFAULT_JSON_INDENT = 4
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
RECOVERY_POLICY_RESET = "reset"
RECOVERY_POLICY_BACKUP = "backup"
RECOVERY_POLICY_RAISE = "raise"
DEFAULT_RECOVERY_POLICY = RECOVERY_POLICY_BACKUP
SUPPORTED_RECOVERY_POLICIES = (
    RECOVERY_POLICY_RESET,
    RECOVERY_POLICY_BACKUP,
    RECOVERY_POLICY_RAISE,
)
CORRUPT_BACKUP_INFIX = ".corrupt-"
TEMP_FILE_SUFFIX = ".tmp"
SUPPORTED_PRIMITIVE_NAMES = (
    "number",
    "string",
    "boolean",
    "undefined",
    "object",
    "function",
)
