"""Python SDK for named entity collections.

This module maps collection names to document files under the
configured data root and hands out initialized entity stores.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from core.config import DocketConfig
from core.constants import (
    COLLECTION_FILE_SUFFIX,
    COLLECTION_NAME_PATTERN,
    COLLECTIONS_DIR_NAME,
)
from core.errors import DocketConfigError
from core.logging_config import configure_logging
from core.types import DumpFn, ReviveFn
from store.entity_store import EntityStore


class DocketClient:
    """Primary SDK entry point for collection workflows."""

    def __init__(self, config: DocketConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or DocketConfig.from_env()
        configure_logging(self._config.log_level)
        self._collections_root = self._config.data_root / COLLECTIONS_DIR_NAME

    @property
    def config(self) -> DocketConfig:
        return self._config

    def collection(
        self,
        name: str,
        item_descriptor: Any,
        revive: ReviveFn | None = None,
        dump: DumpFn | None = None,
    ) -> EntityStore[Any]:
        """Open a named collection, creating its document if missing.

        Args:
            name: Collection name made of letters, digits, "_" or "-".
            item_descriptor: Tagged descriptor or shorthand for stored items.
            revive: Optional transform from wire items to runtime items.
            dump: Optional transform from runtime items to wire items.

        Returns:
            Initialized entity store.

        Raises:
            DocketConfigError: If the collection name is invalid.
        """
        store: EntityStore[Any] = EntityStore(
            self._collection_path(name),
            item_descriptor,
            revive=revive,
            dump=dump,
            config=self._config,
        )
        store.initialize()
        return store

    def list_collections(self) -> list[str]:
        """List collection names present under the data root."""
        if not self._collections_root.is_dir():
            return []
        return sorted(
            path.stem
            for path in self._collections_root.glob(f"*{COLLECTION_FILE_SUFFIX}")
            if path.is_file()
        )

    def _collection_path(self, name: str) -> Path:
        if not re.fullmatch(COLLECTION_NAME_PATTERN, name):
            raise DocketConfigError(
                f"Invalid collection name '{name}'. "
                "Use letters, digits, '_' or '-' only."
            )
        return self._collections_root / f"{name}{COLLECTION_FILE_SUFFIX}"
