"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def pytest_sessionstart() -> None:
    """Add src and project root to sys.path for test imports."""
    for import_root in (_PROJECT_ROOT / "src", _PROJECT_ROOT):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture
def docket_config(tmp_path: Path):
    """Environment config rooted at the test's temporary directory."""
    from core.config import DocketConfig

    return replace(DocketConfig.from_env(), data_root=tmp_path)
