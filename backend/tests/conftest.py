# backend/tests/conftest.py
"""
Pytest configuration for the Notion → Clockify bridge tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import notion_clockify.*` works correctly in tests.
- Ensures required environment variables for tests are set
  with safe dummy values (e.g., CLOCKIFY_API_KEY, NOTION_WEBHOOK_SECRET).
- Provides an in-memory SQLite project store and a fake Clockify client.
"""

import os
import sys
from pathlib import Path

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        # Insert at the beginning so it has priority over site-packages, etc.
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    In real environments, proper values should be provided via .env or system env.
    """
    os.environ.setdefault("CLOCKIFY_API_KEY", "dummy-clockify-api-key-for-tests")
    os.environ.setdefault("CLOCKIFY_WORKSPACE_ID", "dummy-workspace")
    os.environ.setdefault("NOTION_WEBHOOK_SECRET", "test-secret")
    os.environ.setdefault("DATABASE_URL", "sqlite://")


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()

from fakes import FakeClockifyClient  # noqa: E402
from notion_clockify.clockify.config import get_clockify_config  # noqa: E402
from notion_clockify.dependencies import reset_dependencies  # noqa: E402
from notion_clockify.projects.database import build_engine, init_db  # noqa: E402
from notion_clockify.projects.repository import ProjectMappingStore  # noqa: E402
from notion_clockify.tracking.state import ActiveTaskRegistry, reset_state  # noqa: E402
from notion_clockify.utils.auth import get_webhook_secret  # noqa: E402


def _clear_caches() -> None:
    get_webhook_secret.cache_clear()
    get_clockify_config.cache_clear()
    reset_dependencies()
    reset_state()


@pytest.fixture(autouse=True)
def _reset_cached_state():
    """lru_cache / シングルトンをテストごとに破棄する。"""
    _clear_caches()
    yield
    _clear_caches()


@pytest.fixture
def store():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield ProjectMappingStore(engine)
    engine.dispose()


@pytest.fixture
def registry() -> ActiveTaskRegistry:
    return ActiveTaskRegistry()


@pytest.fixture
def fake_clockify() -> FakeClockifyClient:
    return FakeClockifyClient()
