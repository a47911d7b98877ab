import sys
from pathlib import Path

import pytest

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.i18n`) works during pytest collection,
# whatever directory pytest is invoked from.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from infrastructure.i18n import InMemoryCacheStore  # noqa: E402
from tests.factories.i18n import CDN_URL  # noqa: E402


@pytest.fixture
def cdn_url():
    """Base URL of the fake CDN used across tests."""
    return CDN_URL


@pytest.fixture
def memory_cache():
    """Fresh in-memory cache store."""
    return InMemoryCacheStore()
