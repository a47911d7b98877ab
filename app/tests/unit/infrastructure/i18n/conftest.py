"""Feature-level fixtures for i18n system tests.

Provides cache stores, a CDN engine wired to a fake CDN, translators
that are shut down after each test, and YAML bundle directories.
"""

import pytest
import yaml

from infrastructure.i18n import (
    CdnClient,
    CdnSyncEngine,
    FileCacheStore,
    Translator,
    YAMLBundleLookup,
)
from tests.factories.i18n import FakeCdn


@pytest.fixture
def file_cache(tmp_path):
    """File-backed cache store rooted in a temporary directory."""
    return FileCacheStore(tmp_path / "cache")


@pytest.fixture
def fake_cdn():
    """Canned CDN responses served through a mocked requests session."""
    return FakeCdn()


@pytest.fixture
def cdn_client(fake_cdn):
    return CdnClient(timeout=1.0, session=fake_cdn.session)


@pytest.fixture
def cdn_engine(cdn_client, memory_cache):
    """Sync engine writing to the shared in-memory cache."""
    return CdnSyncEngine(cdn_client, cache=memory_cache)


@pytest.fixture
def make_translator(memory_cache, cdn_engine):
    """Build translators sharing the test cache; all are shut down on teardown."""
    created = []

    def _make(**kwargs):
        kwargs.setdefault("cache", memory_cache)
        kwargs.setdefault("engine", cdn_engine)
        translator = Translator(**kwargs)
        created.append(translator)
        return translator

    yield _make

    for translator in created:
        translator.shutdown(wait=True)


@pytest.fixture
def bundle_dir(tmp_path):
    """Create temporary directory with sample YAML bundle files.

    Returns a directory structure like:
    - Localizable.en.yml
    - Localizable.cs.yml
    - Localizable.pt-BR.yml
    - buttons.cs.yml
    """
    directory = tmp_path / "bundles"
    directory.mkdir()

    files = {
        "Localizable.en.yml": {"greeting": "Hello", "farewell": "Goodbye {0}"},
        "Localizable.cs.yml": {"greeting": "Ahoj"},
        "Localizable.pt-BR.yml": {"greeting": "Olá"},
        "buttons.cs.yml": {"save": "Uložit"},
    }
    for name, data in files.items():
        with open(directory / name, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True)

    return directory


@pytest.fixture
def yaml_bundle(bundle_dir):
    return YAMLBundleLookup(bundle_dir)
