"""
Shared test fixtures and configuration.
"""

from datetime import timedelta
from pathlib import Path

import pytest

from pyvm.adapters.archive.zip import ZipArchiver
from pyvm.adapters.mock import MockArchiver, MockDownloader, MockProcessRunner
from pyvm.adapters.registry import AdapterRegistry
from pyvm.core import context
from pyvm.core.models.settings import Settings
from pyvm.core.models.version import VersionCatalog
from pyvm.core.services.catalog.cache import CatalogCache
from pyvm.core.services.catalog.source import CatalogSource
from tests.helpers import LEGACY_INDEX, MODERN_INDEX, NOW, NUGET


@pytest.fixture(autouse=True)
def _reset_app_root():
    """Keep the process-wide app root from leaking between tests."""
    yield
    context.set_app_root(None)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temp dir; links are made directly, never elevated."""
    return Settings(
        app_root=tmp_path / "app",
        alias_path=str(tmp_path / "alias" / "Python"),
        arch="amd64",
        elevate=False,
    )


@pytest.fixture
def downloader() -> MockDownloader:
    mock = MockDownloader()
    mock.set_json(f"{NUGET}/python/index.json", MODERN_INDEX)
    mock.set_json(f"{NUGET}/python2/index.json", LEGACY_INDEX)
    return mock


@pytest.fixture
def runner() -> MockProcessRunner:
    return MockProcessRunner()


@pytest.fixture
def registry(downloader: MockDownloader, runner: MockProcessRunner) -> AdapterRegistry:
    """Mock network and processes, real zip handling."""
    reg = AdapterRegistry()
    reg.register(downloader)
    reg.register(ZipArchiver())
    reg.register(runner)
    return reg


@pytest.fixture
def mock_archiver_registry(downloader: MockDownloader, runner: MockProcessRunner) -> AdapterRegistry:
    reg = AdapterRegistry()
    reg.register(downloader)
    reg.register(MockArchiver())
    reg.register(runner)
    return reg


@pytest.fixture
def source(settings: Settings, downloader: MockDownloader) -> CatalogSource:
    return CatalogSource(settings, downloader)


@pytest.fixture
def catalog(source: CatalogSource) -> VersionCatalog:
    return source.fetch(now=NOW, ttl=timedelta(hours=24))


@pytest.fixture
def cache(source: CatalogSource, settings: Settings) -> CatalogCache:
    return CatalogCache(source, settings.cache_file, ttl=timedelta(hours=24))
