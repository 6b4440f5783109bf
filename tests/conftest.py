"""
Pytest configuration and shared fixtures for llvmenv tests.
"""

import logging
from pathlib import Path

import pytest

from llvmenv.build.registry import BuildRegistry
from llvmenv.build.resolver import CurrentResolver
from llvmenv.config.store import ConfigStore
from llvmenv.core.directory import CONFIG_ENV_VAR, ENTRIES_FILE_NAME, ROOT_ENV_VAR
from tests.utils import ConfigBuilder, RecordingRunner


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast tests with no external tools")
    config.addinivalue_line(
        "markers",
        "integration: tests that exercise several components together",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's own llvmenv setup out of every test."""
    monkeypatch.delenv(ROOT_ENV_VAR, raising=False)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI installs so later tests never log to a closed stream."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if type(handler) is logging.StreamHandler:
            root_logger.removeHandler(handler)


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Empty llvmenv root directory."""
    root = tmp_path / "llvmenv-root"
    root.mkdir()
    return root


@pytest.fixture
def registry(root: Path) -> BuildRegistry:
    return BuildRegistry(root)


@pytest.fixture
def resolver(root: Path, registry: BuildRegistry) -> CurrentResolver:
    return CurrentResolver(root, registry)


@pytest.fixture
def runner() -> RecordingRunner:
    """Process runner that records commands instead of running them."""
    return RecordingRunner()


@pytest.fixture
def make_build(root: Path):
    """Factory creating installed build prefixes under the root."""

    def _make(name: str) -> Path:
        prefix = root / name
        (prefix / "bin").mkdir(parents=True)
        return prefix

    return _make


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Nested project directory tree outside the root."""
    nested = tmp_path / "work" / "project" / "src" / "lib"
    nested.mkdir(parents=True)
    return tmp_path / "work" / "project"


@pytest.fixture
def config_store(root: Path):
    """Factory writing an entries file and returning a ConfigStore for it."""

    def _store(builder: ConfigBuilder) -> ConfigStore:
        config_file = builder.write(root / ENTRIES_FILE_NAME)
        return ConfigStore(config_file, root)

    return _store
