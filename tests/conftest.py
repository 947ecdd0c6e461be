"""
Pytest configuration and shared fixtures for cmakekit tests.
"""

from pathlib import Path

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.catalogs import (
    catalog_3_20,
    multi_platform_catalog,
    catalog_file,
)
from tests.fixtures.archives import (
    nested_tarball,
    fake_archive_installer,
)

from cmakekit.core.platform import HostDescriptor, clear_host_cache


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def linux_amd64() -> HostDescriptor:
    """The host of the 3.20.0 scenario."""
    return HostDescriptor("Linux", "amd64")


@pytest.fixture
def isolated_cache(tmp_path, monkeypatch) -> Path:
    """Point CMAKEKIT_HOME at a temporary directory."""
    cache = tmp_path / "cmakekit-home"
    monkeypatch.setenv("CMAKEKIT_HOME", str(cache))
    return cache


@pytest.fixture(autouse=True)
def _fresh_host_detection():
    """Host detection is cached per process; start every test clean."""
    clear_host_cache()
    yield
    clear_host_cache()
