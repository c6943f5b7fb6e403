"""Shared fixtures for bootstrap tests."""

import pytest
from amplifier_bootstrap import BootstrapConfig
from amplifier_bootstrap import BootstrapProvider
from fakes import FakeCatalog
from fakes import FakeDownloader
from fakes import FakeHost
from fakes import FakeNativeInstaller


@pytest.fixture
def destination(tmp_path):
    root = tmp_path / "providers"
    root.mkdir()
    return root


@pytest.fixture
def downloader(tmp_path):
    return FakeDownloader(tmp_path / "downloads")


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def make_provider(destination, downloader, host):
    """Build a BootstrapProvider around a catalog with the shared fakes."""

    def _make(catalog: FakeCatalog, native: FakeNativeInstaller | None = None, **config):
        return BootstrapProvider(
            BootstrapConfig(destination_root=destination, **config),
            catalog,
            downloader,
            native or FakeNativeInstaller(),
            host,
        )

    return _make
