"""Tests for package-reference delegation."""

import pytest
from amplifier_bootstrap import AmbiguousPackageReferenceError
from amplifier_bootstrap import BootstrapConfig
from amplifier_bootstrap import BootstrapRequest
from amplifier_bootstrap import InstallOutcome
from amplifier_bootstrap import SoftwareIdentity
from amplifier_bootstrap import UnresolvableReferenceError
from amplifier_bootstrap.constants import MediaType
from amplifier_bootstrap.delegation import PackageReferenceStrategy
from amplifier_bootstrap.delegation import delegate_options
from amplifier_bootstrap.exceptions import NoUnitsInstalledError
from fakes import FakeCatalog
from fakes import FakeDelegate
from fakes import descriptor
from fakes import media_link
from fakes import reference
from fakes import unit

REF = "powershellget:PSProvider/1.0"
PKG = descriptor("PSProvider", "1.0.0.0", media_link(MediaType.PACKAGE_REFERENCE, href=REF))


def _strategy(catalog, host):
    return PackageReferenceStrategy(catalog, host, BootstrapConfig())


@pytest.mark.asyncio
async def test_streams_units_and_rescans(host):
    delegate = FakeDelegate("NuGet", [unit("a"), unit("b")])
    catalog = FakeCatalog(references={REF: [reference(delegate)]})
    request = BootstrapRequest(is_elevated=True)

    outcome = await _strategy(catalog, host).attempt_install(PKG, PKG.links[0], request)

    assert outcome is InstallOutcome.SUCCEEDED
    assert [r.name for r in request.results if isinstance(r, SoftwareIdentity)] == ["a", "b"]
    assert request.results[-1] == PKG
    assert host.reloads == 1
    assert host.named_loads == []


@pytest.mark.asyncio
async def test_module_package_manager_loads_by_path(host):
    delegate = FakeDelegate("PowerShellGet", [unit("PSProvider", full_path="/modules/PSProvider/1.0")])
    catalog = FakeCatalog(references={REF: [reference(delegate)]})

    outcome = await _strategy(catalog, host).attempt_install(PKG, PKG.links[0], BootstrapRequest(is_elevated=True))

    assert outcome is InstallOutcome.SUCCEEDED
    assert host.named_loads == [("PowerShell", "/modules/PSProvider/1.0")]
    assert host.reloads == 0


@pytest.mark.asyncio
async def test_cancel_after_first_unit(host):
    delegate = FakeDelegate("PowerShellGet", [unit("one"), unit("two"), unit("three")])
    catalog = FakeCatalog(references={REF: [reference(delegate)]})
    request = BootstrapRequest(is_elevated=True)
    request.on_yield = lambda item: request.cancel()

    outcome = await _strategy(catalog, host).attempt_install(PKG, PKG.links[0], request)

    assert outcome is InstallOutcome.CANCELED
    assert [r.name for r in request.results] == ["one"]
    assert delegate.streams[0].canceled
    assert delegate.streams[0].produced == 1
    assert host.reloads == 0
    assert host.named_loads == []


@pytest.mark.asyncio
async def test_scope_forced_to_current_user_when_not_elevated(host):
    delegate = FakeDelegate("PowerShellGet", [unit("m", full_path="/m")])
    catalog = FakeCatalog(references={REF: [reference(delegate)]})
    request = BootstrapRequest(options={"scope": "AllUsers", "Force": "true"}, is_elevated=False)

    await _strategy(catalog, host).attempt_install(PKG, PKG.links[0], request)

    options = delegate.calls[0][1]
    assert options["Scope"] == ("CurrentUser",)
    assert "scope" not in options
    assert options["Force"] == ("true",)


def test_elevated_scope_passes_through():
    request = BootstrapRequest(options={"Scope": "AllUsers"}, is_elevated=True)
    assert delegate_options(request) == {"Scope": ("AllUsers",)}

    assert delegate_options(BootstrapRequest(is_elevated=True)) == {}
    assert delegate_options(BootstrapRequest(is_elevated=False)) == {"Scope": ("CurrentUser",)}


@pytest.mark.asyncio
async def test_unresolvable_reference(host):
    with pytest.raises(UnresolvableReferenceError, match="Unable to resolve package reference"):
        await _strategy(FakeCatalog(), host).attempt_install(PKG, PKG.links[0], BootstrapRequest())


@pytest.mark.asyncio
async def test_ambiguous_reference_does_not_guess(host):
    first = FakeDelegate("PowerShellGet", [unit("x")])
    second = FakeDelegate("NuGet", [unit("y")])
    catalog = FakeCatalog(references={REF: [reference(first), reference(second)]})

    with pytest.raises(AmbiguousPackageReferenceError, match="resolves to 2 packages"):
        await _strategy(catalog, host).attempt_install(PKG, PKG.links[0], BootstrapRequest())

    assert first.calls == []
    assert second.calls == []


@pytest.mark.asyncio
async def test_empty_stream_fails(host):
    catalog = FakeCatalog(references={REF: [reference(FakeDelegate("NuGet"))]})

    with pytest.raises(NoUnitsInstalledError):
        await _strategy(catalog, host).attempt_install(PKG, PKG.links[0], BootstrapRequest())

    assert host.reloads == 0
