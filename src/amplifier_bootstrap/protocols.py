"""Protocols for the collaborators the bootstrapper depends on.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.

The library doesn't know how to download, validate, run native installers or
load plugins. Apps provide implementations of these interfaces.
"""

from collections.abc import AsyncIterator
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from typing import runtime_checkable

from .schema import ComponentDescriptor
from .schema import InstalledComponentRecord
from .schema import SoftwareIdentity


class InstallStream(Protocol):
    """Cancellable lazy sequence of units installed by a delegate package system."""

    def __aiter__(self) -> AsyncIterator[SoftwareIdentity]: ...

    async def __anext__(self) -> SoftwareIdentity: ...

    def cancel(self) -> None:
        """Ask the delegate to stop installing. Results already produced stand."""
        ...


@runtime_checkable
class DelegatePackageSystem(Protocol):
    """Another, already-installed package system that can install a package itself."""

    name: str

    def install(self, package: SoftwareIdentity, options: Mapping[str, Sequence[str]]) -> InstallStream:
        """Start installing package, returning a stream of installed units.

        Args:
            package: Package resolved from this system's own catalog
            options: Install options (option name -> values)
        """
        ...


@dataclass(frozen=True)
class ResolvedReference:
    """A canonical-id lookup hit: the package and the system that owns it."""

    package: SoftwareIdentity
    system: DelegatePackageSystem


class CatalogService(Protocol):
    """Source of truth for bootstrappable providers.

    Feed format and parsing are the implementation's business.
    """

    def list_candidates(self) -> Iterable[ComponentDescriptor]:
        """Lazily enumerate every provider descriptor in the catalog (duplicates allowed)."""
        ...

    def resolve_by_canonical_id(self, canonical_id: str) -> Sequence[ResolvedReference]:
        """Resolve a package reference (e.g. "nuget:foo/1.0") via installed package systems."""
        ...


class DownloadService(Protocol):
    """Downloads a provider payload and validates it (signature, hash)."""

    async def fetch_and_validate(self, name: str, descriptor: ComponentDescriptor) -> Path | None:
        """Fetch payload to a temporary file.

        Returns:
            Path to a local temporary file the caller owns, or None on failure
        """
        ...


class NativeInstallerService(Protocol):
    """Runs native installer packages (MSI/MSU), including any elevation."""

    async def run(self, file_path: Path, args: str = "") -> bool:
        """Run installer, returning True on success."""
        ...


class HostRegistry(Protocol):
    """The host's plugin registry."""

    def reload_known_components(self) -> None:
        """Rescan and load providers the host knows about."""
        ...

    def dynamically_registered_components(self) -> Iterable[InstalledComponentRecord]:
        """Providers the running host has loaded from outside the destination layout."""
        ...

    def load_component_via_named_system(self, system_name: str, path: str) -> None:
        """Ask a named plugin system (e.g. "PowerShell") to load the component at path."""
        ...
