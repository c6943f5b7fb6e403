"""Package-reference delegation - let another installed package system do the install.

The link's href is a canonical id owned by some other package system (e.g.
"powershellget:PackageManagementProviderResource/1.0"). We resolve it through
the catalog, hand the install to that system, and stream its results back.
"""

import logging
from collections.abc import Mapping
from collections.abc import Sequence

from .config import BootstrapConfig
from .constants import OPTION_SCOPE
from .constants import SCOPE_CURRENT_USER
from .constants import Messages
from .exceptions import AmbiguousPackageReferenceError
from .exceptions import NoUnitsInstalledError
from .exceptions import UnresolvableReferenceError
from .protocols import CatalogService
from .protocols import HostRegistry
from .request import BootstrapRequest
from .schema import ComponentDescriptor
from .schema import InstallOutcome
from .schema import Link
from .schema import SoftwareIdentity

logger = logging.getLogger(__name__)


def delegate_options(request: BootstrapRequest) -> dict[str, Sequence[str]]:
    """
    Options to pass to the delegate.

    A non-elevated process can't install machine-wide, so Scope is forced to
    CurrentUser whatever the caller asked for.
    """
    options: dict[str, Sequence[str]] = {
        key: values for key, values in request.options.items() if key.casefold() != OPTION_SCOPE.casefold()
    }
    scope = request.get_option_values(OPTION_SCOPE)
    if not request.is_elevated:
        scope = (SCOPE_CURRENT_USER,)
    if scope:
        options[OPTION_SCOPE] = scope
    return options


class PackageReferenceStrategy:
    """Install a provider by delegating to the package system that owns its reference."""

    def __init__(self, catalog: CatalogService, host: HostRegistry, config: BootstrapConfig):
        self.catalog = catalog
        self.host = host
        self.config = config

    async def attempt_install(
        self,
        descriptor: ComponentDescriptor,
        link: Link,
        request: BootstrapRequest,
    ) -> InstallOutcome:
        """
        Resolve link.href to exactly one package and install it through its owner.

        Each installed unit is yielded to the host as it arrives. If the host
        cancels, the delegate's stream is canceled and no more units are read.

        Returns:
            SUCCEEDED, or CANCELED if the host canceled mid-stream

        Raises:
            UnresolvableReferenceError: Reference resolves to no package
            AmbiguousPackageReferenceError: Reference resolves to several packages
            NoUnitsInstalledError: Delegate finished without installing anything
        """
        reference = link.href or ""
        resolved = list(self.catalog.resolve_by_canonical_id(reference))

        if not resolved:
            raise UnresolvableReferenceError(
                Messages.UNABLE_TO_RESOLVE_PACKAGE.format(reference),
                context={"reference": reference},
            )
        if len(resolved) > 1:
            raise AmbiguousPackageReferenceError(
                Messages.AMBIGUOUS_PACKAGE_REFERENCE.format(reference, len(resolved)),
                context={"reference": reference, "count": len(resolved)},
            )

        target = resolved[0]
        options: Mapping[str, Sequence[str]] = delegate_options(request)
        logger.info(f"Delegating install of '{reference}' to '{target.system.name}'")

        stream = target.system.install(target.package, options)
        last_unit: SoftwareIdentity | None = None

        async for unit in stream:
            last_unit = unit
            request.yield_installed_unit(unit)
            if request.is_canceled:
                stream.cancel()
                break

        if request.is_canceled:
            logger.info(f"Install of '{reference}' canceled by host")
            return InstallOutcome.CANCELED

        if last_unit is None:
            raise NoUnitsInstalledError(Messages.NO_UNITS_INSTALLED.format(reference), context={"reference": reference})

        if self.config.is_module_package_manager(target.system.name) and last_unit.full_path:
            # Module-style systems: ask the module host to load it by path instead of rescanning
            self.host.load_component_via_named_system(self.config.module_host_system, last_unit.full_path)
        else:
            self.host.reload_known_components()

        request.yield_package(descriptor)
        return InstallOutcome.SUCCEEDED
