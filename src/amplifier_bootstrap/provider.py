"""Bootstrap provider - the surface the host calls.

Every operation reports through the request: results via its yield methods,
failures as structured ErrorRecords. Exceptions never escape to the host.
"""

import asyncio
import logging

from .archive import ArchiveInstallerStrategy
from .config import BootstrapConfig
from .constants import DYNAMIC_OPTIONS
from .constants import FEATURES
from .constants import OPTION_ALL_VERSIONS
from .constants import PROVIDER_NAME
from .delegation import PackageReferenceStrategy
from .dispatch import StrategyDispatcher
from .exceptions import BootstrapError
from .exceptions import ErrorCategory
from .locator import PackageLocator
from .native import NativeInstallerStrategy
from .orchestrator import ArtifactInstaller
from .placement import AssemblyPlacementStrategy
from .protocols import CatalogService
from .protocols import DownloadService
from .protocols import HostRegistry
from .protocols import NativeInstallerService
from .request import BootstrapRequest
from .request import destination_root
from .scanner import InstalledComponentScanner
from .schema import DynamicOption
from .schema import InstallOutcome
from .schema import PackageSource

logger = logging.getLogger(__name__)


class BootstrapProvider:
    """
    Find, list and install bootstrappable package providers.

    Apps inject collaborators (catalog, downloader, native installer, host
    registry) and policy (BootstrapConfig).

    Example:
        >>> provider = BootstrapProvider(config, catalog, downloader, installer, host)
        >>> await provider.initialize()
        >>> request = BootstrapRequest(options={"DestinationPath": "/opt/providers"})
        >>> provider.find_package("nuget", None, None, None, request)
        >>> await provider.install_package(request.results[0].fast_path, request)
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        config: BootstrapConfig,
        catalog: CatalogService,
        downloader: DownloadService,
        native_installer: NativeInstallerService,
        host: HostRegistry,
    ):
        self.config = config
        self.catalog = catalog
        self.host = host
        self.locator = PackageLocator(catalog, self_name=config.self_name)
        self.scanner = InstalledComponentScanner(
            self.locator,
            host=host,
            module_extension=config.native_module_extension,
        )
        self.dispatcher = StrategyDispatcher(
            assembly=AssemblyPlacementStrategy(downloader, config.destination_root),
            native=NativeInstallerStrategy(downloader, native_installer, host),
            archive=ArchiveInstallerStrategy(downloader, config.destination_root, config.native_module_extension),
            reference=PackageReferenceStrategy(catalog, host, config),
        )
        self.installer = ArtifactInstaller(self.locator, self.dispatcher)
        self.bootstrappable_names: list[str] = []
        self._priming_task: asyncio.Task | None = None

    async def initialize(self) -> None:
        """Start priming the list of bootstrappable names in the background.

        Returns immediately. Priming failures are only logged: by the time
        they happen the caller that triggered them may be long gone.
        """
        logger.debug("Initialize bootstrapper")
        self._priming_task = asyncio.get_running_loop().create_task(self._prime_names())
        self._priming_task.add_done_callback(_log_priming_failure)

    async def _prime_names(self) -> None:
        self.bootstrappable_names = await asyncio.to_thread(self.locator.names)
        logger.debug(f"Primed {len(self.bootstrappable_names)} bootstrappable provider names")

    def get_features(self, request: BootstrapRequest) -> None:
        request.debug(f"Calling '{self.name}::GetFeatures'")
        for feature, values in FEATURES.items():
            request.yield_feature(feature, values)

    def get_dynamic_options(self, category: str | None, request: BootstrapRequest) -> None:
        request.debug(f"Calling '{self.name}::GetDynamicOptions ({category})'")
        for name, option_type, required, permitted in DYNAMIC_OPTIONS.get((category or "").lower(), ()):
            request.yield_dynamic_option(
                DynamicOption(name=name, type=option_type, is_required=required, permitted_values=permitted)
            )

    def resolve_package_sources(self, request: BootstrapRequest) -> None:
        request.debug(f"Calling '{self.name}::ResolvePackageSources'")
        for location in self.config.feed_locations:
            request.yield_package_source(PackageSource(name=location, location=location))

    def find_package(
        self,
        name: str | None,
        required_version: str | None,
        minimum_version: str | None,
        maximum_version: str | None,
        request: BootstrapRequest,
    ) -> None:
        """Yield catalog providers matching the query (AllVersions option honored)."""
        request.debug(
            f"Calling '{self.name}::FindPackage' '{name}','{required_version}','{minimum_version}','{maximum_version}'"
        )
        try:
            results = self.locator.locate(
                name,
                required_version,
                minimum_version,
                maximum_version,
                all_versions=request.get_option_flag(OPTION_ALL_VERSIONS),
            )
            for descriptor in results:
                if not request.yield_package(descriptor):
                    break
        except BootstrapError as e:
            request.report(e, name or "")

    def get_installed_packages(
        self,
        name: str | None,
        required_version: str | None,
        minimum_version: str | None,
        maximum_version: str | None,
        request: BootstrapRequest,
    ) -> None:
        """Yield installed providers that the catalog knows about."""
        request.debug(
            f"Calling '{self.name}::GetInstalledPackages' "
            f"'{name}','{required_version}','{minimum_version}','{maximum_version}'"
        )
        root = destination_root(request, self.config.destination_root)
        try:
            for installed in self.scanner.scan(root, name, required_version, minimum_version, maximum_version):
                if not request.yield_package(installed.descriptor):
                    break
        except BootstrapError as e:
            request.report(e, name or "")

    async def install_package(self, fast_path: str, request: BootstrapRequest) -> InstallOutcome:
        """
        Install the provider identified by fast_path.

        Returns:
            SUCCEEDED, CANCELED, or FAILED (details in request.errors)
        """
        request.debug(f"Calling '{self.name}::InstallPackage'")
        try:
            return await self.installer.install(fast_path, request)
        except BootstrapError as e:
            request.report(e, fast_path)
        except Exception as e:
            logger.exception(f"Unexpected failure installing '{fast_path}'")
            request.error(ErrorCategory.INVALID_OPERATION, fast_path, f"Failed to install '{fast_path}': {e}")
        return InstallOutcome.FAILED


def _log_priming_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Unable to prime bootstrappable provider names: {exc}", exc_info=exc)
