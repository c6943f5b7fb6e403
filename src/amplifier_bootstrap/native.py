"""Native installer delegation - hand MSI/MSU media to the host's installer runner."""

import logging

from .constants import Messages
from .exceptions import DownloadError
from .exceptions import NativeInstallerError
from .protocols import DownloadService
from .protocols import HostRegistry
from .protocols import NativeInstallerService
from .request import BootstrapRequest
from .schema import ComponentDescriptor
from .schema import InstallOutcome
from .schema import Link
from .utils import try_hard_to_delete

logger = logging.getLogger(__name__)


class NativeInstallerStrategy:
    """Install a provider by running its native installer package once."""

    def __init__(
        self,
        downloader: DownloadService,
        installer: NativeInstallerService,
        host: HostRegistry,
    ):
        self.downloader = downloader
        self.installer = installer
        self.host = host

    async def attempt_install(
        self,
        descriptor: ComponentDescriptor,
        link: Link,
        request: BootstrapRequest,
    ) -> InstallOutcome:
        """
        Download, validate and run the installer; no retry.

        The installer may drop providers anywhere, so on success the host is
        asked to rescan its known components.

        Raises:
            DownloadError: Payload couldn't be fetched or validated
            NativeInstallerError: Installer reported failure
        """
        downloaded = await self.downloader.fetch_and_validate(descriptor.name, descriptor)
        if downloaded is None:
            raise DownloadError(
                Messages.DOWNLOAD_FAILED.format(descriptor.name),
                context={"fast_path": descriptor.fast_path},
            )

        try:
            logger.info(f"Running native installer for '{descriptor.name}' from {downloaded}")
            if not await self.installer.run(downloaded, ""):
                raise NativeInstallerError(
                    Messages.FAILED_PROVIDER_BOOTSTRAP.format(descriptor.fast_path),
                    context={"file": str(downloaded)},
                )
        finally:
            try_hard_to_delete(downloaded)

        request.yield_package(descriptor)
        self.host.reload_known_components()
        return InstallOutcome.SUCCEEDED
