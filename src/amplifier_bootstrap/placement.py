"""Assembly placement - drop a single provider module into <root>/<name>/<version>/.

The placed file is not loaded here. Whoever asked for the install reloads the
host's providers afterwards.
"""

import asyncio
import logging
import shutil
from pathlib import Path

from .constants import Messages
from .exceptions import CopyError
from .exceptions import DestinationPathNotSetError
from .exceptions import DownloadError
from .exceptions import FileRemovalError
from .exceptions import InvalidFilenameError
from .exceptions import MissingVersionError
from .protocols import DownloadService
from .request import BootstrapRequest
from .request import destination_root
from .schema import ComponentDescriptor
from .schema import InstallOutcome
from .schema import Link
from .utils import try_hard_to_delete
from .utils import version_folder

logger = logging.getLogger(__name__)


def _copy_exclusive(source: Path, target: Path) -> None:
    """Copy source to target, failing if target already exists."""
    with open(source, "rb") as src, open(target, "xb") as dst:
        shutil.copyfileobj(src, dst)


class AssemblyPlacementStrategy:
    """Install a provider whose media is a single module file."""

    def __init__(self, downloader: DownloadService, default_root: Path | None = None):
        self.downloader = downloader
        self.default_root = default_root

    async def attempt_install(
        self,
        descriptor: ComponentDescriptor,
        link: Link,
        request: BootstrapRequest,
    ) -> InstallOutcome:
        """
        Download the module and place it at <root>/<name>/<version>/<targetFilename>.

        An existing target is deleted first; if it can't be deleted (e.g. the
        running host has it loaded) the attempt fails rather than overwriting.

        Args:
            descriptor: Provider being installed
            link: Installation-media link naming the target file
            request: Host request

        Returns:
            InstallOutcome.SUCCEEDED

        Raises:
            DestinationPathNotSetError: Destination root doesn't exist (fatal)
            InvalidFilenameError: Link has no target filename
            MissingVersionError: Descriptor has no version
            DownloadError: Payload couldn't be fetched or validated
            FileRemovalError: Old target file couldn't be removed
            CopyError: Copy failed or target missing afterwards
        """
        fast_path = descriptor.fast_path
        request.verbose(f"Installing package '{fast_path}'")

        root = destination_root(request, self.default_root)
        if root is None or not root.is_dir():
            raise DestinationPathNotSetError(
                Messages.DESTINATION_PATH_NOT_SET.format(root),
                context={"destination_root": str(root)},
            )

        if not link.target_filename or not link.target_filename.strip():
            raise InvalidFilenameError(Messages.INVALID_FILENAME.format(descriptor.name))
        # Only the file name; never let the catalog pick a directory
        target_filename = Path(link.target_filename.replace("\\", "/")).name

        if not descriptor.version.strip():
            raise MissingVersionError(Messages.MISSING_VERSION.format(descriptor.name))

        folder = version_folder(root, descriptor.name, descriptor.version)
        target_file = folder / target_filename

        downloaded = await self.downloader.fetch_and_validate(descriptor.name, descriptor)
        if downloaded is None:
            raise DownloadError(Messages.DOWNLOAD_FAILED.format(descriptor.name), context={"fast_path": fast_path})

        try:
            if target_file.exists():
                request.debug(f"Removing old file '{target_file}'")
                try_hard_to_delete(target_file)

            if target_file.exists():
                raise FileRemovalError(
                    Messages.UNABLE_TO_REMOVE_FILE.format(target_file),
                    context={"target_file": str(target_file)},
                )

            request.debug(f"Copying file '{downloaded}' to '{target_file}'")
            try:
                await asyncio.to_thread(_copy_exclusive, downloaded, target_file)
            except OSError as e:
                if not isinstance(e, FileExistsError):
                    # No partial module may stay in the version folder
                    try_hard_to_delete(target_file)
                raise CopyError(
                    f"Failed to copy '{downloaded}' to '{target_file}': {e}",
                    context={"source": str(downloaded), "target_file": str(target_file)},
                ) from e

            if not target_file.is_file():
                raise CopyError(f"Target file '{target_file}' missing after copy")

            request.verbose(f"Installed package '{descriptor.name}' to '{target_file}'")
            request.yield_package(descriptor)
            return InstallOutcome.SUCCEEDED
        finally:
            try_hard_to_delete(downloaded)
