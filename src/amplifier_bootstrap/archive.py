"""Archive extraction installer - nuget-style packages with tools/ and lib/ folders.

Convention:
- tools/*  -> <root>/<name>/<version>/tools/
- lib/*    -> <root>/<name>/<version>/   (at most one native module)

The downloaded archive and the extraction directory never outlive the attempt.
"""

import asyncio
import logging
import shutil
import zipfile
from pathlib import Path

from .constants import Messages
from .exceptions import AmbiguousModuleError
from .exceptions import ArchiveExtractionError
from .exceptions import CopyError
from .exceptions import DestinationPathNotSetError
from .exceptions import DownloadError
from .exceptions import InvalidFilenameError
from .exceptions import MissingVersionError
from .protocols import DownloadService
from .request import BootstrapRequest
from .request import destination_root
from .schema import ComponentDescriptor
from .schema import InstallOutcome
from .schema import Link
from .utils import is_transient_copy_error
from .utils import temporary_name
from .utils import try_hard_to_delete
from .utils import version_folder

logger = logging.getLogger(__name__)


def _extract(archive: Path, target_dir: Path) -> None:
    with zipfile.ZipFile(archive) as zf:
        zf.extractall(target_dir)


def count_modules(folder: Path, module_extension: str) -> int:
    """Number of files directly in folder with the given extension (case-insensitive)."""
    suffix = module_extension.casefold()
    return sum(1 for f in folder.iterdir() if f.is_file() and f.suffix.casefold() == suffix)


def copy_files_overwriting(source_dir: Path, dest_dir: Path, version_dir: Path) -> list[Path]:
    """
    Copy every file directly in source_dir into dest_dir, overwriting.

    Files that are in use are skipped (a running host may hold them). Any other
    failure removes version_dir entirely so a half-copied tree is never accepted.

    Args:
        source_dir: Extracted folder to copy from
        dest_dir: Destination folder (must exist)
        version_dir: Version folder to remove on a non-transient failure

    Returns:
        Files that were skipped because they were locked

    Raises:
        CopyError: On a non-transient copy failure
    """
    skipped: list[Path] = []
    for child in sorted(source_dir.iterdir()):
        if not child.is_file():
            continue
        target = dest_dir / child.name
        try:
            shutil.copy2(child, target)
        except Exception as e:
            if not is_transient_copy_error(e):
                try_hard_to_delete(version_dir)
                raise CopyError(
                    f"Failed to copy '{child}' to '{target}': {e}",
                    context={"source": str(child), "target": str(target)},
                ) from e
            logger.debug(f"Skipping '{target}', file in use: {e}")
            skipped.append(target)
    return skipped


class ArchiveInstallerStrategy:
    """Install a provider from a self-contained zip archive."""

    def __init__(
        self,
        downloader: DownloadService,
        default_root: Path | None = None,
        module_extension: str = ".dll",
    ):
        self.downloader = downloader
        self.default_root = default_root
        self.module_extension = module_extension

    async def attempt_install(
        self,
        descriptor: ComponentDescriptor,
        link: Link,
        request: BootstrapRequest,
    ) -> InstallOutcome:
        """
        Extract the archive and lay its tools/ and lib/ contents out under the version folder.

        Succeeds when the link's target file exists in the version folder afterwards.

        Raises:
            DestinationPathNotSetError: Destination root doesn't exist (fatal)
            InvalidFilenameError: Link has no target filename
            MissingVersionError: Descriptor has no version
            DownloadError: Archive couldn't be fetched or validated
            ArchiveExtractionError: Archive is corrupt or empty
            AmbiguousModuleError: lib/ holds more than one native module
            CopyError: Non-transient copy failure, or target missing afterwards
        """
        root = destination_root(request, self.default_root)
        if root is None or not root.is_dir():
            raise DestinationPathNotSetError(
                Messages.DESTINATION_PATH_NOT_SET.format(root),
                context={"destination_root": str(root)},
            )
        if not link.target_filename or not link.target_filename.strip():
            raise InvalidFilenameError(Messages.INVALID_FILENAME.format(descriptor.name))
        if not descriptor.version.strip():
            raise MissingVersionError(Messages.MISSING_VERSION.format(descriptor.name))

        downloaded = await self.downloader.fetch_and_validate(descriptor.name, descriptor)
        if downloaded is None:
            raise DownloadError(
                Messages.DOWNLOAD_FAILED.format(descriptor.name),
                context={"fast_path": descriptor.fast_path},
            )

        extracted = temporary_name(f"{descriptor.name}-extract")
        try:
            try:
                await asyncio.to_thread(_extract, downloaded, extracted)
            except (zipfile.BadZipFile, OSError) as e:
                raise ArchiveExtractionError(
                    f"Unable to extract '{downloaded}': {e}",
                    context={"archive": str(downloaded)},
                ) from e

            if not extracted.is_dir():
                raise ArchiveExtractionError(
                    f"Archive '{downloaded}' produced nothing to install",
                    context={"archive": str(downloaded)},
                )

            target_file = await asyncio.to_thread(self._lay_out, extracted, root, descriptor, link)

            request.verbose(f"Installed package '{descriptor.name}' to '{target_file}'")
            request.yield_package(descriptor)
            return InstallOutcome.SUCCEEDED
        finally:
            await asyncio.to_thread(try_hard_to_delete, downloaded)
            await asyncio.to_thread(try_hard_to_delete, extracted)

    def _lay_out(self, extracted: Path, root: Path, descriptor: ComponentDescriptor, link: Link) -> Path:
        """Copy tools/ and lib/ into the version folder; returns the installed target file."""
        tools_dir = extracted / "tools"
        lib_dir = extracted / "lib"

        if lib_dir.is_dir() and count_modules(lib_dir, self.module_extension) > 1:
            raise AmbiguousModuleError(
                Messages.MORE_THAN_ONE_MODULE.format(descriptor.name, self.module_extension),
                context={"lib": str(lib_dir)},
            )

        existed = (root / descriptor.name / descriptor.version).is_dir()
        folder = version_folder(root, descriptor.name, descriptor.version)

        if tools_dir.is_dir():
            dest_tools = folder / "tools"
            dest_tools.mkdir(exist_ok=True)
            copy_files_overwriting(tools_dir, dest_tools, folder)

        if lib_dir.is_dir():
            copy_files_overwriting(lib_dir, folder, folder)

        target_file = folder / Path(link.target_filename.replace("\\", "/")).name
        if not target_file.is_file():
            if not existed:
                try_hard_to_delete(folder)
            raise CopyError(
                f"Archive for '{descriptor.name}' did not provide '{target_file.name}'",
                context={"target_file": str(target_file)},
            )
        return target_file
