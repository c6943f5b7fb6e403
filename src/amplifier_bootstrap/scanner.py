"""Installed provider scanner - convention-based discovery of <root>/<name>/<version>/.

Convention over configuration: a provider is installed when its module file
sits directly inside a version folder. Folders whose name isn't a version are
skipped; those are top-level providers the host loads on its own, and they
reach us through the host's dynamically registered list instead.

Per IMPLEMENTATION_PHILOSOPHY: No caching, every scan re-walks the tree.
"""

import logging
from collections.abc import Iterable
from collections.abc import Iterator
from pathlib import Path

from .locator import PackageLocator
from .matching import VersionQuery
from .matching import matches
from .protocols import HostRegistry
from .schema import InstalledComponentRecord
from .schema import InstalledPackage
from .versions import FourPartVersion

logger = logging.getLogger(__name__)


def discover_installed_components(root: Path, module_extension: str) -> Iterator[InstalledComponentRecord]:
    """
    Walk the destination root for <root>/<name>/<version>/<module> files.

    Args:
        root: Destination root
        module_extension: Native module extension (e.g. ".dll"), case-insensitive

    Yields:
        One record per module file whose parent folder parses as a version
    """
    if not root.is_dir():
        return

    suffix = module_extension.casefold()
    for module_file in sorted(root.glob("*/*/*")):
        if not module_file.is_file() or module_file.suffix.casefold() != suffix:
            continue

        version_dir = module_file.parent
        version = FourPartVersion.try_parse(version_dir.name, min_parts=2)
        if version is None:
            logger.debug(f"Skipping {module_file}: '{version_dir.name}' is not a version folder")
            continue

        yield InstalledComponentRecord(name=version_dir.parent.name, version=str(version), path=module_file)


class InstalledComponentScanner:
    """Report installed providers, enriched with their catalog descriptors."""

    def __init__(
        self,
        locator: PackageLocator,
        host: HostRegistry | None = None,
        module_extension: str = ".dll",
    ):
        self.locator = locator
        self.host = host
        self.module_extension = module_extension

    def records(self, root: Path | None) -> Iterator[InstalledComponentRecord]:
        """On-disk records unioned with the host's dynamic registrations, deduplicated."""
        seen: set[tuple[str, str]] = set()

        sources: list[Iterable[InstalledComponentRecord]] = []
        if root is not None:
            sources.append(discover_installed_components(root, self.module_extension))
        if self.host is not None:
            sources.append(self.host.dynamically_registered_components())

        for source in sources:
            for record in source:
                if record.key in seen:
                    continue
                seen.add(record.key)
                yield record

    def scan(
        self,
        root: Path | None,
        name: str | None = None,
        required_version: str | None = None,
        minimum_version: str | None = None,
        maximum_version: str | None = None,
    ) -> Iterator[InstalledPackage]:
        """
        Find installed providers matching a name/version query.

        Installed providers with no catalog entry are skipped (logged only),
        since they can't be reported with full metadata.

        Args:
            root: Destination root (None scans only dynamic registrations)
            name: Provider name or wildcard pattern
            required_version: Exact version
            minimum_version: Inclusive lower bound
            maximum_version: Inclusive upper bound

        Yields:
            InstalledPackage for every match
        """
        query = VersionQuery(
            name=name,
            required_version=required_version,
            minimum_version=minimum_version,
            maximum_version=maximum_version,
        )

        for record in self.records(root):
            descriptor = self.locator.find_exact(record.name, record.version)
            if descriptor is None:
                logger.debug(f"Installed provider '{record.name}' from '{record.path}' is not listed in the catalog")
                continue
            if matches(descriptor, query):
                yield InstalledPackage(descriptor=descriptor, path=record.path)
