"""Package locator - resolve name/version queries against the bootstrap catalog.

Per KERNEL_PHILOSOPHY: The catalog is injected; the locator only applies
matching rules. No caching: every call re-reads the catalog.
"""

import logging
from collections.abc import Iterable
from collections.abc import Iterator

from .constants import SELF_NAME
from .exceptions import BootstrapError
from .exceptions import UnresolvableReferenceError
from .matching import VersionQuery
from .matching import best
from .matching import dedupe
from .matching import name_matches
from .matching import select
from .matching import version_equals
from .matching import version_in_range
from .protocols import CatalogService
from .schema import ComponentDescriptor

logger = logging.getLogger(__name__)


class PackageLocator:
    """
    Stream catalog descriptors matching a query.

    Results are produced lazily: a consumer that installs the first hit
    doesn't force evaluation of the rest.
    """

    def __init__(self, catalog: CatalogService, self_name: str = SELF_NAME):
        """Initialize locator.

        Args:
            catalog: Catalog collaborator
            self_name: The platform's own name; queries for it yield nothing
        """
        self.catalog = catalog
        self.self_name = self_name

    def _candidates(self) -> Iterator[ComponentDescriptor]:
        """Catalog enumeration with collaborator failures surfaced as unresolvable."""
        try:
            yield from self.catalog.list_candidates()
        except BootstrapError:
            raise
        except Exception as e:
            raise UnresolvableReferenceError(
                f"Unable to query provider catalog: {e}",
                context={"error": str(e)},
            ) from e

    def locate(
        self,
        name: str | None = None,
        required_version: str | None = None,
        minimum_version: str | None = None,
        maximum_version: str | None = None,
        all_versions: bool = False,
    ) -> Iterator[ComponentDescriptor]:
        """
        Find providers matching a name/version query.

        Args:
            name: Provider name or wildcard pattern (empty means all)
            required_version: Exact version (min/max ignored when set)
            minimum_version: Inclusive lower bound
            maximum_version: Inclusive upper bound
            all_versions: Return every version rather than the best one

        Yields:
            Matching descriptors, each (name, version) once

        Raises:
            UnresolvableReferenceError: If the catalog fails mid-enumeration

        Example:
            >>> locator = PackageLocator(catalog)
            >>> [p.version for p in locator.locate("nuget", minimum_version="2.8")]
            ['2.8.5.208']
        """
        query = VersionQuery(
            name=name,
            required_version=required_version,
            minimum_version=minimum_version,
            maximum_version=maximum_version,
            all_versions=all_versions,
        )
        return self.locate_query(query)

    def locate_query(self, query: VersionQuery) -> Iterator[ComponentDescriptor]:
        """Query-object form of locate()."""
        logger.debug(f"Locating providers for {query!r}")

        if query.name and query.name.casefold() == self.self_name.casefold():
            # Self-update is unsupported
            logger.debug(f"Ignoring request for '{self.self_name}' itself")
            return

        if query.is_pattern or query.all_versions:
            yield from select(self._candidates(), query)
            return

        # A specific name: exactly one best match
        required = query.required_version
        if required and required.strip():
            match = self.find_exact(query.name or "", required)
        else:
            match = self.find_best(query.name or "", query.minimum_version, query.maximum_version)
        if match is not None:
            yield match

    def _named(self, name: str) -> Iterable[ComponentDescriptor]:
        return (d for d in dedupe(self._candidates()) if name_matches(name, d.name))

    def find_exact(self, name: str, version: str) -> ComponentDescriptor | None:
        """Descriptor for exactly (name, version), or None."""
        for descriptor in self._named(name):
            if version_equals(descriptor.version, version):
                return descriptor
        return None

    def find_best(
        self,
        name: str,
        minimum_version: str | None = None,
        maximum_version: str | None = None,
    ) -> ComponentDescriptor | None:
        """Highest version of name inside the (optional) inclusive range, or None."""
        return best(d for d in self._named(name) if version_in_range(d.version, minimum_version, maximum_version))

    def resolve_fast_path(self, fast_path: str) -> ComponentDescriptor | None:
        """Re-resolve a descriptor from its canonical reference.

        Args:
            fast_path: Canonical source URI handed out with an earlier result

        Returns:
            The descriptor, or None if the catalog no longer lists it
        """
        if not fast_path:
            return None
        for descriptor in self._candidates():
            if descriptor.fast_path.casefold() == fast_path.casefold():
                return descriptor
        logger.debug(f"Fast path '{fast_path}' not found in catalog")
        return None

    def names(self) -> list[str]:
        """Distinct provider names in first-seen order (case-insensitive)."""
        seen: dict[str, str] = {}
        for descriptor in self._candidates():
            seen.setdefault(descriptor.name.casefold(), descriptor.name)
        return list(seen.values())
