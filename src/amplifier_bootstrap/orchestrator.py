"""Artifact install orchestration - try installation media in order until one works.

A descriptor's installation-media links are grouped by artifact: links in one
group are alternative ways to install the same thing. Groups and links are
tried in descriptor order; the first success ends the install.

Terminal states:
- SUCCEEDED
- CANCELED (host canceled a streaming delegate install)
- UnresolvableReferenceError (fast path doesn't resolve, or descriptor invalid)
- MissingInstallationMediaError (no link was ever attempted)
- AttemptsExhaustedError (every link was attempted and failed)
- a fatal strategy error (e.g. DestinationPathNotSetError) re-raised as is
"""

import logging
from collections.abc import Iterable

from .constants import Messages
from .dispatch import StrategyDispatcher
from .exceptions import AttemptsExhaustedError
from .exceptions import BootstrapError
from .exceptions import MissingInstallationMediaError
from .exceptions import UnresolvableReferenceError
from .locator import PackageLocator
from .request import BootstrapRequest
from .schema import ComponentDescriptor
from .schema import InstallOutcome
from .schema import Link

logger = logging.getLogger(__name__)


def group_installation_media(links: Iterable[Link]) -> list[tuple[str | None, list[Link]]]:
    """
    Group installation-media links by artifact, keeping first-seen group order.

    Args:
        links: All links of a descriptor

    Returns:
        (artifact, links) pairs; links within a group keep descriptor order
    """
    groups: dict[str | None, list[Link]] = {}
    for link in links:
        if link.is_installation_media:
            groups.setdefault(link.artifact, []).append(link)
    return list(groups.items())


def installation_attempts(descriptor: ComponentDescriptor) -> list[Link]:
    """Flattened, ordered list of links to try: group by group, link by link."""
    return [link for _, group in group_installation_media(descriptor.links) for link in group]


class ArtifactInstaller:
    """Drive the per-artifact, per-link trial loop."""

    def __init__(self, locator: PackageLocator, dispatcher: StrategyDispatcher):
        self.locator = locator
        self.dispatcher = dispatcher

    async def _attempt(self, descriptor: ComponentDescriptor, link: Link, request: BootstrapRequest) -> InstallOutcome:
        try:
            return await self.dispatcher.dispatch(descriptor, link, request)
        except BootstrapError as e:
            if e.fatal:
                raise
            request.warning(e.message)
            return InstallOutcome.FAILED
        except Exception as e:
            # Collaborator failures end this link only
            logger.debug(f"Strategy for '{link.href}' raised {type(e).__name__}", exc_info=True)
            request.warning(f"Installing '{descriptor.name}' from '{link.href}' failed: {e}")
            return InstallOutcome.FAILED

    async def install(self, fast_path: str, request: BootstrapRequest) -> InstallOutcome:
        """
        Install the provider identified by fast_path.

        Args:
            fast_path: Canonical reference of the provider (from a find result)
            request: Host request

        Returns:
            InstallOutcome.SUCCEEDED or InstallOutcome.CANCELED

        Raises:
            UnresolvableReferenceError: Fast path doesn't resolve to a valid descriptor
            MissingInstallationMediaError: Descriptor has no installation media
            AttemptsExhaustedError: Every installation media link failed
            BootstrapError: A fatal strategy error, unchanged
        """
        request.debug(f"Installing provider from '{fast_path}'")

        descriptor = self.locator.resolve_fast_path(fast_path)
        if descriptor is None or not descriptor.is_valid:
            raise UnresolvableReferenceError(
                Messages.UNABLE_TO_RESOLVE_PACKAGE.format(fast_path),
                context={"fast_path": fast_path},
            )

        tried_and_failed = False
        for link in installation_attempts(descriptor):
            outcome = await self._attempt(descriptor, link, request)
            if outcome in (InstallOutcome.SUCCEEDED, InstallOutcome.CANCELED):
                logger.info(f"Install of '{descriptor.name}' {outcome.value} via {link.href}")
                return outcome
            tried_and_failed = True

        if tried_and_failed:
            raise AttemptsExhaustedError(
                Messages.FAILED_PROVIDER_BOOTSTRAP.format(fast_path),
                context={"fast_path": fast_path},
            )
        raise MissingInstallationMediaError(
            Messages.MISSING_INSTALLATION_MEDIA.format(fast_path),
            context={"fast_path": fast_path},
        )
