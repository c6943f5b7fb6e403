"""Strategy dispatch - pick the installation strategy for a link's installer type.

Strategies share a contract, not a base class: anything with a matching
attempt_install coroutine qualifies.
"""

import logging
from typing import Protocol

from .constants import ASSEMBLY_TYPE
from .constants import MediaType
from .constants import Messages
from .exceptions import UnsupportedMediaTypeError
from .request import BootstrapRequest
from .schema import ComponentDescriptor
from .schema import InstallOutcome
from .schema import Link

logger = logging.getLogger(__name__)


class InstallStrategy(Protocol):
    """One way of installing a provider from one link."""

    async def attempt_install(
        self,
        descriptor: ComponentDescriptor,
        link: Link,
        request: BootstrapRequest,
    ) -> InstallOutcome:
        """Install, returning SUCCEEDED or CANCELED; raise BootstrapError on failure."""
        ...


class StrategyDispatcher:
    """Map installer type tags to strategies."""

    def __init__(
        self,
        assembly: InstallStrategy,
        native: InstallStrategy,
        archive: InstallStrategy,
        reference: InstallStrategy,
    ):
        self.assembly = assembly
        self._by_media_type: dict[str, InstallStrategy] = {
            MediaType.MSI_PACKAGE.value: native,
            MediaType.MSU_PACKAGE.value: native,
            MediaType.NUGET_PACKAGE.value: archive,
            MediaType.PACKAGE_REFERENCE.value: reference,
        }

    def strategy_for(self, descriptor: ComponentDescriptor, link: Link) -> InstallStrategy:
        """
        Strategy for a link.

        A discovery type of "assembly" wins; otherwise the media type decides.

        Raises:
            UnsupportedMediaTypeError: No strategy for the link's media type
        """
        if (link.discovery_type or "").casefold() == ASSEMBLY_TYPE:
            return self.assembly

        strategy = self._by_media_type.get((link.media_type or "").casefold())
        if strategy is None:
            raise UnsupportedMediaTypeError(
                Messages.UNKNOWN_MEDIA_TYPE.format(descriptor.name, link.href, link.media_type),
                context={"media_type": str(link.media_type)},
            )
        return strategy

    async def dispatch(
        self,
        descriptor: ComponentDescriptor,
        link: Link,
        request: BootstrapRequest,
    ) -> InstallOutcome:
        strategy = self.strategy_for(descriptor, link)
        logger.debug(f"Installing '{descriptor.name}' via {type(strategy).__name__} ({link.href})")
        return await strategy.attempt_install(descriptor, link, request)
