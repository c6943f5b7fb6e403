"""Bootstrap data model - catalog descriptors, links, and host-facing records.

Per AGENTS.md: Ruthless simplicity - frozen pydantic models, no behavior beyond
small derived properties.
"""

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .constants import ATTR_TARGET_FILENAME
from .constants import ATTR_TYPE
from .constants import Relationship
from .exceptions import ErrorCategory
from .versions import FourPartVersion


class Link(BaseModel):
    """One declared way to obtain or install an artifact of a component."""

    model_config = ConfigDict(frozen=True)

    href: str | None = None
    relationship: str = Relationship.INSTALLATION_MEDIA.value
    media_type: str | None = None
    artifact: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)

    @property
    def is_installation_media(self) -> bool:
        return self.relationship.casefold() == Relationship.INSTALLATION_MEDIA.value

    @property
    def discovery_type(self) -> str | None:
        """Installer type from the discovery attributes (e.g. "assembly")."""
        return self.attributes.get(ATTR_TYPE)

    @property
    def target_filename(self) -> str | None:
        return self.attributes.get(ATTR_TARGET_FILENAME)


class ComponentDescriptor(BaseModel):
    """
    A provider package as listed in the bootstrap catalog.

    Immutable once fetched. `source` is the canonical reference ("fast path")
    used to re-resolve this exact package later.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = ""
    source: str = ""
    summary: str = ""
    is_valid: bool = True
    links: tuple[Link, ...] = ()

    @property
    def fast_path(self) -> str:
        return self.source

    @property
    def key(self) -> tuple[str, str]:
        """Deduplication key: case-insensitive (name, version)."""
        return (self.name.casefold(), self.version.casefold())

    @property
    def parsed_version(self) -> FourPartVersion | None:
        return FourPartVersion.try_parse(self.version)


class SoftwareIdentity(BaseModel):
    """A package as seen by a delegate package system (input or installed unit)."""

    model_config = ConfigDict(frozen=True)

    fast_package_reference: str
    name: str
    version: str = ""
    version_scheme: str = "MultiPartNumeric"
    summary: str = ""
    source: str = ""
    search_key: str = ""
    full_path: str | None = None
    package_filename: str | None = None


class InstalledComponentRecord(BaseModel):
    """A (name, version, path) triple discovered on disk or registered with the host."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    path: Path

    @property
    def key(self) -> tuple[str, str]:
        return (self.name.casefold(), self.version.casefold())


class InstalledPackage(BaseModel):
    """An installed component matched to its catalog descriptor."""

    model_config = ConfigDict(frozen=True)

    descriptor: ComponentDescriptor
    path: Path


class ErrorRecord(BaseModel):
    """Structured error reported to the host instead of a raw exception."""

    model_config = ConfigDict(frozen=True)

    category: ErrorCategory
    target: str
    message: str
    arguments: tuple[str, ...] = ()

    @property
    def formatted(self) -> str:
        if not self.arguments:
            return self.message
        try:
            return self.message.format(*self.arguments)
        except (IndexError, KeyError):
            return self.message


class DynamicOption(BaseModel):
    """An option the host may pass for a given operation category."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    is_required: bool = False
    permitted_values: tuple[str, ...] = ()


class PackageSource(BaseModel):
    """A catalog feed location."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str
    is_trusted: bool = False
    is_registered: bool = True
    is_validated: bool = True


class InstallOutcome(StrEnum):
    """Result of one installation attempt (or of a whole install)."""

    SUCCEEDED = "succeeded"
    # Try the next link or artifact
    FAILED = "failed"
    # Stop trying: nothing else can succeed
    FATAL = "fatal"
    # Host canceled mid-stream; neither success nor failure
    CANCELED = "canceled"
