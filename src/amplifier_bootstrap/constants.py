"""Static tables exposed to the host: provider identity, features, options, media types.

These are plain immutable lookups. Nothing here is computed at runtime.
"""

from enum import StrEnum
from types import MappingProxyType

PROVIDER_NAME = "Bootstrap"

# The platform itself. Queries for it yield nothing (no self-update).
SELF_NAME = "PackageManagement"


class Relationship(StrEnum):
    """Link relationships. Only installation media drive installs."""

    INSTALLATION_MEDIA = "installationmedia"


class MediaType(StrEnum):
    """Installer media type tags carried on installation-media links."""

    MSI_PACKAGE = "application/vnd.ms.msi-package"
    MSU_PACKAGE = "application/vnd.ms.msu-package"
    NUGET_PACKAGE = "application/vnd.nuget.package"
    PACKAGE_REFERENCE = "application/vnd.packagemanagement-canonicalid"


# Link attribute keys (ISO 19770-2 discovery namespace)
ATTR_TYPE = "type"
ATTR_TARGET_FILENAME = "targetFilename"

# Discovery type meaning "drop this single file into the version folder"
ASSEMBLY_TYPE = "assembly"

# Option names
OPTION_ALL_VERSIONS = "AllVersions"
OPTION_DESTINATION_PATH = "DestinationPath"
OPTION_SCOPE = "Scope"

SCOPE_CURRENT_USER = "CurrentUser"
SCOPE_ALL_USERS = "AllUsers"

FEATURES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "magic-signatures": (),
        "automation-only": (),
    }
)

# category -> ((name, type, required, permitted values), ...)
DYNAMIC_OPTIONS: MappingProxyType[str, tuple[tuple[str, str, bool, tuple[str, ...]], ...]] = MappingProxyType(
    {
        "package": (),
        "source": (),
        "install": (
            (OPTION_DESTINATION_PATH, "Folder", False, ()),
            (OPTION_SCOPE, "String", False, (SCOPE_CURRENT_USER, SCOPE_ALL_USERS)),
        ),
    }
)


class Messages:
    """User-facing message templates (str.format style)."""

    UNABLE_TO_RESOLVE_PACKAGE = "Unable to resolve package reference '{0}'."
    MISSING_INSTALLATION_MEDIA = "Provider '{0}' is missing installation media to install."
    FAILED_PROVIDER_BOOTSTRAP = "Failed to bootstrap provider '{0}'."
    AMBIGUOUS_PACKAGE_REFERENCE = "Package reference '{0}' resolves to {1} packages."
    MORE_THAN_ONE_MODULE = "Package '{0}' contains more than one '{1}' module in its lib folder."
    DESTINATION_PATH_NOT_SET = "Destination path '{0}' does not exist."
    INVALID_FILENAME = "Link for '{0}' does not specify a target filename."
    MISSING_VERSION = "Provider '{0}' does not specify a version."
    UNABLE_TO_REMOVE_FILE = "Unable to remove file '{0}'."
    UNKNOWN_MEDIA_TYPE = "Provider '{0}' with link '{1}' has unknown media type '{2}'."
    DOWNLOAD_FAILED = "Unable to download and validate '{0}'."
    NO_UNITS_INSTALLED = "Package reference '{0}' installed nothing."
