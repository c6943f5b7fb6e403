"""amplifier-bootstrap - On-demand resolution and installation of package providers.

Per KERNEL_PHILOSOPHY: This is library mechanism, apps inject policy (paths,
catalog, downloader, installer runner, host registry).
"""

from .config import BootstrapConfig
from .exceptions import AmbiguousModuleError
from .exceptions import AmbiguousPackageReferenceError
from .exceptions import AttemptsExhaustedError
from .exceptions import BootstrapError
from .exceptions import CopyError
from .exceptions import DestinationPathNotSetError
from .exceptions import DownloadError
from .exceptions import ErrorCategory
from .exceptions import FileRemovalError
from .exceptions import MissingInstallationMediaError
from .exceptions import NativeInstallerError
from .exceptions import UnresolvableReferenceError
from .locator import PackageLocator
from .matching import VersionQuery
from .orchestrator import ArtifactInstaller
from .protocols import CatalogService
from .protocols import DelegatePackageSystem
from .protocols import DownloadService
from .protocols import HostRegistry
from .protocols import InstallStream
from .protocols import NativeInstallerService
from .protocols import ResolvedReference
from .provider import BootstrapProvider
from .request import BootstrapRequest
from .scanner import InstalledComponentScanner
from .schema import ComponentDescriptor
from .schema import ErrorRecord
from .schema import InstalledComponentRecord
from .schema import InstalledPackage
from .schema import InstallOutcome
from .schema import Link
from .schema import SoftwareIdentity
from .versions import FourPartVersion

__all__ = [
    # Provider surface
    "BootstrapProvider",
    "BootstrapRequest",
    "BootstrapConfig",
    # Resolution
    "PackageLocator",
    "VersionQuery",
    "FourPartVersion",
    "InstalledComponentScanner",
    # Installation
    "ArtifactInstaller",
    "InstallOutcome",
    # Data model
    "ComponentDescriptor",
    "Link",
    "SoftwareIdentity",
    "InstalledComponentRecord",
    "InstalledPackage",
    "ErrorRecord",
    # Collaborator protocols
    "CatalogService",
    "DownloadService",
    "NativeInstallerService",
    "HostRegistry",
    "DelegatePackageSystem",
    "InstallStream",
    "ResolvedReference",
    # Exceptions
    "ErrorCategory",
    "BootstrapError",
    "UnresolvableReferenceError",
    "MissingInstallationMediaError",
    "AttemptsExhaustedError",
    "AmbiguousPackageReferenceError",
    "AmbiguousModuleError",
    "DownloadError",
    "DestinationPathNotSetError",
    "FileRemovalError",
    "CopyError",
    "NativeInstallerError",
]

__version__ = "0.1.0"
