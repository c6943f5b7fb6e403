"""Bootstrap configuration - app policy injected into the library.

Per KERNEL_PHILOSOPHY: Paths and recognised delegates are policy. The app
constructs BootstrapConfig directly or loads it from a TOML file.
"""

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict

from .constants import SELF_NAME


class BootstrapConfig(BaseModel):
    """Settings for a BootstrapProvider instance."""

    model_config = ConfigDict(frozen=True)

    # Default destination root; the DestinationPath install option overrides it
    destination_root: Path | None = None
    self_name: str = SELF_NAME
    native_module_extension: str = ".dll"
    module_package_managers: tuple[str, ...] = ("PowerShellGet",)
    module_host_system: str = "PowerShell"
    feed_locations: tuple[str, ...] = ()

    def is_module_package_manager(self, name: str) -> bool:
        return name.casefold() in {m.casefold() for m in self.module_package_managers}

    @classmethod
    def from_pyproject(cls, pyproject_path: Path) -> "BootstrapConfig":
        """
        Load configuration from the [tool.amplifier.bootstrap] table of a TOML file.

        Missing table means defaults.

        Args:
            pyproject_path: Path to pyproject.toml (or any TOML file)

        Returns:
            BootstrapConfig instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            tomllib.TOMLDecodeError: If invalid TOML
            pydantic.ValidationError: If values have the wrong types
        """
        if not pyproject_path.exists():
            raise FileNotFoundError(f"Config file not found: {pyproject_path}")

        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)

        section = data.get("tool", {}).get("amplifier", {}).get("bootstrap", {})

        destination = section.get("destination-root")
        if destination is not None:
            destination = Path(destination).expanduser()
            if not destination.is_absolute():
                # Relative to the config file, not the cwd
                destination = pyproject_path.parent / destination

        return cls(
            destination_root=destination,
            self_name=section.get("self-name", SELF_NAME),
            native_module_extension=section.get("native-module-extension", ".dll"),
            module_package_managers=tuple(section.get("module-package-managers", ("PowerShellGet",))),
            module_host_system=section.get("module-host-system", "PowerShell"),
            feed_locations=tuple(section.get("feed-locations", ())),
        )
