"""Per-call channel between the host and the bootstrapper.

The host sees results through an incremental yield callback and errors as
structured ErrorRecords, never as bulk returns or raw exceptions.
"""

import logging
import os
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .constants import OPTION_DESTINATION_PATH
from .exceptions import BootstrapError
from .exceptions import ErrorCategory
from .schema import ComponentDescriptor
from .schema import DynamicOption
from .schema import ErrorRecord
from .schema import PackageSource
from .schema import SoftwareIdentity

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "1", "yes", "y"})


def _detect_elevated() -> bool:
    """Best-effort elevation check for the current process."""
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None:
        return geteuid() == 0
    try:
        import ctypes

        return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
    except (AttributeError, OSError):
        return False


class BootstrapRequest:
    """
    Host request context for one provider call.

    Options are looked up case-insensitively. Every yielded item is appended
    to `results` and passed to `on_yield`; the callback may call `cancel()`.
    """

    def __init__(
        self,
        options: Mapping[str, str | Sequence[str]] | None = None,
        on_yield: Callable[[Any], None] | None = None,
        is_elevated: bool | None = None,
    ):
        self._options: dict[str, tuple[str, ...]] = {}
        for key, value in (options or {}).items():
            values = (value,) if isinstance(value, str) else tuple(value)
            self._options[key] = values
        self.on_yield = on_yield
        self.is_elevated = _detect_elevated() if is_elevated is None else is_elevated
        self.results: list[Any] = []
        self.errors: list[ErrorRecord] = []
        self.warnings: list[str] = []
        self._canceled = False

    # Options

    @property
    def option_keys(self) -> list[str]:
        return list(self._options)

    @property
    def options(self) -> dict[str, tuple[str, ...]]:
        return dict(self._options)

    def get_option_values(self, key: str) -> tuple[str, ...]:
        for name, values in self._options.items():
            if name.casefold() == key.casefold():
                return values
        return ()

    def get_option_value(self, key: str) -> str | None:
        values = self.get_option_values(key)
        return values[0] if values else None

    def get_option_flag(self, key: str) -> bool:
        value = self.get_option_value(key)
        return value is not None and value.strip().casefold() in _TRUE_VALUES

    # Cancellation

    @property
    def is_canceled(self) -> bool:
        return self._canceled

    def cancel(self) -> None:
        self._canceled = True

    # Yielding results

    def _emit(self, item: Any) -> bool:
        self.results.append(item)
        if self.on_yield is not None:
            self.on_yield(item)
        return not self._canceled

    def yield_package(self, descriptor: ComponentDescriptor) -> bool:
        """Report a provider package. Returns False once the host has canceled."""
        return self._emit(descriptor)

    def yield_installed_unit(self, unit: SoftwareIdentity) -> bool:
        return self._emit(unit)

    def yield_feature(self, name: str, values: tuple[str, ...]) -> bool:
        return self._emit((name, values))

    def yield_dynamic_option(self, option: DynamicOption) -> bool:
        return self._emit(option)

    def yield_package_source(self, source: PackageSource) -> bool:
        return self._emit(source)

    # Diagnostics

    def debug(self, message: str) -> None:
        logger.debug(message)

    def verbose(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def error(self, category: ErrorCategory, target: str, message: str, *args: str) -> ErrorRecord:
        record = ErrorRecord(category=category, target=target, message=message, arguments=tuple(args))
        logger.error(f"{category}: {record.formatted} (target: {target})")
        self.errors.append(record)
        return record

    def report(self, exc: BootstrapError, target: str) -> ErrorRecord:
        """Turn a bootstrap exception into a structured error record."""
        return self.error(exc.category, target, exc.message)


def destination_root(request: BootstrapRequest, default: Path | None) -> Path | None:
    """Destination root for this request: the DestinationPath option, else the configured default."""
    value = request.get_option_value(OPTION_DESTINATION_PATH)
    if value:
        return Path(value).expanduser()
    return default
