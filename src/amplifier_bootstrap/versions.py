"""Four-part ordinal versions (major.minor.build.revision).

Installed providers live at <root>/<name>/<version>/, so version folder names
must round-trip through this type. Missing trailing parts compare as zero:
"2.8" == "2.8.0.0".
"""

import re
from functools import total_ordering

_VERSION_RE = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.(\d+))?\s*$")


@total_ordering
class FourPartVersion:
    """Immutable ordinal version with exactly four numeric components."""

    __slots__ = ("_parts",)

    def __init__(self, major: int = 0, minor: int = 0, build: int = 0, revision: int = 0):
        for part in (major, minor, build, revision):
            if part < 0:
                raise ValueError(f"Version components must be non-negative: {part}")
        self._parts = (major, minor, build, revision)

    @classmethod
    def parse(cls, text: str) -> "FourPartVersion":
        """Parse a dotted version of one to four numeric parts.

        Raises:
            ValueError: If text is not a dotted numeric version
        """
        version = cls.try_parse(text)
        if version is None:
            raise ValueError(f"Not a valid version: {text!r}")
        return version

    @classmethod
    def try_parse(cls, text: str | None, min_parts: int = 1) -> "FourPartVersion | None":
        """Parse a version, returning None instead of raising.

        Args:
            text: Candidate version string
            min_parts: Minimum number of dotted components required. Folder
                names use 2 so that a plain "3" directory is not mistaken
                for a version.

        Returns:
            Parsed version, or None if text doesn't parse
        """
        if not text:
            return None
        match = _VERSION_RE.match(text)
        if match is None:
            return None
        groups = [g for g in match.groups() if g is not None]
        if len(groups) < min_parts:
            return None
        return cls(*(int(g) for g in groups))

    @property
    def parts(self) -> tuple[int, int, int, int]:
        return self._parts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FourPartVersion):
            return NotImplemented
        return self._parts == other._parts

    def __lt__(self, other: "FourPartVersion") -> bool:
        if not isinstance(other, FourPartVersion):
            return NotImplemented
        return self._parts < other._parts

    def __hash__(self) -> int:
        return hash(self._parts)

    def __str__(self) -> str:
        return ".".join(str(p) for p in self._parts)

    def __repr__(self) -> str:
        return f"FourPartVersion('{self}')"
