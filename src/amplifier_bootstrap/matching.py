"""Version matching - name/version query semantics shared by find and list-installed.

Rules, in priority order:
1. required_version set: only that exact version (min/max ignored)
2. all_versions set: every version of every matching name
3. minimum and/or maximum set: every version inside the inclusive range
4. otherwise: the single best (highest) version per matching name

Names compare case-insensitively. An empty name, or one containing wildcard
metacharacters (*, ?, [...]), is a pattern; an empty pattern matches everything.
Zero matches is not an error.
"""

from collections.abc import Iterable
from collections.abc import Iterator
from fnmatch import fnmatchcase

from pydantic import BaseModel
from pydantic import ConfigDict

from .schema import ComponentDescriptor
from .versions import FourPartVersion

_WILDCARD_CHARS = frozenset("*?[")


class VersionQuery(BaseModel):
    """A find/list query as passed by the host."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    required_version: str | None = None
    minimum_version: str | None = None
    maximum_version: str | None = None
    all_versions: bool = False

    @property
    def is_pattern(self) -> bool:
        """True when the name selects potentially many providers."""
        return not (self.name and self.name.strip()) or contains_wildcard(self.name)

    @property
    def has_range(self) -> bool:
        return bool(_blank_to_none(self.minimum_version) or _blank_to_none(self.maximum_version))


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def contains_wildcard(name: str | None) -> bool:
    """Check whether a name contains wildcard metacharacters."""
    return bool(name) and any(ch in _WILDCARD_CHARS for ch in name)


def name_matches(pattern: str | None, name: str) -> bool:
    """Case-insensitive name match; wildcard-aware.

    Args:
        pattern: Literal name or wildcard pattern. Empty/None matches all.
        name: Candidate name

    Returns:
        True if name matches pattern
    """
    if not pattern or not pattern.strip():
        return True
    if contains_wildcard(pattern):
        return fnmatchcase(name.casefold(), pattern.casefold())
    return name.casefold() == pattern.casefold()


def version_equals(candidate: str, required: str) -> bool:
    """Compare versions ordinally when both parse, otherwise case-insensitively."""
    left = FourPartVersion.try_parse(candidate)
    right = FourPartVersion.try_parse(required)
    if left is not None and right is not None:
        return left == right
    return candidate.casefold() == required.casefold()


def version_in_range(candidate: str, minimum: str | None, maximum: str | None) -> bool:
    """Inclusive range check. An absent bound is unbounded on that side.

    Candidates whose version doesn't parse only match an unbounded range.
    """
    minimum = _blank_to_none(minimum)
    maximum = _blank_to_none(maximum)
    if minimum is None and maximum is None:
        return True

    version = FourPartVersion.try_parse(candidate)
    if version is None:
        return False
    if minimum is not None:
        lower = FourPartVersion.try_parse(minimum)
        if lower is None or version < lower:
            return False
    if maximum is not None:
        upper = FourPartVersion.try_parse(maximum)
        if upper is None or version > upper:
            return False
    return True


def matches(descriptor: ComponentDescriptor, query: VersionQuery) -> bool:
    """Predicate form of the query, used to filter already-chosen packages."""
    if not name_matches(query.name, descriptor.name):
        return False
    required = _blank_to_none(query.required_version)
    if required is not None:
        return version_equals(descriptor.version, required)
    if query.all_versions:
        return True
    return version_in_range(descriptor.version, query.minimum_version, query.maximum_version)


def dedupe(descriptors: Iterable[ComponentDescriptor]) -> Iterator[ComponentDescriptor]:
    """Lazily drop repeats of the same (name, version), keeping first occurrence."""
    seen: set[tuple[str, str]] = set()
    for descriptor in descriptors:
        if descriptor.key in seen:
            continue
        seen.add(descriptor.key)
        yield descriptor


def _sort_key(descriptor: ComponentDescriptor) -> tuple[int, FourPartVersion]:
    version = descriptor.parsed_version
    # Unparseable versions rank below every real version
    return (0, FourPartVersion()) if version is None else (1, version)


def best(descriptors: Iterable[ComponentDescriptor]) -> ComponentDescriptor | None:
    """Highest version among descriptors (first wins on ties), or None."""
    chosen: ComponentDescriptor | None = None
    for descriptor in descriptors:
        if chosen is None or _sort_key(descriptor) > _sort_key(chosen):
            chosen = descriptor
    return chosen


def select(candidates: Iterable[ComponentDescriptor], query: VersionQuery) -> Iterator[ComponentDescriptor]:
    """
    Apply the query rules to a candidate stream.

    Rules 1-3 stream lazily. Rule 4 (best per name) has to see every
    candidate first, then yields in first-seen name order.

    Args:
        candidates: Catalog candidates (may contain duplicates)
        query: Name/version query

    Yields:
        Matching descriptors, each (name, version) at most once
    """
    unique = (d for d in dedupe(candidates) if name_matches(query.name, d.name))

    required = _blank_to_none(query.required_version)
    if required is not None:
        yield from (d for d in unique if version_equals(d.version, required))
        return

    if query.all_versions:
        yield from unique
        return

    if query.has_range:
        yield from (d for d in unique if version_in_range(d.version, query.minimum_version, query.maximum_version))
        return

    by_name: dict[str, list[ComponentDescriptor]] = {}
    for descriptor in unique:
        by_name.setdefault(descriptor.name.casefold(), []).append(descriptor)
    for group in by_name.values():
        top = best(group)
        if top is not None:
            yield top
