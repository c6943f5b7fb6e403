"""In-memory fakes for bootstrap collaborator protocols."""

import io
import zipfile
from pathlib import Path

from amplifier_bootstrap import ComponentDescriptor
from amplifier_bootstrap import InstalledComponentRecord
from amplifier_bootstrap import Link
from amplifier_bootstrap import ResolvedReference
from amplifier_bootstrap import SoftwareIdentity
from amplifier_bootstrap.constants import MediaType


def descriptor(name: str, version: str, *links: Link, valid: bool = True) -> ComponentDescriptor:
    """Catalog entry whose fast path is derived from name and version."""
    return ComponentDescriptor(
        name=name,
        version=version,
        source=f"https://feed.example/{name}/{version}",
        is_valid=valid,
        links=links,
    )


def assembly_link(target: str = "provider.dll", artifact: str = "a1", href: str = "https://cdn/p.dll") -> Link:
    return Link(href=href, artifact=artifact, attributes={"type": "assembly", "targetFilename": target})


def media_link(media_type: MediaType, artifact: str = "a1", href: str = "https://cdn/pkg", target: str = "") -> Link:
    attributes = {"targetFilename": target} if target else {}
    return Link(href=href, artifact=artifact, media_type=media_type.value, attributes=attributes)


def zip_bytes(files: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


class FakeCatalog:
    """In-memory catalog; optionally raises after yielding `fail_after` entries."""

    def __init__(self, descriptors=(), references=None, fail_after: int | None = None):
        self.descriptors = list(descriptors)
        self.references = references or {}
        self.fail_after = fail_after
        self.list_calls = 0

    def list_candidates(self):
        self.list_calls += 1
        for index, item in enumerate(self.descriptors):
            if self.fail_after is not None and index >= self.fail_after:
                raise ConnectionError("feed unavailable")
            yield item

    def resolve_by_canonical_id(self, canonical_id):
        return self.references.get(canonical_id, [])


class FakeDownloader:
    """Writes configured payload bytes to a fresh file per fetch."""

    def __init__(self, download_dir: Path, payloads: dict[str, bytes] | None = None):
        self.download_dir = download_dir
        self.download_dir.mkdir(parents=True, exist_ok=True)
        self.payloads = payloads or {}
        self.fetched: list[Path] = []

    async def fetch_and_validate(self, name, descriptor):
        if name not in self.payloads:
            return None
        path = self.download_dir / f"{name}-{len(self.fetched)}.download"
        path.write_bytes(self.payloads[name])
        self.fetched.append(path)
        return path


class FakeNativeInstaller:
    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.runs: list[tuple[Path, str]] = []

    async def run(self, file_path, args=""):
        self.runs.append((file_path, args))
        return self.succeed


class FakeHost:
    def __init__(self, dynamic=()):
        self.dynamic = list(dynamic)
        self.reloads = 0
        self.named_loads: list[tuple[str, str]] = []

    def reload_known_components(self):
        self.reloads += 1

    def dynamically_registered_components(self):
        return list(self.dynamic)

    def load_component_via_named_system(self, system_name, path):
        self.named_loads.append((system_name, path))


class FakeStream:
    """Async stream of units that stops once canceled."""

    def __init__(self, units):
        self._units = list(units)
        self._index = 0
        self.canceled = False
        self.produced = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.canceled or self._index >= len(self._units):
            raise StopAsyncIteration
        unit = self._units[self._index]
        self._index += 1
        self.produced += 1
        return unit

    def cancel(self):
        self.canceled = True


class FakeDelegate:
    def __init__(self, name: str, units=()):
        self.name = name
        self.units = list(units)
        self.calls: list[tuple[SoftwareIdentity, dict]] = []
        self.streams: list[FakeStream] = []

    def install(self, package, options):
        self.calls.append((package, dict(options)))
        stream = FakeStream(self.units)
        self.streams.append(stream)
        return stream


def unit(name: str, version: str = "1.0", full_path: str | None = None) -> SoftwareIdentity:
    return SoftwareIdentity(fast_package_reference=f"{name}/{version}", name=name, version=version, full_path=full_path)


def reference(system: FakeDelegate, name: str = "ProviderModule") -> ResolvedReference:
    return ResolvedReference(package=unit(name), system=system)


def installed(name: str, version: str, path: Path) -> InstalledComponentRecord:
    return InstalledComponentRecord(name=name, version=version, path=path)
