"""Release download candidates for a platform tag and optional version pin."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .platforms import PlatformTag


class OriginKind(str, Enum):
    PRIMARY_RELEASE = "primary-release"
    MIRROR = "mirror"
    RAW_FALLBACK = "raw-fallback"


@dataclass(frozen=True)
class DownloadCandidate:
    url: str
    origin: OriginKind


@dataclass(frozen=True)
class ReleaseSource:
    repo: str = "scantrancher/terminal-anywhere"
    raw_branch: str = "main"
    mirror_url: str | None = None

    def release_url(self, filename: str, pin: str | None) -> str:
        if pin:
            return f"https://github.com/{self.repo}/releases/download/{pin}/{filename}"
        return f"https://github.com/{self.repo}/releases/latest/download/{filename}"

    def mirror_candidate_url(self, filename: str, pin: str | None) -> str | None:
        if not self.mirror_url:
            return None
        return f"{self.mirror_url.rstrip('/')}/{pin or 'latest'}/{filename}"

    def raw_url(self, filename: str) -> str:
        # Legacy raw host; may serve an LFS pointer once the storage quota runs out.
        return f"https://raw.githubusercontent.com/{self.repo}/{self.raw_branch}/latest/{filename}"


def binary_filename(binary_name: str, platform: PlatformTag) -> str:
    return f"{binary_name}-{platform.value}"


@dataclass(frozen=True)
class CandidatePlan:
    """Ordered, restartable candidate sequence; every iteration starts over."""

    platform: PlatformTag
    pin: str | None
    binary_name: str
    source: ReleaseSource

    @property
    def filename(self) -> str:
        return binary_filename(self.binary_name, self.platform)

    def __iter__(self) -> Iterator[DownloadCandidate]:
        filename = self.filename
        yield DownloadCandidate(self.source.release_url(filename, self.pin), OriginKind.PRIMARY_RELEASE)
        mirror = self.source.mirror_candidate_url(filename, self.pin)
        if mirror:
            yield DownloadCandidate(mirror, OriginKind.MIRROR)
        yield DownloadCandidate(self.source.raw_url(filename), OriginKind.RAW_FALLBACK)

    def urls(self) -> list[str]:
        return [candidate.url for candidate in self]


def resolve(
    platform: PlatformTag,
    pin: str | None,
    binary_name: str,
    source: ReleaseSource | None = None,
) -> CandidatePlan:
    if platform is PlatformTag.UNSUPPORTED:
        raise ValueError("Cannot resolve download candidates for an unsupported platform")
    return CandidatePlan(
        platform=platform,
        pin=(pin or None),
        binary_name=binary_name,
        source=source or ReleaseSource(),
    )
