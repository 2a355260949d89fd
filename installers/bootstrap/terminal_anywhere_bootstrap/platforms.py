"""Host platform identification against the release allow-list."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from enum import Enum


class PlatformTag(str, Enum):
    LINUX_X64 = "linux-x64"
    MACOS_X64 = "macos-x64"
    MACOS_ARM64 = "macos-arm64"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PlatformRule:
    """One (kernel, machines) row of the release policy table.

    ``tag`` names the published binary suffix. A rule with ``enabled=False``
    still matches its host but resolves to ``unsupported`` until the build
    for that platform is switched back on.
    """

    kernel: str
    machines: tuple[str, ...]
    tag: str
    enabled: bool = True
    label: str = ""

    def matches(self, kernel: str, machine: str) -> bool:
        return kernel.startswith(self.kernel) and machine in self.machines


PLATFORM_POLICY: tuple[PlatformRule, ...] = (
    PlatformRule("linux", ("x86_64", "amd64"), "linux-x64", label="Linux x64 (Intel/AMD)"),
    PlatformRule(
        "linux",
        ("aarch64", "arm64"),
        "linux-arm64",
        enabled=False,
        label="Linux ARM64 (Raspberry Pi, ARM servers)",
    ),
    PlatformRule("darwin", ("x86_64",), "macos-x64", label="macOS x64 (Intel Mac)"),
    PlatformRule("darwin", ("arm64",), "macos-arm64", label="macOS ARM64 (Apple Silicon)"),
)


def identify(
    system: str | None = None,
    machine: str | None = None,
    policy: tuple[PlatformRule, ...] = PLATFORM_POLICY,
) -> PlatformTag:
    kernel = (platform.system() if system is None else system).strip().lower()
    arch = (platform.machine() if machine is None else machine).strip().lower()

    for rule in policy:
        if not rule.matches(kernel, arch):
            continue
        if not rule.enabled:
            return PlatformTag.UNSUPPORTED
        try:
            return PlatformTag(rule.tag)
        except ValueError:
            return PlatformTag.UNSUPPORTED
    return PlatformTag.UNSUPPORTED


def supported_platforms(policy: tuple[PlatformRule, ...] = PLATFORM_POLICY) -> list[str]:
    return [rule.label or rule.tag for rule in policy if rule.enabled]


def host_description(system: str | None = None, machine: str | None = None) -> str:
    return f"{system or platform.system()} {machine or platform.machine()}"
