"""Fatal installer errors. Anything raised from here ends the run with exit 1."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .service import Attempt


class BootstrapError(RuntimeError):
    pass


class UnsupportedPlatformError(BootstrapError):
    def __init__(self, host: str, supported: Sequence[str]) -> None:
        self.host = host
        self.supported = list(supported)
        super().__init__(f"Unsupported platform: {host}")


class TransportUnavailableError(BootstrapError):
    pass


class DownloadExhaustedError(BootstrapError):
    def __init__(self, label: str, attempts: Sequence["Attempt"]) -> None:
        self.label = label
        self.attempts = list(attempts)
        lines = [f"Unable to download a valid binary for {label}.", "Tried URLs:"]
        lines.extend(f"  {attempt.candidate.url} ({attempt.outcome})" for attempt in self.attempts)
        super().__init__("\n".join(lines))

    @property
    def urls(self) -> list[str]:
        return [attempt.candidate.url for attempt in self.attempts]
