"""Shared installer service: fetch with fallback, validate, place the binary."""

from __future__ import annotations

import errno
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from terminal_anywhere_core.config import InstallerConfig
from terminal_anywhere_core.logging_setup import get_logger

from .errors import DownloadExhaustedError, UnsupportedPlatformError
from .platforms import PlatformTag, host_description, identify, supported_platforms
from .products import Product
from .resolver import CandidatePlan, DownloadCandidate, ReleaseSource, resolve
from .transport import Transport, UrllibTransport
from .validation import MIN_EXECUTABLE_SIZE, ValidationResult, validate


LOGGER = get_logger("service")

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class Attempt:
    candidate: DownloadCandidate
    outcome: str
    validation: ValidationResult | None = None


@dataclass(frozen=True)
class AcquisitionResult:
    artifact: Path
    candidate: DownloadCandidate
    validation: ValidationResult
    attempts: tuple[Attempt, ...]


@dataclass(frozen=True)
class InstallationTarget:
    directory: Path
    binary_name: str

    @property
    def final_path(self) -> Path:
        return self.directory / self.binary_name

    @classmethod
    def for_product(cls, directory: Path, product: Product) -> "InstallationTarget":
        return cls(directory=directory.expanduser(), binary_name=product.binary_name)


@dataclass(frozen=True)
class InstallResult:
    product: Product
    platform: PlatformTag
    final_path: Path
    candidate: DownloadCandidate
    updated: bool
    in_path: bool


def new_scratch_file(binary_name: str) -> Path:
    fd, name = tempfile.mkstemp(prefix=f"{binary_name}.")
    os.close(fd)
    return Path(name)


def acquire(
    candidates: Iterable[DownloadCandidate],
    scratch: Path,
    transport: Transport,
    min_size: int = MIN_EXECUTABLE_SIZE,
    label: str = "this platform",
) -> AcquisitionResult:
    """Try each candidate in order until one yields a valid binary.

    The scratch slot is reused between attempts. A download that succeeds at
    the transport level but fails validation (an LFS pointer, a truncated
    body) counts as a failed attempt, never as success.
    """
    attempts: list[Attempt] = []
    for candidate in candidates:
        LOGGER.info(f"Attempting download: {candidate.url}", extra={"event": "download_attempt"})
        if not transport.fetch(candidate.url, scratch):
            LOGGER.warning(f"Download failed from: {candidate.url}", extra={"event": "download_failed"})
            attempts.append(Attempt(candidate=candidate, outcome="download failed"))
            continue

        result = validate(scratch, min_size=min_size)
        if not result.accepted:
            LOGGER.warning(
                f"Downloaded file from {candidate.url} is not a valid binary: {result.describe()}",
                extra={"event": "artifact_rejected"},
            )
            attempts.append(Attempt(candidate=candidate, outcome=result.reason.value, validation=result))
            scratch.unlink(missing_ok=True)
            continue

        LOGGER.debug(f"{candidate.url}: {result.describe()}", extra={"event": "artifact_accepted"})
        attempts.append(Attempt(candidate=candidate, outcome="ok", validation=result))
        return AcquisitionResult(
            artifact=scratch,
            candidate=candidate,
            validation=result,
            attempts=tuple(attempts),
        )

    raise DownloadExhaustedError(label, attempts)


def _make_executable(path: Path) -> None:
    path.chmod(path.stat().st_mode | 0o111)


def _replace_across_devices(artifact: Path, final_path: Path) -> None:
    # Stage next to the destination so the last step is still a same-device rename.
    fd, staged_name = tempfile.mkstemp(prefix=f".{final_path.name}.", suffix=".partial", dir=final_path.parent)
    os.close(fd)
    staged = Path(staged_name)
    try:
        shutil.copyfile(artifact, staged)
        _make_executable(staged)
        os.replace(staged, final_path)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise
    artifact.unlink(missing_ok=True)


def install_artifact(artifact: Path, target: InstallationTarget) -> Path:
    target.directory.mkdir(parents=True, exist_ok=True)
    final_path = target.final_path

    _make_executable(artifact)
    try:
        os.replace(artifact, final_path)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        _replace_across_devices(artifact, final_path)

    return final_path


def _normalize_dir(value: str | Path) -> str:
    return os.path.normcase(os.path.normpath(os.path.expanduser(str(value))))


def check_path(target_dir: Path, path_env: str | None = None) -> bool:
    raw = os.environ.get("PATH", "") if path_env is None else path_env
    wanted = _normalize_dir(target_dir)
    return any(_normalize_dir(entry) == wanted for entry in raw.split(os.pathsep) if entry)


def path_guidance(target_dir: Path) -> list[str]:
    return [
        f"Install directory {target_dir} is not in your PATH",
        "Add this line to your ~/.bashrc or ~/.zshrc:",
        "",
        f'    export PATH="$PATH:{target_dir}"',
        "",
        "Then reload your shell: source ~/.bashrc",
    ]


def _resolve_platform(system: str | None, machine: str | None) -> PlatformTag:
    tag = identify(system, machine)
    if tag is PlatformTag.UNSUPPORTED:
        raise UnsupportedPlatformError(host_description(system, machine), supported_platforms())
    return tag


def _source_for(config: InstallerConfig) -> ReleaseSource:
    return ReleaseSource(repo=config.repo, raw_branch=config.raw_branch, mirror_url=config.mirror_url)


def plan_product(
    product: Product,
    config: InstallerConfig,
    pin: str | None = None,
    system: str | None = None,
    machine: str | None = None,
) -> tuple[CandidatePlan, InstallationTarget]:
    tag = _resolve_platform(system, machine)
    plan = resolve(tag, pin, product.binary_name, _source_for(config))
    return plan, InstallationTarget.for_product(config.install_path, product)


def install_product(
    product: Product,
    config: InstallerConfig,
    pin: str | None = None,
    transport: Transport | None = None,
    system: str | None = None,
    machine: str | None = None,
    progress: ProgressCallback | None = None,
) -> InstallResult:
    progress = progress or (lambda _msg: None)
    plan, target = plan_product(product, config, pin=pin, system=system, machine=machine)
    LOGGER.info(f"Detected platform: {plan.platform.value}", extra={"event": "platform_detected"})

    updated = target.final_path.exists()
    if updated:
        LOGGER.warning("Existing installation found. Updating...", extra={"event": "update"})

    transport = transport or UrllibTransport(timeout_s=config.timeout_s)

    progress(f"Downloading {product.display_name}")
    scratch = new_scratch_file(product.binary_name)
    try:
        acquisition = acquire(
            plan,
            scratch,
            transport,
            min_size=config.min_binary_size,
            label=plan.platform.value,
        )
        progress("Installing")
        final_path = install_artifact(acquisition.artifact, target)
    finally:
        scratch.unlink(missing_ok=True)

    LOGGER.info(f"{product.display_name} installed to: {final_path}", extra={"event": "success"})
    return InstallResult(
        product=product,
        platform=plan.platform,
        final_path=final_path,
        candidate=acquisition.candidate,
        updated=updated,
        in_path=check_path(target.directory),
    )
