"""Checks that a downloaded file is a real executable, not a placeholder.

Release hosts occasionally answer with something that downloads fine but is
not the binary: a Git LFS pointer once the storage quota is exhausted, or a
short error body. Those are rejected here so the fallback loop can move on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


MIN_EXECUTABLE_SIZE = 4096

LFS_POINTER_SIGNATURE = b"git-lfs.github.com/spec/v1"

EXECUTABLE_MAGICS: dict[bytes, str] = {
    b"\x7fELF": "elf",
    b"\xfe\xed\xfa\xce": "mach-o-32-be",
    b"\xfe\xed\xfa\xcf": "mach-o-64-be",
    b"\xce\xfa\xed\xfe": "mach-o-32-le",
    b"\xcf\xfa\xed\xfe": "mach-o-64-le",
}

# Enough to hold the first line of an LFS pointer ("version https://...").
_HEAD_BYTES = 512


class RejectReason(str, Enum):
    EMPTY = "empty"
    POINTER_STUB = "pointer-stub"
    TOO_SMALL = "too-small"


@dataclass(frozen=True)
class ValidationResult:
    accepted: bool
    size: int
    reason: RejectReason | None = None
    signature: str | None = None

    def __bool__(self) -> bool:
        return self.accepted

    def describe(self) -> str:
        if self.accepted:
            return f"accepted ({self.signature or 'unrecognized format'}, {self.size} bytes)"
        if self.reason is RejectReason.POINTER_STUB:
            return "rejected: file is a Git LFS pointer stub, not the binary"
        if self.reason is RejectReason.TOO_SMALL:
            return f"rejected: file is too small to be an executable ({self.size} bytes)"
        return "rejected: file is missing or empty"


def _first_line(head: bytes) -> bytes:
    return head.split(b"\n", 1)[0]


def validate(path: Path, min_size: int = MIN_EXECUTABLE_SIZE) -> ValidationResult:
    if not path.is_file():
        return ValidationResult(accepted=False, size=0, reason=RejectReason.EMPTY)

    size = path.stat().st_size
    if size == 0:
        return ValidationResult(accepted=False, size=0, reason=RejectReason.EMPTY)

    with path.open("rb") as fh:
        head = fh.read(_HEAD_BYTES)

    if LFS_POINTER_SIGNATURE in _first_line(head).lower():
        return ValidationResult(accepted=False, size=size, reason=RejectReason.POINTER_STUB)

    signature = EXECUTABLE_MAGICS.get(head[:4])
    if signature is not None:
        return ValidationResult(accepted=True, size=size, signature=signature)

    if size < min_size:
        return ValidationResult(accepted=False, size=size, reason=RejectReason.TOO_SMALL)

    return ValidationResult(accepted=True, size=size)
