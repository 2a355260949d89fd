from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "installers" / "bootstrap"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from terminal_anywhere_core.logging_setup import reset_logging  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_installer_env(monkeypatch, tmp_path):
    """Keep config, logs and installs inside the test's tmp dir."""
    for name in ("TA_RELEASE_TAG", "TA_MIRROR_URL", "TA_CA_BUNDLE", "TA_ALLOW_INSECURE_TLS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TA_INSTALLER_HOME", str(tmp_path / "installer-home"))
    monkeypatch.setenv("TA_INSTALL_DIR", str(tmp_path / "bin"))
    yield
    reset_logging()


class FakeTransport:
    """Serves canned bodies per URL; ``None`` means a transport failure."""

    def __init__(self, responses: dict[str, bytes | None] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def fetch(self, url: str, destination: Path) -> bool:
        self.calls.append(url)
        body = self.responses.get(url)
        if body is None:
            destination.unlink(missing_ok=True)
            return False
        destination.write_bytes(body)
        return True


@pytest.fixture
def fake_transport_cls():
    return FakeTransport


@pytest.fixture
def elf_payload() -> bytes:
    return b"\x7fELF\x02\x01\x01\x00" + b"\x00" * 8192


@pytest.fixture
def lfs_pointer() -> bytes:
    return (
        b"version https://git-lfs.github.com/spec/v1\n"
        b"oid sha256:4d7a214614ab2935c943f9e0ff69d22eadbb8f32b1258daaa5e2ca24d17e2393\n"
        b"size 12345678\n"
    )


@pytest.fixture
def linux_x64(monkeypatch):
    import terminal_anywhere_bootstrap.platforms as platforms

    monkeypatch.setattr(platforms.platform, "system", lambda: "Linux")
    monkeypatch.setattr(platforms.platform, "machine", lambda: "x86_64")
