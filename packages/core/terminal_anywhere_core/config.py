"""Persistent installer settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from .logging_setup import installer_home


CONFIG_VERSION = 1

DEFAULT_INSTALL_DIR = "~/.local/bin"
DEFAULT_REPO = "scantrancher/terminal-anywhere"
DEFAULT_MIN_BINARY_SIZE = 4096

RELEASE_TAG_ENV = "TA_RELEASE_TAG"
INSTALL_DIR_ENV = "TA_INSTALL_DIR"
MIRROR_URL_ENV = "TA_MIRROR_URL"


@dataclass
class InstallerConfig:
    config_version: int = CONFIG_VERSION
    install_dir: str = DEFAULT_INSTALL_DIR
    repo: str = DEFAULT_REPO
    raw_branch: str = "main"
    mirror_url: str | None = None
    release_tag: str | None = None
    min_binary_size: int = DEFAULT_MIN_BINARY_SIZE
    timeout_s: float | None = None

    @property
    def install_path(self) -> Path:
        return Path(self.install_dir).expanduser()


def config_path() -> Path:
    return installer_home() / "installer.json"


def _merge(raw: Mapping[str, Any]) -> InstallerConfig:
    cfg = InstallerConfig()
    known = {f.name for f in fields(InstallerConfig)}
    for k, v in raw.items():
        if k in known:
            setattr(cfg, k, v)
    return cfg


def _blank_to_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize(cfg: InstallerConfig) -> None:
    cfg.install_dir = _blank_to_none(cfg.install_dir) or DEFAULT_INSTALL_DIR
    cfg.repo = _blank_to_none(cfg.repo) or DEFAULT_REPO
    cfg.raw_branch = _blank_to_none(cfg.raw_branch) or "main"
    cfg.mirror_url = _blank_to_none(cfg.mirror_url)
    if cfg.mirror_url:
        cfg.mirror_url = cfg.mirror_url.rstrip("/")
    cfg.release_tag = _blank_to_none(cfg.release_tag)

    try:
        cfg.min_binary_size = max(1, int(cfg.min_binary_size))
    except (TypeError, ValueError):
        cfg.min_binary_size = DEFAULT_MIN_BINARY_SIZE

    if cfg.timeout_s is not None:
        try:
            cfg.timeout_s = float(cfg.timeout_s)
        except (TypeError, ValueError):
            cfg.timeout_s = None
        else:
            if cfg.timeout_s <= 0:
                cfg.timeout_s = None


def _apply_env(cfg: InstallerConfig, environ: Mapping[str, str]) -> None:
    install_dir = _blank_to_none(environ.get(INSTALL_DIR_ENV))
    if install_dir:
        cfg.install_dir = install_dir
    mirror = _blank_to_none(environ.get(MIRROR_URL_ENV))
    if mirror:
        cfg.mirror_url = mirror.rstrip("/")
    tag = _blank_to_none(environ.get(RELEASE_TAG_ENV))
    if tag:
        cfg.release_tag = tag


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> InstallerConfig:
    path = path or config_path()
    environ = os.environ if environ is None else environ

    raw: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            loaded = {}
        if isinstance(loaded, dict):
            raw = loaded

    cfg = _merge(raw)
    cfg.config_version = CONFIG_VERSION
    _normalize(cfg)
    _apply_env(cfg, environ)
    return cfg


def save_config(cfg: InstallerConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
