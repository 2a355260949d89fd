"""Blocking HTTP(S) download of a single candidate into a scratch file."""

from __future__ import annotations

import http.client
import os
import shutil
import ssl
import urllib.error
import urllib.request
from pathlib import Path
from typing import Protocol

import certifi
from terminal_anywhere_core.logging_setup import get_logger

from .errors import TransportUnavailableError


LOGGER = get_logger("transport")

CA_BUNDLE_ENV = "TA_CA_BUNDLE"
ALLOW_INSECURE_TLS_ENV = "TA_ALLOW_INSECURE_TLS"

USER_AGENT = "TerminalAnywhereInstaller/1.0 (+https://github.com/scantrancher/terminal-anywhere)"

_CHUNK = 1024 * 1024


class Transport(Protocol):
    def fetch(self, url: str, destination: Path) -> bool:
        ...


def _build_ssl_context() -> ssl.SSLContext:
    """Create TLS context for downloads with explicit CA handling."""
    if os.environ.get(ALLOW_INSECURE_TLS_ENV, "").strip() == "1":
        return ssl._create_unverified_context()

    ca_bundle = os.environ.get(CA_BUNDLE_ENV, "").strip()
    if ca_bundle:
        if not Path(ca_bundle).expanduser().is_file():
            raise TransportUnavailableError(f"{CA_BUNDLE_ENV} points to a missing CA bundle: {ca_bundle}")
        return ssl.create_default_context(cafile=str(Path(ca_bundle).expanduser()))

    return ssl.create_default_context(cafile=certifi.where())


class UrllibTransport:
    def __init__(self, timeout_s: float | None = None, context: ssl.SSLContext | None = None) -> None:
        self.timeout_s = timeout_s
        self.context = context if context is not None else _build_ssl_context()

    def _urlopen(self, url: str):
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, "Accept": "*/*"})
        if self.timeout_s is None:
            return urllib.request.urlopen(request, context=self.context)
        return urllib.request.urlopen(request, timeout=self.timeout_s, context=self.context)

    def fetch(self, url: str, destination: Path) -> bool:
        try:
            with self._urlopen(url) as response, destination.open("wb") as fh:
                shutil.copyfileobj(response, fh, _CHUNK)
        except urllib.error.HTTPError as exc:
            LOGGER.debug(f"HTTP {exc.code} from {url}", extra={"event": "fetch_http_error"})
        except (urllib.error.URLError, OSError) as exc:
            LOGGER.debug(f"transport error from {url}: {exc}", extra={"event": "fetch_transport_error"})
        except http.client.HTTPException as exc:
            LOGGER.debug(f"malformed response from {url}: {exc!r}", extra={"event": "fetch_protocol_error"})
        except ValueError as exc:
            LOGGER.debug(f"unusable url {url}: {exc}", extra={"event": "fetch_bad_url"})
        else:
            return True

        destination.unlink(missing_ok=True)
        return False
