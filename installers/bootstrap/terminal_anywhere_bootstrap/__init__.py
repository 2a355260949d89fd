"""Bootstrap installer: platform detection, fallback download, verified install."""

from .errors import (
    BootstrapError,
    DownloadExhaustedError,
    TransportUnavailableError,
    UnsupportedPlatformError,
)
from .platforms import PlatformTag, identify, supported_platforms
from .products import CLIENT, PRODUCTS, SERVER, Product
from .resolver import CandidatePlan, DownloadCandidate, OriginKind, ReleaseSource, resolve
from .service import (
    AcquisitionResult,
    InstallationTarget,
    InstallResult,
    acquire,
    check_path,
    install_artifact,
    install_product,
    path_guidance,
)
from .transport import Transport, UrllibTransport
from .validation import RejectReason, ValidationResult, validate

__all__ = [
    "AcquisitionResult",
    "BootstrapError",
    "CLIENT",
    "CandidatePlan",
    "DownloadCandidate",
    "DownloadExhaustedError",
    "InstallResult",
    "InstallationTarget",
    "OriginKind",
    "PRODUCTS",
    "PlatformTag",
    "Product",
    "RejectReason",
    "ReleaseSource",
    "SERVER",
    "Transport",
    "TransportUnavailableError",
    "UnsupportedPlatformError",
    "UrllibTransport",
    "ValidationResult",
    "acquire",
    "check_path",
    "identify",
    "install_artifact",
    "install_product",
    "path_guidance",
    "resolve",
    "supported_platforms",
    "validate",
]
