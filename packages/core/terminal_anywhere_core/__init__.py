"""Core installer services for settings and logging."""

from .config import InstallerConfig, config_path, load_config, save_config
from .logging_setup import configure_logging, get_logger, installer_home, log_dir

__all__ = [
    "InstallerConfig",
    "config_path",
    "configure_logging",
    "get_logger",
    "installer_home",
    "load_config",
    "log_dir",
    "save_config",
]
