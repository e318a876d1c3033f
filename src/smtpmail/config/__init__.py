"""Configuration loading for smtpmail."""

from smtpmail.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    EnvVarError,
    SmtpmailError,
)
from smtpmail.config.loader import load_config, load_from_mapping

__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "EnvVarError",
    "SmtpmailError",
    "load_config",
    "load_from_mapping",
]
