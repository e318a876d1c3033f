"""Base exceptions shared across smtpmail.

Exception hierarchy::

    SmtpmailError
        ConfigError (base for configuration loading errors)
            ConfigFileNotFoundError
            ConfigFormatError
            EnvVarError
"""

from __future__ import annotations


class SmtpmailError(Exception):
    """Root of every exception raised by smtpmail."""


class ConfigError(SmtpmailError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """Raised when a configuration file does not exist."""


class ConfigFormatError(ConfigError, ValueError):
    """Raised when a configuration file cannot be parsed into a mapping."""


class EnvVarError(ConfigError):
    """Raised when environment variable substitution fails.

    Attributes:
        var_name: Name of the missing environment variable.
        source: File or context where the variable was referenced.

    Examples:
        >>> raise EnvVarError("SMTP_PASSWORD")
        Traceback (most recent call last):
        ...
        smtpmail.config.exceptions.EnvVarError: Environment variable 'SMTP_PASSWORD' is not set...
    """

    def __init__(self, var_name: str, source: str | None = None) -> None:
        """Initialize EnvVarError.

        Args:
            var_name: Name of the missing environment variable.
            source: File or context where the variable was referenced.
        """
        if source:
            message = (
                f"Environment variable '{var_name}' is not set (required by {source}). "
                "Use ${VAR:-default} for optional variables."
            )
        else:
            message = f"Environment variable '{var_name}' is not set. Use ${{VAR:-default}} for optional variables."
        super().__init__(message)
        self.var_name = var_name
        self.source = source


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "EnvVarError",
    "SmtpmailError",
]
