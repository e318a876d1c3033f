"""YAML configuration loading for smtpmail.

Configuration files are plain YAML documents. String values may reference
environment variables so that secrets such as the SMTP password stay out of
the file:

- ``${VAR}``: required variable, raises :class:`EnvVarError` if unset
- ``${VAR:-default}``: optional variable with a default value

Examples:
    >>> config = load_config("smtpmail.yml")  # doctest: +SKIP
    >>> config.mail.sender.host  # doctest: +SKIP
    'smtp.example.com'
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from box import Box

from smtpmail.config.exceptions import ConfigFileNotFoundError, ConfigFormatError, EnvVarError

log = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([a-zA-Z_][a-zA-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(value: str, source: str | None = None) -> str:
    """Expand environment variables in a string value.

    Args:
        value: String potentially containing ``${VAR}`` patterns.
        source: Source file for error messages.

    Returns:
        String with environment variables expanded.

    Raises:
        EnvVarError: If a required variable is not set.

    Examples:
        >>> import os
        >>> os.environ["SMTPMAIL_DOC_HOST"] = "mail.example.com"
        >>> _expand_env_vars("${SMTPMAIL_DOC_HOST}")
        'mail.example.com'
        >>> _expand_env_vars("${SMTPMAIL_DOC_MISSING:-587}")
        '587'
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if default_value is not None:
            return default_value
        raise EnvVarError(var_name, source)

    return _ENV_VAR_PATTERN.sub(replacer, value)


def _expand_env_vars_recursive(data: Any, source: str | None = None) -> Any:
    """Apply :func:`_expand_env_vars` to every string in nested dicts and lists."""
    if isinstance(data, dict):
        return {k: _expand_env_vars_recursive(v, source) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item, source) for item in data]
    if isinstance(data, str):
        return _expand_env_vars(data, source)
    return data


def _load_yaml_file(path: Path, encoding: str = DEFAULT_ENCODING) -> dict[str, Any]:
    """Read a YAML file and return its root mapping.

    Args:
        path: File to read.
        encoding: Text encoding of the file.

    Returns:
        The parsed mapping (empty when the file is empty).

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigFormatError: If the YAML is invalid or its root is not a mapping.
    """
    if not path.is_file():
        raise ConfigFileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open(encoding=encoding) as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFormatError(f"Config root in {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: str | Path, *, encoding: str = DEFAULT_ENCODING) -> Box:
    """Load a YAML configuration file into a :class:`box.Box`.

    Args:
        path: Path to the YAML file.
        encoding: Text encoding of the file.

    Returns:
        Box with attribute access to the configuration tree.

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigFormatError: If the file is not a YAML mapping.
        EnvVarError: If a required environment variable is missing.
    """
    config_path = Path(path).expanduser()
    data = _load_yaml_file(config_path, encoding)
    expanded = _expand_env_vars_recursive(data, source=str(config_path))
    log.debug("Loaded configuration from %s", config_path)
    return Box(expanded, default_box=False)


def load_from_mapping(data: dict[str, Any], *, source: str | None = None) -> Box:
    """Wrap an in-memory mapping the same way :func:`load_config` wraps a file."""
    return Box(_expand_env_vars_recursive(dict(data), source=source), default_box=False)


__all__ = [
    "DEFAULT_ENCODING",
    "load_config",
    "load_from_mapping",
]
