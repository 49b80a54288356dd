"""Configuration loading for mimepost.

Configuration lives in a YAML file (``mimepost.conf.yml`` by default) and is
exposed as a :class:`box.Box`, so nested keys read as attributes. Values from
the file are deep-merged over the built-in defaults, which means a file only
needs the keys it changes.

Lookup order for :func:`load_config` without an explicit path:

1. ``MIMEPOST_CONFIG`` environment variable
2. ``./mimepost.conf.yml``
3. built-in defaults only
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from box import Box

from mimepost.exceptions import ConfigFileNotFoundError, ConfigFormatError, MailConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "MailSettings",
    "get_config",
    "get_mail_settings",
    "load_config",
    "reset_config",
]

log = logging.getLogger(__name__)

CONFIG_FILENAME = "mimepost.conf.yml"
CONFIG_ENV_VAR = "MIMEPOST_CONFIG"

DEFAULT_CONTENT_TYPE = "text/plain"
DEFAULT_CHARSET = "iso-8859-1"
DEFAULT_BASE64_LINE_LENGTH = 76

# RFC 2045 caps encoded lines at 76 characters
_MAX_BASE64_LINE_LENGTH = 76

DEFAULT_CONFIG: dict[str, Any] = {
    "logging": {"level": "WARNING"},
    "mail": {
        "defaults": {
            "content_type": DEFAULT_CONTENT_TYPE,
            "charset": DEFAULT_CHARSET,
        },
        "base64_line_length": DEFAULT_BASE64_LINE_LENGTH,
        "transport": {
            "backend": "sendmail",
            "sendmail": {
                "path": "/usr/sbin/sendmail",
                "args": ["-t", "-i"],
                "timeout": None,
            },
            "smtp": {
                "host": "localhost",
                "port": 587,
                "username": None,
                "password": None,
                "use_starttls": True,
                "use_ssl": False,
                "timeout": 10.0,
                "envelope_sender": None,
            },
        },
    },
}

_config: Box | None = None


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into *base* and return *base*.

    Examples:
        >>> _deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        {'a': {'b': 1, 'c': 3}}
    """
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _resolve_path(path: str | Path | None) -> tuple[Path | None, bool]:
    """Return the configuration path to read and whether it was requested explicitly."""
    if path is not None:
        return Path(path), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    candidate = Path.cwd() / CONFIG_FILENAME
    if candidate.is_file():
        return candidate, False
    return None, False


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFormatError(f"Configuration root in {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: str | Path | None = None) -> Box:
    """Load configuration and make it the active configuration.

    Args:
        path: Explicit YAML file. When omitted the environment variable and the
            working directory are searched.

    Returns:
        The merged configuration.

    Raises:
        ConfigFileNotFoundError: If an explicitly requested file is missing.
        ConfigFormatError: If the file is not valid YAML or not a mapping.
    """
    global _config  # pylint: disable=global-statement

    merged = copy.deepcopy(DEFAULT_CONFIG)
    config_path, explicit = _resolve_path(path)
    if config_path is not None:
        if not config_path.is_file():
            if explicit:
                raise ConfigFileNotFoundError(str(config_path))
        else:
            log.debug("Loading configuration from %s", config_path)
            _deep_merge(merged, _read_yaml(config_path))

    _config = Box(merged)
    return _config


def get_config() -> Box:
    """Return the active configuration, loading it on first use."""
    if _config is None:
        return load_config()
    return _config


def reset_config() -> None:
    """Forget the active configuration so the next access reloads it."""
    global _config  # pylint: disable=global-statement
    _config = None


@dataclass(frozen=True, slots=True)
class MailSettings:
    """Compilation settings used when a message does not override them.

    Attributes:
        default_content_type: Content type of the text part in multipart bodies.
        default_charset: Charset of the text part in multipart bodies.
        base64_line_length: Width at which attachment base64 data is wrapped.
    """

    default_content_type: str = DEFAULT_CONTENT_TYPE
    default_charset: str = DEFAULT_CHARSET
    base64_line_length: int = DEFAULT_BASE64_LINE_LENGTH

    def __post_init__(self) -> None:
        if not 4 <= self.base64_line_length <= _MAX_BASE64_LINE_LENGTH or self.base64_line_length % 4:
            raise MailConfigurationError(
                f"base64_line_length must be a multiple of 4 between 4 and {_MAX_BASE64_LINE_LENGTH}, "
                f"got {self.base64_line_length}"
            )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> MailSettings:
        """Build settings from a full configuration mapping.

        Args:
            config: Configuration with an optional ``mail`` section.

        Returns:
            Settings with defaults for every missing key.
        """
        mail = config.get("mail") or {}
        defaults = mail.get("defaults") or {}
        return cls(
            default_content_type=defaults.get("content_type") or DEFAULT_CONTENT_TYPE,
            default_charset=defaults.get("charset") or DEFAULT_CHARSET,
            base64_line_length=int(mail.get("base64_line_length") or DEFAULT_BASE64_LINE_LENGTH),
        )


def get_mail_settings(config: Mapping[str, Any] | None = None) -> MailSettings:
    """Return mail settings from *config* or from the active configuration."""
    return MailSettings.from_config(config if config is not None else get_config())
