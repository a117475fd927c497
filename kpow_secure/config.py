"""
Environment configuration for the kpow-secure command line.

Settings are read from the process environment, after loading a ``.env`` file
if one is present in the working directory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError
from .key import SecretKey, import_key
from .payload import read_text

ENV_KEY = "KPOW_SECURE_KEY"
ENV_KEY_FILE = "KPOW_SECURE_KEY_FILE"
ENV_LOG_LEVEL = "KPOW_SECURE_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"


def parse_log_level(value: str, source: str) -> str:
    """
    Normalise a logging level name such as ``debug`` to ``DEBUG``.

    Raises:
        ConfigError: If the name is not a known logging level
    """
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level in {source}: {value}")
    return level


@dataclass(frozen=True)
class Settings:
    """Key source and logging configuration."""

    key: Optional[str] = None
    key_file: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def __repr__(self) -> str:
        key = "[REDACTED]" if self.key else None
        return (
            f"Settings(key={key}, key_file={self.key_file!r}, "
            f"log_level={self.log_level!r})"
        )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Path] = None,
    ) -> Settings:
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (no ``.env``
                loading happens in that case)
            dotenv_path: Explicit ``.env`` file to load

        Returns:
            Settings instance

        Raises:
            ConfigError: If both a key and a key file are configured, or the
                log level is unknown
        """
        if environ is None:
            load_dotenv(dotenv_path or find_dotenv(usecwd=True))
            environ = os.environ

        key = environ.get(ENV_KEY) or None
        key_file = environ.get(ENV_KEY_FILE) or None
        if key and key_file:
            raise ConfigError(f"Set only one of {ENV_KEY} and {ENV_KEY_FILE}")

        log_level = parse_log_level(environ.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL)

        return cls(
            key=key,
            key_file=Path(key_file) if key_file else None,
            log_level=log_level,
        )

    def secret_key(self) -> SecretKey:
        """
        Import the configured key.

        Raises:
            ConfigError: If no key source is configured or the key file cannot
                be read
            InvalidKeyMaterialError: If the key text is not a valid key
        """
        if self.key:
            return import_key(self.key)
        if self.key_file:
            return import_key(read_text(self.key_file).strip())
        raise ConfigError(f"No key configured: set {ENV_KEY} or {ENV_KEY_FILE}")
