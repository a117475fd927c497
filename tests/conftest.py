"""
Pytest configuration and fixtures for kpow-secure tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from kpow_secure import SecretKey, derive_key, import_key
from kpow_secure.config import ENV_KEY, ENV_KEY_FILE, ENV_LOG_LEVEL

SAMPLE_INPUT = (
    "SSL_KEYSTORE_PASSWORD=keypass1234\n"
    "SSL_TRUSTSTORE_PASSWORD=trustpass1234"
)

ENCODED_KEY = "//iQh9KYe7pM+mevjifZPrm7YE2+rRloG1E15zzjR88="

# Produced by an earlier deployment with the key above
SAMPLE_PAYLOAD = (
    "ARDuFSOqVc5l8dPe2l8jLnRvf2Y2/ZnhWNtkuZuoP1Updxo4cFAsFr+eM4WVcH/yIogK3ypO4sLp7sS"
    "XjkXv3L5Ci/5poJG2U/+No5ySBR1BhDjcV3mkO3TBYp4nQu65mpA="
)


@pytest.fixture(scope="session")
def secret_key() -> SecretKey:
    """Key derived from the sample passphrase and salt."""
    return derive_key("aquickredfox", "some-salt")


@pytest.fixture
def imported_key() -> SecretKey:
    """The same key, imported from its base64 text."""
    return import_key(ENCODED_KEY)


@pytest.fixture
def key_file(tmp_path: Path) -> Path:
    """Key file as written by the keygen command, trailing newline included."""
    path = tmp_path / "passphrase.key"
    path.write_text(ENCODED_KEY + "\n", encoding="utf-8")
    return path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Isolate from the caller's environment and any .env file."""
    for name in (ENV_KEY, ENV_KEY_FILE, ENV_LOG_LEVEL):
        # set first so a value loaded from .env later is undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample_input() -> str:
    return SAMPLE_INPUT


@pytest.fixture
def sample_payload() -> str:
    return SAMPLE_PAYLOAD


@pytest.fixture
def encoded_key() -> str:
    return ENCODED_KEY
