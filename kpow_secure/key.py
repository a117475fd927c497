"""
AES-256 key provider.

This module provides:
- SecretKey: opaque 32-byte key handle shared by both derivation paths
- import_key: wrap base64-encoded raw key material
- derive_key: PBKDF2-HMAC-SHA256 derivation from a passphrase and salt
- generate_key / random_salt / export_key: helpers for producing key files
"""

from __future__ import annotations

import base64
import binascii
import hmac
import secrets
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import InvalidKeyMaterialError

# Key derivation constants. Changing any of these makes previously
# encrypted payloads undecryptable.
AES_256_KEY_SIZE: int = 32  # 256 bits
PBKDF2_ITERATIONS: int = 65536
SALT_SIZE: int = 16


class SecretKey:
    """
    Opaque AES-256 key handle.

    Keys compare equal when their material is equal, regardless of whether they
    were imported or derived, but are not hashable. The raw bytes are never
    exposed publicly; use :func:`export_key` to write a key file on purpose.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        """
        Create a SecretKey from raw bytes.

        Args:
            key_bytes: Raw key material, exactly 32 bytes

        Raises:
            InvalidKeyMaterialError: If the material is not 32 bytes
        """
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise InvalidKeyMaterialError("Key must be bytes or bytearray")
        if len(key_bytes) != AES_256_KEY_SIZE:
            raise InvalidKeyMaterialError(
                f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(key_bytes)}"
            )
        self._bytes = bytearray(key_bytes)

    def _material(self) -> bytes:
        return bytes(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretKey):
            return NotImplemented
        return hmac.compare_digest(self._bytes, other._bytes)

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return "SecretKey([REDACTED])"

    __str__ = __repr__

    def __reduce__(self):
        raise TypeError("SecretKey cannot be pickled")

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_bytes"):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0


def import_key(encoded_key: Optional[str]) -> SecretKey:
    """
    Import a base64-encoded AES-256 key.

    The decoded bytes are used as key material as-is; this is not a passphrase.

    Args:
        encoded_key: Standard base64 text of exactly 32 bytes. Surrounding
            whitespace is ignored.

    Returns:
        SecretKey wrapping the decoded bytes

    Raises:
        InvalidKeyMaterialError: If the text is missing, not base64, or does
            not decode to 32 bytes
    """
    if not isinstance(encoded_key, str) or not encoded_key.strip():
        raise InvalidKeyMaterialError("Key text is empty")
    try:
        decoded = base64.b64decode(encoded_key.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidKeyMaterialError(f"Key is not valid base64: {e}") from e
    return SecretKey(decoded)


def derive_key(passphrase: Optional[str], salt: Optional[str]) -> SecretKey:
    """
    Derive an AES-256 key from a passphrase and salt.

    Uses PBKDF2-HMAC-SHA256 with 65536 iterations over the UTF-8 bytes of both
    inputs. The same (passphrase, salt) always yields the same key, and that key
    is interchangeable with :func:`import_key` of its base64 export.

    Args:
        passphrase: Non-empty passphrase
        salt: Salt text (may be empty)

    Returns:
        Derived SecretKey

    Raises:
        InvalidKeyMaterialError: If the passphrase is empty or missing
    """
    if not isinstance(passphrase, str) or not passphrase:
        raise InvalidKeyMaterialError("Passphrase is empty")
    if salt is None:
        salt = ""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=AES_256_KEY_SIZE,
        salt=salt.encode("utf-8"),
        iterations=PBKDF2_ITERATIONS,
    )
    return SecretKey(kdf.derive(passphrase.encode("utf-8")))


def generate_key() -> SecretKey:
    """Generate a cryptographically secure random 32-byte key."""
    return SecretKey(secrets.token_bytes(AES_256_KEY_SIZE))


def random_salt() -> str:
    """Random URL-safe salt text for :func:`derive_key`."""
    return secrets.token_urlsafe(SALT_SIZE)


def export_key(key: SecretKey) -> str:
    """
    Export key material as standard base64 text, the format read by
    :func:`import_key` and stored in key files.
    """
    if not isinstance(key, SecretKey):
        raise InvalidKeyMaterialError("Expected a SecretKey")
    return base64.standard_b64encode(key._material()).decode("ascii")
