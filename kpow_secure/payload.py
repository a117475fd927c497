"""
Versioned AES-256-CBC payload codec.

Envelope layout (scheme 1), base64 encoded with the standard alphabet:

    +---------+-----------+-----------+---------------------------+
    | version | iv length |    iv     |        ciphertext         |
    | 1 byte  |  1 byte   | 16 bytes  | PKCS#7 padded, remaining  |
    +---------+-----------+-----------+---------------------------+

The version byte lets a future layout be rejected explicitly by old decoders
instead of being misread, and the IV length byte keeps the header parseable if
a later scheme uses a different block size.

The scheme is unauthenticated (no MAC). A corrupted payload is usually caught
by the padding or UTF-8 checks but can occasionally decrypt to garbage text.
"""

from __future__ import annotations

import base64
import binascii
import secrets
from pathlib import Path
from typing import Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import (
    ConfigError,
    DecryptionFailedError,
    InvalidIvLengthError,
    InvalidUtf8Error,
    MalformedPayloadError,
    UnsupportedSchemeVersionError,
)
from .key import SecretKey, import_key

# Envelope constants
SCHEME_V1: int = 1
IV_SIZE: int = 16  # AES block size, bytes
BLOCK_SIZE_BITS: int = 128
HEADER_SIZE: int = 2  # version + iv length

PathLike = Union[str, Path]


def _cipher(key: SecretKey, iv: bytes) -> Cipher:
    # One cipher context per call, never shared.
    return Cipher(algorithms.AES(key._material()), modes.CBC(iv))


def encipher(key: SecretKey, iv: bytes, plain_text: str) -> bytes:
    """Encrypt UTF-8 plain text with AES-256-CBC and PKCS#7 padding."""
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(plain_text.encode("utf-8")) + padder.finalize()
    encryptor = _cipher(key, iv).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decipher(key: SecretKey, iv: bytes, ciphertext: bytes) -> str:
    """
    Decrypt AES-256-CBC ciphertext back to text.

    Raises:
        DecryptionFailedError: If the ciphertext is not a positive multiple of
            the block size or the padding is invalid
        InvalidUtf8Error: If the decrypted bytes are not UTF-8
    """
    if not ciphertext or len(ciphertext) % IV_SIZE:
        raise DecryptionFailedError(
            f"Ciphertext length {len(ciphertext)} is not a positive multiple of {IV_SIZE}"
        )
    decryptor = _cipher(key, iv).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    try:
        data = unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        # Generic message, the cause is wrong key or corrupted payload
        raise DecryptionFailedError("Decryption failed") from e
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error("Decrypted payload is not valid UTF-8") from e


def encoded_payload(key: SecretKey, plain_text: str) -> str:
    """
    Encrypt plain text into base64 Payload Text.

    Args:
        key: AES-256 key from :func:`~kpow_secure.key.import_key` or
            :func:`~kpow_secure.key.derive_key`
        plain_text: Text to encrypt, may be empty

    Returns:
        Base64 text of ``version || iv length || iv || ciphertext``
    """
    iv = secrets.token_bytes(IV_SIZE)
    ciphertext = encipher(key, iv, plain_text)
    envelope = bytes([SCHEME_V1, len(iv)]) + iv + ciphertext
    return base64.standard_b64encode(envelope).decode("ascii")


def decoded_payload(key: SecretKey, payload_text: str) -> str:
    """
    Validate the envelope, then decrypt it back to the original plain text.

    Args:
        key: AES-256 key
        payload_text: Base64 Payload Text produced by :func:`encoded_payload`

    Returns:
        Original plain text

    Raises:
        MalformedPayloadError: Not base64, or too short for the header and IV
        UnsupportedSchemeVersionError: Version byte is not 1
        InvalidIvLengthError: IV length byte is not 16
        DecryptionFailedError: Wrong key, corrupted or truncated ciphertext
        InvalidUtf8Error: Decrypted bytes are not UTF-8
    """
    try:
        envelope = base64.b64decode(payload_text, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise MalformedPayloadError(f"Base64 decode error: {e}") from e

    if not envelope:
        raise MalformedPayloadError("Payload is empty")
    version = envelope[0]
    if version != SCHEME_V1:
        raise UnsupportedSchemeVersionError(f"Invalid scheme version: {version}")
    if len(envelope) < HEADER_SIZE:
        raise MalformedPayloadError("Payload too small: missing IV length")
    iv_length = envelope[1]
    if iv_length != IV_SIZE:
        raise InvalidIvLengthError(f"Invalid initialization vector size: {iv_length}")
    if len(envelope) < HEADER_SIZE + iv_length:
        raise MalformedPayloadError(
            f"Payload too small: expected at least {HEADER_SIZE + iv_length} bytes, "
            f"got {len(envelope)}"
        )

    iv = envelope[HEADER_SIZE:HEADER_SIZE + iv_length]
    ciphertext = envelope[HEADER_SIZE + iv_length:]
    return decipher(key, iv, ciphertext)


def encrypt(key_text: str, plain_text: str) -> str:
    """Encrypt with a base64 key text."""
    return encoded_payload(import_key(key_text), plain_text)


def decrypt(key_text: str, payload_text: str) -> str:
    """Decrypt with a base64 key text."""
    return decoded_payload(import_key(key_text), payload_text)


def read_text(path: PathLike) -> str:
    """
    Read a UTF-8 text file.

    Raises:
        ConfigError: If the file is missing or unreadable
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e


def encrypt_file(key_file: PathLike, plain_file: PathLike) -> str:
    """Encrypt the contents of ``plain_file`` with the key stored in ``key_file``."""
    return encrypt(read_text(key_file).strip(), read_text(plain_file))


def decrypt_file(key_file: PathLike, payload_file: PathLike) -> str:
    """Decrypt the payload stored in ``payload_file`` with the key in ``key_file``."""
    return decrypt(read_text(key_file).strip(), read_text(payload_file).strip())
