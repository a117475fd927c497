"""
Exception classes for secure payload operations.

Every failure the key provider or the payload codec can produce has its own
class, so callers can tell a wrong key from a malformed payload. The ``kind``
attribute is a stable identifier suitable for messages and exit handling.
"""

from __future__ import annotations


class SecureError(Exception):
    """Base exception for all kpow-secure operations."""

    kind: str = "secure"


class MalformedPayloadError(SecureError):
    """Payload text is not valid base64 or too short to hold an envelope."""

    kind = "malformed-payload"


class UnsupportedSchemeVersionError(SecureError):
    """Envelope scheme version byte is not one this library understands."""

    kind = "unsupported-scheme-version"


class InvalidIvLengthError(SecureError):
    """Envelope IV length byte disagrees with the declared scheme."""

    kind = "invalid-iv-length"


class PayloadDecryptionError(SecureError):
    """Wrong key or corrupted ciphertext."""

    kind = "payload-decryption"


class DecryptionFailedError(PayloadDecryptionError):
    """Cipher padding or block alignment check failed."""

    kind = "decryption-failed"


class InvalidUtf8Error(PayloadDecryptionError):
    """Decrypted bytes are not valid UTF-8 text."""

    kind = "invalid-utf8"


class InvalidKeyMaterialError(SecureError):
    """Key bytes are missing or wrongly sized, or the passphrase is empty."""

    kind = "invalid-key-material"


class MalformedPropertiesError(SecureError):
    """Decrypted configuration text has a malformed escape."""

    kind = "malformed-properties"


class ConfigError(SecureError):
    """Configuration error (environment, key or payload files)."""

    kind = "config"
