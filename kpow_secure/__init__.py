"""
kpow-secure

Encrypt small configuration secrets (connection strings, passwords, JAAS
config blocks) with AES-256 into a versioned, base64 text payload.

Quick Start
-----------
```python
from kpow_secure import decoded_payload, derive_key, encoded_payload, to_map

key = derive_key("aquickredfox", "some-salt")

payload = encoded_payload(key, "SSL_KEYSTORE_PASSWORD=keypass1234")
config = to_map(decoded_payload(key, payload))
```

Key Features
------------
- **AES-256-CBC**: PKCS#7 padded, fresh random IV per payload
- **Versioned envelope**: version byte and IV length byte ahead of the IV
- **Two key paths**: base64 raw key or PBKDF2-HMAC-SHA256 passphrase + salt
- **Typed errors**: one exception class per failure kind
"""

__version__ = "0.1.0"

# =============================================================================
# Key Exports
# =============================================================================

from .key import (
    AES_256_KEY_SIZE,
    PBKDF2_ITERATIONS,
    SecretKey,
    derive_key,
    export_key,
    generate_key,
    import_key,
    random_salt,
)

# =============================================================================
# Payload Exports
# =============================================================================

from .payload import (
    IV_SIZE,
    SCHEME_V1,
    decoded_payload,
    decrypt,
    decrypt_file,
    encoded_payload,
    encrypt,
    encrypt_file,
)

# =============================================================================
# Properties Exports
# =============================================================================

from .properties import decrypt_to_map, load_properties, to_map

# =============================================================================
# Error Exports
# =============================================================================

from .errors import (
    ConfigError,
    DecryptionFailedError,
    InvalidIvLengthError,
    InvalidKeyMaterialError,
    InvalidUtf8Error,
    MalformedPayloadError,
    MalformedPropertiesError,
    PayloadDecryptionError,
    SecureError,
    UnsupportedSchemeVersionError,
)

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Key
    "AES_256_KEY_SIZE",
    "PBKDF2_ITERATIONS",
    "SecretKey",
    "derive_key",
    "export_key",
    "generate_key",
    "import_key",
    "random_salt",
    # Payload
    "IV_SIZE",
    "SCHEME_V1",
    "decoded_payload",
    "decrypt",
    "decrypt_file",
    "encoded_payload",
    "encrypt",
    "encrypt_file",
    # Properties
    "decrypt_to_map",
    "load_properties",
    "to_map",
    # Errors
    "SecureError",
    "MalformedPayloadError",
    "UnsupportedSchemeVersionError",
    "InvalidIvLengthError",
    "PayloadDecryptionError",
    "MalformedPropertiesError",
    "DecryptionFailedError",
    "InvalidUtf8Error",
    "InvalidKeyMaterialError",
    "ConfigError",
]
