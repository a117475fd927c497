"""
Tests for key import and derivation.
"""

from __future__ import annotations

import base64
import pickle

import pytest

from kpow_secure import (
    AES_256_KEY_SIZE,
    InvalidKeyMaterialError,
    SecretKey,
    derive_key,
    export_key,
    generate_key,
    import_key,
    random_salt,
)


class TestDeriveKey:
    def test_matches_known_key(self, secret_key, encoded_key):
        assert export_key(secret_key) == encoded_key

    def test_interchangeable_with_import(self, secret_key, imported_key):
        assert secret_key == imported_key

    def test_deterministic(self, secret_key):
        assert derive_key("aquickredfox", "some-salt") == secret_key

    def test_salt_changes_key(self, secret_key):
        assert derive_key("aquickredfox", "other-salt") != secret_key

    def test_passphrase_changes_key(self, secret_key):
        assert derive_key("aquickredfo", "some-salt") != secret_key

    def test_key_size(self, secret_key):
        assert len(secret_key) == AES_256_KEY_SIZE

    @pytest.mark.parametrize("passphrase", ["", None])
    def test_empty_passphrase(self, passphrase):
        with pytest.raises(InvalidKeyMaterialError):
            derive_key(passphrase, "some-salt")


class TestImportKey:
    def test_ignores_surrounding_whitespace(self, encoded_key, imported_key):
        assert import_key(f"  {encoded_key}\n") == imported_key

    @pytest.mark.parametrize("text", ["", "   ", None, "not a key!", "//iQh9KYe7pM+mevjifZPrm7YE2"])
    def test_invalid_text(self, text):
        with pytest.raises(InvalidKeyMaterialError):
            import_key(text)

    @pytest.mark.parametrize("size", [16, 24, 31, 33, 64])
    def test_wrong_size(self, size):
        with pytest.raises(InvalidKeyMaterialError):
            import_key(base64.b64encode(bytes(size)).decode("ascii"))

    def test_export_round_trip(self):
        key = generate_key()
        assert import_key(export_key(key)) == key


class TestSecretKey:
    def test_rejects_wrong_size(self):
        with pytest.raises(InvalidKeyMaterialError):
            SecretKey(b"short")

    def test_rejects_non_bytes(self):
        with pytest.raises(InvalidKeyMaterialError):
            SecretKey("x" * 32)

    def test_redacted(self, imported_key, encoded_key):
        assert repr(imported_key) == "SecretKey([REDACTED])"
        assert str(imported_key) == "SecretKey([REDACTED])"
        assert encoded_key not in f"{imported_key!r} {imported_key}"

    def test_not_picklable(self, imported_key):
        with pytest.raises(TypeError):
            pickle.dumps(imported_key)

    def test_not_hashable(self, imported_key):
        with pytest.raises(TypeError):
            hash(imported_key)

    def test_generated_keys_differ(self):
        assert generate_key() != generate_key()

    def test_export_rejects_other_types(self):
        with pytest.raises(InvalidKeyMaterialError):
            export_key(b"\x00" * 32)


def test_random_salt():
    first, second = random_salt(), random_salt()
    assert first != second
    assert derive_key("pass", first) != derive_key("pass", second)
