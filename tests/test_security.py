"""Tests for the service-side hashing, encryption and token helpers."""
from datetime import timedelta

import pytest
from jose import jwt as jose_jwt

from lockbox.app.core.config import settings
from lockbox.app.security import crypto, hashing, jwt, timelock


def test_password_hash_roundtrip():
    stored = hashing.get_password_hash("correct horse")

    assert stored.startswith("pbkdf2_sha256$100000$")
    assert hashing.verify_password("correct horse", stored)
    assert not hashing.verify_password("wrong horse", stored)


def test_password_hash_is_salted():
    assert hashing.get_password_hash("same") != hashing.get_password_hash("same")


@pytest.mark.parametrize("stored", [
    "",
    "not-a-hash",
    "md5$1$AAAA$BBBB",
    "pbkdf2_sha256$abc$AAAA$BBBB",
])
def test_malformed_hash_never_verifies(stored):
    assert hashing.verify_password("anything", stored) is False


def test_encrypt_decrypt():
    blob = crypto.encrypt("hunter2", "key material")

    assert blob != "hunter2"
    assert crypto.decrypt(blob, "key material") == "hunter2"
    # Fresh salt and nonce every time
    assert crypto.encrypt("hunter2", "key material") != blob


def test_decrypt_with_wrong_key_fails():
    blob = crypto.encrypt("hunter2", "key material")

    with pytest.raises(crypto.CryptoError, match="Decryption failed"):
        crypto.decrypt(blob, "other key")


@pytest.mark.parametrize("blob", ["***not base64***", "c2hvcnQ="])
def test_decrypt_rejects_garbage(blob):
    with pytest.raises(crypto.CryptoError, match="Invalid data format"):
        crypto.decrypt(blob, "key material")


def test_access_token_claims():
    token = jwt.create_access_token({"sub": jwt.TOKEN_SUBJECT}, expires_delta=timedelta(minutes=5))

    payload = jose_jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == "owner"
    assert "exp" in payload


def test_deadlines_are_in_milliseconds():
    assert timelock.unlock_deadline(1_000, 60) == 61_000
    assert timelock.relock_deadline(1_000, 1) == 2_000


def test_bump_updated_at_is_strictly_newer():
    assert timelock.bump_updated_at(5_000, 1_000) == 5_000
    assert timelock.bump_updated_at(5_000, 5_000) == 5_001
