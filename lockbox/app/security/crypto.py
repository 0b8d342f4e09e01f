# lockbox/app/security/crypto.py
"""
Content encryption for lockboxes.

AES-256-GCM with a key derived by PBKDF2-SHA256 from the key material
(the stored master password hash). Output is base64 of
salt || nonce || ciphertext.
"""
import base64
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

SALT_LENGTH = 16
NONCE_LENGTH = 12
KEY_LENGTH = 32
PBKDF2_ITERATIONS = 100_000


class CryptoError(Exception):
    """Raised when content cannot be encrypted or decrypted."""
    pass


def _derive_key(key_material: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(key_material.encode("utf-8"))


def encrypt(content: str, key_material: str) -> str:
    salt = secrets.token_bytes(SALT_LENGTH)
    nonce = secrets.token_bytes(NONCE_LENGTH)
    cipher = AESGCM(_derive_key(key_material, salt))
    ciphertext = cipher.encrypt(nonce, content.encode("utf-8"), None)
    return base64.b64encode(salt + nonce + ciphertext).decode("utf-8")


def decrypt(encrypted: str, key_material: str) -> str:
    try:
        combined = base64.b64decode(encrypted, validate=True)
    except ValueError as e:
        raise CryptoError("Invalid data format") from e

    if len(combined) < SALT_LENGTH + NONCE_LENGTH:
        raise CryptoError("Invalid data format")

    salt = combined[:SALT_LENGTH]
    nonce = combined[SALT_LENGTH:SALT_LENGTH + NONCE_LENGTH]
    ciphertext = combined[SALT_LENGTH + NONCE_LENGTH:]

    cipher = AESGCM(_derive_key(key_material, salt))
    try:
        plaintext = cipher.decrypt(nonce, ciphertext, None)
        return plaintext.decode("utf-8")
    except (InvalidTag, UnicodeDecodeError) as e:
        raise CryptoError("Decryption failed") from e
