# lockbox/app/security/hashing.py
"""
Master password hashing.

Format: pbkdf2_sha256$<iterations>$<salt b64>$<hash b64>
"""
import base64
import secrets

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 100_000
SALT_LENGTH = 16


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    salt = secrets.token_bytes(SALT_LENGTH)
    digest = _derive(password, salt, ITERATIONS)
    return "$".join([
        ALGORITHM,
        str(ITERATIONS),
        base64.b64encode(salt).decode("utf-8"),
        base64.b64encode(digest).decode("utf-8"),
    ])


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a password against a stored hash in constant time.

    Malformed hashes never verify.
    """
    try:
        algorithm, iterations, salt_b64, digest_b64 = hashed_password.split("$")
        if algorithm != ALGORITHM:
            return False
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
        actual = _derive(plain_password, salt, int(iterations))
    except ValueError:
        return False
    return secrets.compare_digest(expected, actual)
