"""PBKDF2-SHA256 password hashing stored as "pbkdf2_sha256$<iterations>$<salt>$<hex digest>"."""

import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 240_000
KEY_LENGTH = 32


def _kdf(salt: str, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt.encode(),
        iterations=iterations,
    )


def hash_password(password: str, salt: str | None = None, iterations: int = ITERATIONS) -> str:
    salt = salt or secrets.token_hex(16)
    digest = _kdf(salt, iterations).derive(password.encode())
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, stored: str | None) -> bool:
    """Check password against a stored hash. Malformed hashes never match."""
    if not stored:
        return False
    try:
        algo, iterations, salt, expected = stored.split("$")
        rounds = int(iterations)
        expected_key = bytes.fromhex(expected)
    except ValueError:
        return False
    if algo != ALGORITHM or rounds < 1 or not salt:
        return False
    try:
        _kdf(salt, rounds).verify(password.encode(), expected_key)
    except InvalidKey:
        return False
    return True
