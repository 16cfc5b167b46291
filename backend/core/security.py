"""Password hashing (bcrypt).

Only the hash is ever stored. bcrypt reads at most 72 bytes of input, so
longer passwords are rejected by the User record before they get here.
"""
import bcrypt

from core.config import settings

BCRYPT_MAX_BYTES = 72


def get_password_hash(password: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash.

    A malformed or empty stored hash never matches.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("ascii"))
    except ValueError:
        return False
