"""
Password hashing and verification utilities.
"""

import bcrypt

from tasky.core.config import settings


def hash_password(password: str) -> str:
    """
    Hash a plain password using bcrypt at the configured cost factor.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hashed password as string
    """
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
