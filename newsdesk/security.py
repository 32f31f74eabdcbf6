from functools import lru_cache

import bcrypt

from newsdesk.config import settings


def hash_password(password: str) -> str:
    """
    Return a salted bcrypt hash of *password*.

    A fresh salt is generated on every call, so hashing the same password
    twice yields two different strings that both verify.
    """
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check *password* against a stored hash in constant time."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or a password longer than bcrypt accepts.
        return False


@lru_cache(maxsize=1)
def placeholder_hash() -> str:
    """
    A valid hash that belongs to no account.

    Checking a password against it costs the same as a real check, so a
    login for an unknown email takes as long as one with a wrong password.
    """
    return hash_password("no-such-account")
