"""Password hashing, access tokens and random identifiers."""

import hashlib
import secrets
import uuid

_RANDOM_LIMIT = 9223372036854775807


def to_sha512(text: str) -> str:
    """Return the lower-case hex SHA-512 digest of ``text``."""
    return hashlib.sha512(text.encode("utf-8")).hexdigest()


def crypto_passwd(raw: str) -> str:
    """Hash a raw password the way it is stored in the account table."""
    return to_sha512(raw)


def generate_atk() -> str:
    """Create a new access token."""
    return str(uuid.uuid4())


def generate_atk_session() -> str:
    """Create a new session token."""
    return str(uuid.uuid4())


def get_random() -> str:
    """Return the SHA-512 digest of a cryptographically random integer."""
    return to_sha512(str(secrets.randbelow(_RANDOM_LIMIT)))