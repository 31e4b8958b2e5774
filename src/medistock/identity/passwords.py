"""bcrypt password hashing."""

import bcrypt
from protean.exceptions import ValidationError

from medistock.domain import medistock

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _encode(password: str, field_name: str) -> bytes:
    if not password:
        raise ValidationError({field_name: ["Password is required"]})
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            {field_name: [f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes"]}
        )
    return encoded


def hash_password(password: str, field_name: str = "password") -> str:
    salt = bcrypt.gensalt(rounds=medistock.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password, field_name), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """True when ``password`` matches the stored hash. Never raises for bad input."""
    if not password or not password_hash:
        return False
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        return False
