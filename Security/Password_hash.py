"""
PASSWORD HASHING & VERIFICATION
===============================

One-way credential storage for user accounts, using Argon2 via passlib.
Plain passwords are never written to the database or to logs.

FLOW:
- hash_password() runs before a User row is created (seeder, registration).
- verify_password() checks a login or account-deletion confirmation.

WHY:
- A stolen users table must not reveal passwords.

HOW:
- Argon2 with a per-password salt. needs_rehash() flags hashes made with
  older Argon2 parameters so login can upgrade them.

USAGE:
    from Security.Password_hash import hash_password, verify_password
    user.password_hash = hash_password(form_password)
    if verify_password(form_password, user.password_hash):
        ...
"""

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto"
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password.

    Raises:
        ValueError: if the password is empty.
    """
    if not password:
        raise ValueError("Password must not be empty")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True when ``plain_password`` matches the stored hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        return False


def needs_rehash(hashed_password: str) -> bool:
    """True when the stored hash should be replaced on next successful login."""
    try:
        return pwd_context.needs_update(hashed_password)
    except (UnknownHashError, ValueError):
        return True
