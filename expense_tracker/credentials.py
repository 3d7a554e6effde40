from __future__ import annotations

import logging
import sqlite3
from typing import Optional

import bcrypt

from expense_tracker.core.models import User
from expense_tracker.database import find_user_by_email, insert_user
from expense_tracker.errors import DuplicateEmail, ValidationError
from expense_tracker.utils import normalize_email

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def hash_password(raw_password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    encoded = raw_password.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise ValidationError("Password must be at most 72 bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(user: User, raw_password: str) -> bool:
    encoded = (raw_password or "").encode("utf-8")
    if not encoded or len(encoded) > _BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, user.password_hash.encode("utf-8"))


def find_by_email(db_path: str, email: str) -> Optional[User]:
    return find_user_by_email(db_path, email)


def create_user(
    db_path: str,
    full_name: str,
    email: str,
    raw_password: str,
    profile_image_url: str | None = None,
    rounds: int = DEFAULT_ROUNDS,
) -> User:
    """Register a new user with a bcrypt-hashed password.

    Emails are compared case-insensitively; a taken email raises
    ``DuplicateEmail`` whether it is found up front or trips the unique index.
    """
    full_name = (full_name or "").strip()
    email = normalize_email(email)
    if not full_name or not email or not raw_password:
        raise ValidationError("All fields are required")

    if find_user_by_email(db_path, email) is not None:
        raise DuplicateEmail()

    password_hash = hash_password(raw_password, rounds)
    try:
        user = insert_user(db_path, full_name, email, password_hash, profile_image_url)
    except sqlite3.IntegrityError as exc:
        raise DuplicateEmail() from exc
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db_path: str, email: str, raw_password: str) -> User:
    """Return the user owning ``email`` if ``raw_password`` matches."""
    if not email or not raw_password:
        raise ValidationError("All fields are required")
    user = find_user_by_email(db_path, email)
    if user is None or not verify_password(user, raw_password):
        logger.info("Rejected login attempt")
        raise ValidationError("Invalid credentials")
    return user
