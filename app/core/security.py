"""Security utilities: opaque identifiers, session tokens, email normalization."""

import re
import secrets
import uuid

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def generate_webauthn_id() -> str:
    """User handle for WebAuthn: 16 random bytes, hex encoded."""
    return secrets.token_hex(16)


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


def generate_instance_id() -> str:
    return str(uuid.uuid4())
