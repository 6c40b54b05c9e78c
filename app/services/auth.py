"""Passwordless sign-in: WebAuthn challenge/response keyed by email.

initiate() picks the ceremony: registration when no user has the email,
authentication otherwise. The pending challenge lives in the caller's
SessionState and is cleared only by a successful verify, which also rotates
the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import (
    SESSION_CHALLENGE,
    SESSION_PENDING_EMAIL,
    SESSION_PENDING_WEBAUTHN_ID,
    SESSION_RETURN_TO,
    SESSION_USER_ID,
)
from app.core.enums import AuthFlow
from app.core.exceptions import (
    AuthenticationFailed,
    CredentialNotFound,
    InvalidEmail,
    UserNotFound,
)
from app.core.security import generate_webauthn_id, is_valid_email, normalize_email
from app.core.sessions import SessionState
from app.models.user import Credential, User
from app.services.passkeys import WebAuthnVerifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Challenge:
    flow: AuthFlow
    email: str
    options: dict[str, Any]


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def initiate(
    db: AsyncSession, session: SessionState, email: str, verifier: WebAuthnVerifier
) -> Challenge:
    normalized = normalize_email(email)
    if not is_valid_email(normalized):
        raise InvalidEmail(email)

    user = await find_user_by_email(db, normalized)
    if user is None:
        webauthn_id = generate_webauthn_id()
        issued = verifier.registration_options(user_handle=webauthn_id, email=normalized)
        session[SESSION_CHALLENGE] = issued.challenge
        session[SESSION_PENDING_EMAIL] = normalized
        session[SESSION_PENDING_WEBAUTHN_ID] = webauthn_id
        return Challenge(flow=AuthFlow.REGISTRATION, email=normalized, options=issued.options)

    result = await db.execute(select(Credential.external_id).where(Credential.user_id == user.id))
    issued = verifier.authentication_options(list(result.scalars().all()))
    session[SESSION_CHALLENGE] = issued.challenge
    session[SESSION_PENDING_EMAIL] = user.email
    # A handle left over from an abandoned registration would mark this as a sign-up
    session.pop(SESSION_PENDING_WEBAUTHN_ID)
    return Challenge(flow=AuthFlow.AUTHENTICATION, email=user.email, options=issued.options)


async def verify_registration(
    db: AsyncSession,
    session: SessionState,
    email: str,
    response: dict[str, Any],
    verifier: WebAuthnVerifier,
) -> User:
    """Create the user and first credential. On failure the pending challenge stays in the session."""
    normalized = normalize_email(email)
    challenge = session.get(SESSION_CHALLENGE)
    webauthn_id = session.get(SESSION_PENDING_WEBAUTHN_ID)
    if not challenge or not webauthn_id:
        raise AuthenticationFailed("no pending registration challenge")
    if session.get(SESSION_PENDING_EMAIL) != normalized:
        raise AuthenticationFailed("email does not match the pending registration")

    registered = verifier.verify_registration(response, challenge)

    if await find_user_by_email(db, normalized) is not None:
        raise AuthenticationFailed("email already registered")
    existing = await db.execute(
        select(Credential.id).where(Credential.external_id == registered.credential_id)
    )
    if existing.scalar_one_or_none() is not None:
        raise AuthenticationFailed("credential already registered")

    # Unique email / credential id also guard a concurrent sign-up that passed the checks above
    try:
        async with db.begin_nested():
            user = User(email=normalized, webauthn_id=webauthn_id)
            db.add(user)
            await db.flush()
            db.add(
                Credential(
                    user_id=user.id,
                    external_id=registered.credential_id,
                    public_key=registered.public_key,
                    sign_count=registered.sign_count or 0,
                )
            )
            await db.flush()
    except IntegrityError as e:
        raise AuthenticationFailed("email or credential registered concurrently") from e

    establish_session(session, user)
    logger.info("Registered user %s", user.id)
    return user


async def verify_authentication(
    db: AsyncSession,
    session: SessionState,
    email: str,
    response: dict[str, Any],
    verifier: WebAuthnVerifier,
) -> User:
    """Check an assertion for an existing user and store the new signature counter."""
    user = await find_user_by_email(db, email)
    if user is None:
        raise UserNotFound(normalize_email(email))

    credential_id = response.get("id") or response.get("rawId")
    credential = None
    if credential_id:
        result = await db.execute(
            select(Credential).where(
                Credential.user_id == user.id,
                Credential.external_id == credential_id,
            )
        )
        credential = result.scalar_one_or_none()
    if credential is None:
        raise CredentialNotFound(f"credential {credential_id!r} not registered to user {user.id}")

    challenge = session.get(SESSION_CHALLENGE)
    if not challenge:
        raise AuthenticationFailed("no pending authentication challenge")

    credential.sign_count = verifier.verify_authentication(
        response,
        challenge,
        public_key=credential.public_key,
        sign_count=credential.sign_count,
    )
    await db.flush()

    establish_session(session, user)
    return user


def establish_session(session: SessionState, user: User) -> None:
    """Drop everything from the old session (pending challenge included) and rotate its token."""
    session.reset()
    session[SESSION_USER_ID] = str(user.id)


def consume_return_to(session: SessionState, default: str = "/") -> str:
    """One-shot: the stashed path is removed whether or not it gets used."""
    return session.pop(SESSION_RETURN_TO) or default


def sign_out(session: SessionState) -> None:
    session.reset()
