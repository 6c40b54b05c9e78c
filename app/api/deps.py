"""Shared FastAPI dependencies: session state, current user, WebAuthn verifier."""

from __future__ import annotations

import uuid
from functools import lru_cache

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.constants import SESSION_RETURN_TO, SESSION_USER_ID, SIGN_IN_REQUIRED_MESSAGE
from app.core.sessions import SessionState
from app.db.session import get_db
from app.models.user import User
from app.services.passkeys import WebAuthnVerifier


def get_session_state(request: Request) -> SessionState:
    """Session loaded by ServerSessionMiddleware for this request."""
    return request.state.session


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    session: SessionState = Depends(get_session_state),
) -> User | None:
    raw = session.get(SESSION_USER_ID)
    if not raw:
        return None
    try:
        user_id = uuid.UUID(raw)
    except ValueError:
        return None
    return await db.get(User, user_id)


async def require_user(
    request: Request,
    user: User | None = Depends(get_current_user),
    session: SessionState = Depends(get_session_state),
) -> User:
    """401 for anonymous callers; the requested path is kept for after sign-in."""
    if user is None:
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        session[SESSION_RETURN_TO] = path
        raise HTTPException(status_code=401, detail=SIGN_IN_REQUIRED_MESSAGE)
    return user


@lru_cache
def get_webauthn_verifier() -> WebAuthnVerifier:
    return WebAuthnVerifier.from_settings(get_settings())
