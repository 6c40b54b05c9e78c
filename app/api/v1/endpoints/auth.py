"""WebAuthn sign-up / sign-in endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_session_state, get_webauthn_verifier
from app.core.config import get_settings
from app.core.constants import AUTH_FAILED_MESSAGE, INVALID_EMAIL_MESSAGE, SIGN_IN_REQUIRED_MESSAGE
from app.core.enums import AuthFlow
from app.core.exceptions import AuthError, InvalidEmail
from app.core.sessions import SessionState
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import AuthenticatedRead, ChallengeRead, EmailCheck, UserRead, VerifyRequest
from app.services import auth as auth_service
from app.services.passkeys import WebAuthnVerifier

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/check", response_model=ChallengeRead)
async def check(
    payload: EmailCheck,
    db: AsyncSession = Depends(get_db),
    session: SessionState = Depends(get_session_state),
    verifier: WebAuthnVerifier = Depends(get_webauthn_verifier),
):
    """Issue a registration challenge for a new email, an authentication challenge otherwise."""
    try:
        challenge = await auth_service.initiate(db, session, payload.email, verifier)
    except InvalidEmail:
        raise HTTPException(status_code=422, detail=INVALID_EMAIL_MESSAGE)
    return ChallengeRead(flow=challenge.flow, email=challenge.email, options=challenge.options)


@router.post("/verify", response_model=AuthenticatedRead)
async def verify(
    payload: VerifyRequest,
    db: AsyncSession = Depends(get_db),
    session: SessionState = Depends(get_session_state),
    verifier: WebAuthnVerifier = Depends(get_webauthn_verifier),
):
    """Verify the browser's credential response and sign the user in."""
    redirect_to = auth_service.consume_return_to(session, get_settings().home_path)
    try:
        if payload.flow_type == AuthFlow.REGISTRATION:
            user = await auth_service.verify_registration(
                db, session, payload.email, payload.credential_response, verifier
            )
        else:
            user = await auth_service.verify_authentication(
                db, session, payload.email, payload.credential_response, verifier
            )
    except AuthError as e:
        logger.warning("WebAuthn verification failed (%s): %s", type(e).__name__, e)
        raise HTTPException(status_code=401, detail=AUTH_FAILED_MESSAGE)
    return AuthenticatedRead(user_id=user.id, email=user.email, redirect_to=redirect_to)


@router.get("/me", response_model=UserRead)
async def me(user: User | None = Depends(get_current_user)):
    if user is None:
        raise HTTPException(status_code=401, detail=SIGN_IN_REQUIRED_MESSAGE)
    return user


@router.delete("/session", status_code=204)
async def logout(session: SessionState = Depends(get_session_state)):
    """Clear the session entirely."""
    auth_service.sign_out(session)
    return None
