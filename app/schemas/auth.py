"""Authentication schemas (WebAuthn wire contract)."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.enums import AuthFlow


class EmailCheck(BaseModel):
    email: str


class ChallengeRead(BaseModel):
    """options is the PublicKeyCredentialCreationOptions / RequestOptions JSON for the browser."""

    flow: AuthFlow
    email: str
    options: dict[str, Any]


class VerifyRequest(BaseModel):
    email: str
    flow_type: AuthFlow
    credential_response: dict[str, Any]


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    email: str


class AuthenticatedRead(BaseModel):
    user_id: UUID
    email: str
    redirect_to: str
