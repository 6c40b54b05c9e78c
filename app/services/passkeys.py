"""WebAuthn ceremony options and response verification, backed by py_webauthn.

Challenges, credential ids and public keys cross this boundary as base64url
strings so they can live in the session store and in text columns.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from webauthn import (
    generate_authentication_options,
    generate_registration_options,
    options_to_json,
    verify_authentication_response,
    verify_registration_response,
)
from webauthn.helpers import base64url_to_bytes, bytes_to_base64url
from webauthn.helpers.structs import (
    AuthenticatorSelectionCriteria,
    PublicKeyCredentialDescriptor,
    UserVerificationRequirement,
)

from app.core.config import Settings
from app.core.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedChallenge:
    challenge: str
    options: dict[str, Any]


@dataclass(frozen=True)
class RegisteredCredential:
    credential_id: str
    public_key: str
    sign_count: int


class WebAuthnVerifier:
    """Relying-party side of registration and authentication ceremonies."""

    def __init__(
        self,
        rp_id: str,
        rp_name: str,
        origins: list[str],
        timeout_ms: int = 120_000,
        user_verification: str = "preferred",
    ):
        self.rp_id = rp_id
        self.rp_name = rp_name
        self.origins = origins
        self.timeout_ms = timeout_ms
        self.user_verification = UserVerificationRequirement(user_verification)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WebAuthnVerifier":
        return cls(
            rp_id=settings.webauthn_rp_id,
            rp_name=settings.webauthn_rp_name,
            origins=settings.allowed_webauthn_origins,
            timeout_ms=settings.webauthn_timeout_ms,
            user_verification=settings.webauthn_user_verification,
        )

    @property
    def require_user_verification(self) -> bool:
        return self.user_verification == UserVerificationRequirement.REQUIRED

    def registration_options(
        self,
        *,
        user_handle: str,
        email: str,
        exclude_credential_ids: Iterable[str] = (),
    ) -> IssuedChallenge:
        options = generate_registration_options(
            rp_id=self.rp_id,
            rp_name=self.rp_name,
            user_id=user_handle.encode(),
            user_name=email,
            user_display_name=email,
            timeout=self.timeout_ms,
            authenticator_selection=AuthenticatorSelectionCriteria(
                user_verification=self.user_verification,
            ),
            exclude_credentials=[
                PublicKeyCredentialDescriptor(id=base64url_to_bytes(c)) for c in exclude_credential_ids
            ],
        )
        return IssuedChallenge(
            challenge=bytes_to_base64url(options.challenge),
            options=json.loads(options_to_json(options)),
        )

    def authentication_options(self, credential_ids: Iterable[str]) -> IssuedChallenge:
        options = generate_authentication_options(
            rp_id=self.rp_id,
            timeout=self.timeout_ms,
            allow_credentials=[
                PublicKeyCredentialDescriptor(id=base64url_to_bytes(c)) for c in credential_ids
            ],
            user_verification=self.user_verification,
        )
        return IssuedChallenge(
            challenge=bytes_to_base64url(options.challenge),
            options=json.loads(options_to_json(options)),
        )

    def verify_registration(self, response: dict[str, Any], challenge: str) -> RegisteredCredential:
        """Check the attestation against the issued challenge; raise AuthenticationFailed on any error."""
        try:
            verified = verify_registration_response(
                credential=response,
                expected_challenge=base64url_to_bytes(challenge),
                expected_rp_id=self.rp_id,
                expected_origin=self.origins,
                require_user_verification=self.require_user_verification,
            )
        except Exception as e:
            logger.warning("Registration response rejected: %s", e)
            raise AuthenticationFailed("registration response did not verify") from e
        return RegisteredCredential(
            credential_id=bytes_to_base64url(verified.credential_id),
            public_key=bytes_to_base64url(verified.credential_public_key),
            sign_count=verified.sign_count,
        )

    def verify_authentication(
        self,
        response: dict[str, Any],
        challenge: str,
        *,
        public_key: str,
        sign_count: int,
    ) -> int:
        """Check the assertion and return the authenticator's new signature counter.

        A counter that does not exceed the stored one is rejected (unless both are 0,
        which authenticators without counters always report).
        """
        try:
            verified = verify_authentication_response(
                credential=response,
                expected_challenge=base64url_to_bytes(challenge),
                expected_rp_id=self.rp_id,
                expected_origin=self.origins,
                credential_public_key=base64url_to_bytes(public_key),
                credential_current_sign_count=sign_count,
                require_user_verification=self.require_user_verification,
            )
        except Exception as e:
            logger.warning("Authentication response rejected: %s", e)
            raise AuthenticationFailed("authentication response did not verify") from e
        return verified.new_sign_count
