"""Server-side sessions: a WebSession row per browser, referenced by an opaque cookie token.

SessionState is the explicit per-request context handed to services. reset()
wipes the data and asks for a fresh token, so a token seen before sign-in is
never valid after it.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.security import generate_session_token
from app.models.web_session import WebSession

logger = logging.getLogger(__name__)


class SessionState:
    """Mutable view of one session's data for the duration of a request."""

    def __init__(self, token: str | None = None, data: dict[str, Any] | None = None):
        self.token = token
        self._data: dict[str, Any] = dict(data or {})
        self.modified = False
        self.renew = False

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def pop(self, key: str, default: Any = None) -> Any:
        if key in self._data:
            self.modified = True
            return self._data.pop(key)
        return default

    def reset(self) -> None:
        """Drop all data and issue a new token on save."""
        self._data.clear()
        self.modified = True
        self.renew = True

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)


async def load_session(db: AsyncSession, token: str | None) -> SessionState:
    if token:
        row = await db.get(WebSession, token)
        if row is not None:
            return SessionState(token=row.token, data=row.data)
    return SessionState()


async def save_session(db: AsyncSession, state: SessionState) -> str | None:
    """Persist state and return the token the client should hold (None = clear the cookie)."""
    if state.renew and state.token:
        await db.execute(delete(WebSession).where(WebSession.token == state.token))
        state.token = None
    data = state.to_dict()
    if state.token is None:
        if not data:
            return None
        state.token = generate_session_token()
        db.add(WebSession(token=state.token, data=data))
    else:
        row = await db.get(WebSession, state.token)
        if row is None:
            db.add(WebSession(token=state.token, data=data))
        else:
            row.data = data
    await db.flush()
    state.modified = False
    state.renew = False
    return state.token


class ServerSessionMiddleware:
    """Loads the session before the request and persists it once the app has finished.

    The response is held until the downstream app returns (request transaction
    committed), then the cookie header is added and the messages are sent.
    """

    def __init__(self, app: ASGIApp, cookie_name: str, secure: bool = False) -> None:
        self.app = app
        self.cookie_name = cookie_name
        self.security_flags = "httponly; samesite=lax" + ("; secure" if secure else "")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        session_maker = scope["app"].state.session_maker
        async with session_maker() as db:
            state = await load_session(db, connection.cookies.get(self.cookie_name))
        connection.state.session = state

        messages: list[Message] = []

        async def buffer(message: Message) -> None:
            messages.append(message)

        await self.app(scope, receive, buffer)

        if state.modified:
            async with session_maker() as db:
                try:
                    token = await save_session(db, state)
                    await db.commit()
                except Exception:
                    await db.rollback()
                    logger.exception("Saving session failed")
                    raise
            for message in messages:
                if message["type"] == "http.response.start":
                    MutableHeaders(scope=message).append("set-cookie", self._cookie(token))
                    break

        for message in messages:
            await send(message)

    def _cookie(self, token: str | None) -> str:
        if token is None:
            return (
                f"{self.cookie_name}=null; path=/; "
                f"expires=Thu, 01 Jan 1970 00:00:00 GMT; {self.security_flags}"
            )
        return f"{self.cookie_name}={token}; path=/; {self.security_flags}"
