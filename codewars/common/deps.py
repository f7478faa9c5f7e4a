"""Shared FastAPI dependencies for the session identity."""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from pydantic import BaseModel

from codewars.auth.service import SESSION_COOKIE_NAME, decode_session_token
from codewars.common.errors import Unauthorized


logger = logging.getLogger("auth.deps")


class SessionIdentity(BaseModel):
    """Team identity resolved from the session cookie."""
    authenticated: bool = False
    team_code: str = ""
    email: str = ""

    def is_authenticated(self) -> bool:
        return self.authenticated


ANONYMOUS = SessionIdentity()


def _extract_bearer_or_cookie(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.removeprefix("Bearer ").strip()
    return request.cookies.get(SESSION_COOKIE_NAME)


async def get_session_identity(request: Request) -> SessionIdentity:
    """Resolve the caller's identity; anonymous when there is no valid session.

    The decoded identity is cached on ``request.state.identity`` so several
    dependencies in one request share a single decode.
    """
    cached: SessionIdentity | None = getattr(request.state, "identity", None)
    if cached is not None:
        return cached

    claims = decode_session_token(_extract_bearer_or_cookie(request) or "")
    if not claims:
        identity = ANONYMOUS
    else:
        identity = SessionIdentity(
            authenticated=True,
            team_code=str(claims.get("team_code") or "").strip(),
            email=str(claims.get("email") or "").strip().lower(),
        )
    request.state.identity = identity
    return identity


async def require_session(identity: SessionIdentity = Depends(get_session_identity)) -> SessionIdentity:
    if not identity.is_authenticated():
        raise Unauthorized()
    return identity
