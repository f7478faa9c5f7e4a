"""Middleware for keeping team sessions alive while participants are active."""

import logging
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from codewars.auth.service import (
    SESSION_COOKIE_NAME,
    create_session_token,
    decode_session_token,
    set_session_cookie,
    should_refresh_session,
)

logger = logging.getLogger("session_middleware")


class SessionRefreshMiddleware(BaseHTTPMiddleware):
    """Re-issue the session cookie when it is close to expiring."""

    def __init__(self, app: ASGIApp, auto_refresh: bool = True):
        super().__init__(app)
        self.auto_refresh = auto_refresh
        self.excluded_paths = {
            "/auth",
            "/auth/logout",
            "/docs",
            "/redoc",
            "/openapi.json",
            "/healthz",
            "/",
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.auto_refresh or request.url.path in self.excluded_paths:
            return await call_next(request)

        claims = decode_session_token(request.cookies.get(SESSION_COOKIE_NAME) or "")
        response = await call_next(request)

        if claims and should_refresh_session(claims):
            team_code = claims.get("team_code") or ""
            email = claims.get("email") or ""
            if team_code and email:
                set_session_cookie(response, create_session_token(team_code, email))
                logger.info("session.refreshed team_code=%s path=%s", team_code, request.url.path)
        return response
