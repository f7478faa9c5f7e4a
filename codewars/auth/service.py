"""Team-code session tokens.

A session is a short HS256 JWT carrying the team code and the participant
email. It travels in an http-only cookie (or an ``Authorization: Bearer``
header for API clients).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from fastapi import Response
from jose import JWTError, jwt

from codewars.core.config import get_settings
from codewars.db.supabase import get_supabase

logger = logging.getLogger("auth")

SESSION_COOKIE_NAME = "session"
ALGORITHM = "HS256"
REFRESH_THRESHOLD = 5 * 60  # re-issue when the session expires within this window


def create_session_token(team_code: str, email: str, *, now: Optional[datetime] = None) -> str:
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    claims = {
        "sub": email,
        "team_code": team_code,
        "email": email,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(seconds=settings.session_ttl_seconds)).timestamp()),
    }
    return jwt.encode(claims, settings.session_secret, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """Return verified claims, or ``None`` for a missing/expired/tampered token."""
    if not token:
        return None
    try:
        return jwt.decode(token, get_settings().session_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None


def should_refresh_session(claims: Dict[str, Any], *, now: Optional[datetime] = None) -> bool:
    exp = claims.get("exp")
    if not exp:
        return False
    current = (now or datetime.now(timezone.utc)).timestamp()
    return 0 < exp - current < REFRESH_THRESHOLD


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite.lower(),
        domain=settings.cookie_domain,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(SESSION_COOKIE_NAME, domain=settings.cookie_domain, path="/")


async def find_registration(team_code: str) -> Optional[Dict[str, Any]]:
    client = await get_supabase()
    resp = await client.table("registrations").select("*").eq("code", team_code).limit(1).execute()
    rows = resp.data or []
    return rows[0] if rows else None


def participant_emails(registration: Dict[str, Any]) -> List[str]:
    participants = registration.get("participants") or []
    return [
        str(p.get("email") or "").strip().lower()
        for p in participants
        if isinstance(p, dict) and p.get("email")
    ]
