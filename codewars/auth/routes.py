from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from codewars.common.deps import SessionIdentity, require_session
from codewars.common.errors import InvalidInput, PersistenceError, Unauthorized
from codewars.common.schemas import SuccessResponse
from . import service as auth_service
from .schemas import LoginRequest, SessionOut

logger = logging.getLogger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("", response_model=SessionOut, summary="Log in with team code + participant email")
async def login(payload: LoginRequest, response: Response) -> SessionOut:
    code = (payload.code or "").strip()
    email = (payload.email or "").strip().lower()
    if not code or not email:
        raise InvalidInput("Please enter both code and email.")

    try:
        registration = await auth_service.find_registration(code)
    except Exception as exc:
        logger.exception("auth.lookup_failed team_code=%s", code)
        raise PersistenceError("Server error. Please try again later.") from exc

    if not registration:
        raise Unauthorized("Invalid code. Please try again.")
    if email not in auth_service.participant_emails(registration):
        logger.info("auth.denied team_code=%s email=%s", code, email)
        raise Unauthorized("This email is not registered under the provided code.")

    auth_service.set_session_cookie(response, auth_service.create_session_token(code, email))
    logger.info("auth.granted team_code=%s email=%s", code, email)
    return SessionOut(team_code=code, email=email)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    auth_service.clear_session_cookie(response)
    return SuccessResponse()


@router.get("/me", response_model=SessionOut)
async def me(identity: SessionIdentity = Depends(require_session)) -> SessionOut:
    return SessionOut(team_code=identity.team_code, email=identity.email)
