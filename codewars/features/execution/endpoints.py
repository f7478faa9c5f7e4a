from __future__ import annotations

import asyncio
from typing import List

from fastapi import APIRouter, Depends

from codewars.common.deps import SessionIdentity, get_session_identity, require_session
from codewars.common.schemas import ErrorResponse
from codewars.features.judge0 import languages
from codewars.features.judge0.languages import LanguageSpec
from .schemas import ExecuteRequest, ExecutionResult
from .service import ExecutionService, get_execution_service

router = APIRouter(prefix="/api", tags=["execution"])


@router.post(
    "/execute",
    response_model=ExecutionResult,
    summary="Run code on the judge and wait (up to ~30s) for the outcome",
    # Session dependency is solved before the body is validated
    dependencies=[Depends(require_session)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def execute_code(
    payload: ExecuteRequest,
    identity: SessionIdentity = Depends(get_session_identity),
    service: ExecutionService = Depends(get_execution_service),
) -> ExecutionResult:
    # The judge-side run cannot be retracted, so let polling finish even if the client goes away.
    return await asyncio.shield(service.execute(payload, identity))


@router.get("/languages", response_model=List[LanguageSpec])
async def get_supported_languages() -> List[LanguageSpec]:
    return languages.list_languages()
