from __future__ import annotations

from fastapi import APIRouter, Depends

from codewars.common.deps import SessionIdentity, get_session_identity, require_session
from codewars.common.schemas import ErrorResponse, SuccessResponse
from .schemas import SubmitRequest
from .service import SubmissionRecorder, get_submission_recorder

router = APIRouter(prefix="/api", tags=["submissions"])


@router.post(
    "/submit",
    response_model=SuccessResponse,
    summary="Store the team's code with the output of its last run",
    description="Does not execute the code; the browser sends the output it already has.",
    dependencies=[Depends(require_session)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def submit_code(
    payload: SubmitRequest,
    identity: SessionIdentity = Depends(get_session_identity),
    recorder: SubmissionRecorder = Depends(get_submission_recorder),
) -> SuccessResponse:
    await recorder.record(identity, payload.code, payload.language, payload.output)
    return SuccessResponse()
