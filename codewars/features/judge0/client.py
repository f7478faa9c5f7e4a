from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from codewars.common.errors import JudgeAuthFailed, JudgeProtocolError, JudgeUnavailable
from codewars.core.config import JudgeConfig, get_settings
from .schemas import (
    Judge0ExecutionResult,
    Judge0SubmissionRequest,
    Judge0SubmissionResponse,
    ResourceLimits,
)

logger = logging.getLogger("judge0")

# Status codes Judge0 (and RapidAPI in front of it) use for credential rejection
_AUTH_REJECTION_CODES = {401, 403}
_SECRET_HEADER_HINTS = ("key", "token", "auth", "secret")
_RESULT_FIELDS = "token,stdout,stderr,compile_output,message,status,status_id,time,memory"


def _mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    masked = {}
    for k, v in (headers or {}).items():
        if any(hint in k.lower() for hint in _SECRET_HEADER_HINTS):
            masked[k] = "[REDACTED]"
        else:
            masked[k] = v
    return masked


def _ensure_status(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Fold the flat ``status_id``/``status_description`` shape into ``status``."""
    if not isinstance(payload, dict):
        return payload
    if not payload.get("status") and payload.get("status_id") is not None:
        payload = dict(payload)
        payload["status"] = {
            "id": payload.get("status_id"),
            "description": payload.get("status_description") or "",
        }
    return payload


class Judge0Client:
    """Thin async client for the Judge0 submissions API.

    One outbound HTTP call per public method; retries and polling belong to
    the caller.
    """

    def __init__(
        self,
        config: Optional[JudgeConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or get_settings().judge_config()
        self.headers = {"Content-Type": "application/json", **self.config.auth_headers}
        self._transport = transport

    @property
    def limits(self) -> ResourceLimits:
        return ResourceLimits(
            cpu_time_limit=self.config.cpu_time_limit,
            memory_limit=self.config.memory_limit,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        if not self.config.configured:
            raise JudgeUnavailable("Code execution service is not configured (JUDGE0_BASE_URL).")
        if not path.startswith("/"):
            path = "/" + path
        url = self.config.base_url + path
        logger.debug("judge0.request %s %s headers=%s", method, url, _mask_headers(self.headers))
        timeout = httpx.Timeout(connect=3.0, read=self.config.request_timeout_s, write=5.0, pool=5.0)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                return await client.request(method, url, headers=self.headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("judge0.transport_error %s %s: %s", method, path, type(exc).__name__)
            raise JudgeUnavailable() from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.status_code in _AUTH_REJECTION_CODES:
            logger.error(
                "judge0.auth_rejected action=%s status=%s; check JUDGE0_AUTH_TOKEN / JUDGE0_KEY",
                action,
                response.status_code,
            )
            raise JudgeAuthFailed()
        if not 200 <= response.status_code < 300:
            logger.warning(
                "judge0.%s_failed status=%s body=%s", action, response.status_code, response.text[:200]
            )
            raise JudgeUnavailable()

    async def submit(
        self,
        source_code: str,
        language_id: int,
        stdin: Optional[str] = None,
        limits: Optional[ResourceLimits] = None,
    ) -> Optional[str]:
        """Queue a submission without waiting for it to run; returns the judge token."""
        if not source_code or not language_id:
            raise ValueError("source_code and language_id are required")
        limits = limits or self.limits
        body = Judge0SubmissionRequest(
            source_code=source_code,
            language_id=language_id,
            stdin=stdin or None,
            cpu_time_limit=limits.cpu_time_limit,
            memory_limit=limits.memory_limit,
        )
        response = await self._request(
            "POST",
            "/submissions?base64_encoded=false&wait=false",
            json=body.model_dump(exclude_none=True),
        )
        self._raise_for_status(response, "submit")
        try:
            return Judge0SubmissionResponse(**response.json()).token
        except (ValueError, ValidationError, TypeError) as exc:
            raise JudgeProtocolError() from exc

    async def fetch_status(self, token: str) -> Judge0ExecutionResult:
        response = await self._request(
            "GET",
            f"/submissions/{token}?base64_encoded=false&fields={_RESULT_FIELDS}",
        )
        self._raise_for_status(response, "fetch")
        try:
            payload = _ensure_status(response.json())
            result = Judge0ExecutionResult(**payload)
        except (ValueError, ValidationError, TypeError) as exc:
            raise JudgeProtocolError() from exc
        if not result.token:
            result = result.model_copy(update={"token": token})
        return result


__all__ = ["Judge0Client"]
