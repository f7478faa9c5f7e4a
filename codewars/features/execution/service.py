from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from codewars.common.deps import SessionIdentity
from codewars.common.errors import (
    ExecutionTimeout,
    InvalidInput,
    JudgeAuthFailed,
    JudgeProtocolError,
    JudgeUnavailable,
    Unauthorized,
    UnsupportedLanguage,
)
from codewars.features.judge0 import languages
from codewars.features.judge0.client import Judge0Client
from codewars.features.judge0.schemas import Judge0ExecutionResult
from .schemas import ExecuteRequest, ExecutionResult, ExecutionStatus

logger = logging.getLogger("execution")

Sleep = Callable[[float], Awaitable[Any]]

# Value used when the judge omits (or nulls) a text field
TEXT_FIELD_DEFAULTS: Dict[str, str] = {
    "stdout": "",
    "stderr": "",
    "compile_output": "",
    "message": "",
}


def format_elapsed(value: Any) -> Optional[str]:
    """Render judge CPU time as a two-decimal string; ``None`` when absent or unparseable."""
    if value is None or value == "":
        return None
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return None


def normalize_result(raw: Mapping[str, Any]) -> ExecutionResult:
    """Build the client-facing result from a judge payload.

    Text fields fall back to ``TEXT_FIELD_DEFAULTS``; ``time`` goes through
    ``format_elapsed``; ``memory`` is passed through untouched. Feeding an
    already normalised result back in yields the same values.
    """
    text = {name: raw.get(name) or default for name, default in TEXT_FIELD_DEFAULTS.items()}
    status = raw.get("status") or {}
    return ExecutionResult(
        **text,
        status=ExecutionStatus(id=status.get("id"), description=status.get("description") or ""),
        time=format_elapsed(raw.get("time")),
        memory=raw.get("memory"),
    )


class ExecutionService:
    """Drives one run request through submit -> poll -> normalise.

    Polling policy: sleep ``poll_interval`` then fetch, at most ``max_polls``
    times, stopping at the first terminal status. A failed fetch is logged and
    ends the loop; it consumes its attempt and is not retried, so the attempt
    ceiling always holds. The result of the last successful fetch (if any) is
    then normalised as an incomplete result.
    """

    def __init__(
        self,
        client: Optional[Judge0Client] = None,
        *,
        sleep: Sleep = asyncio.sleep,
        poll_interval: Optional[float] = None,
        max_polls: Optional[int] = None,
    ) -> None:
        self.client = client or Judge0Client()
        self._sleep = sleep
        self.poll_interval = poll_interval if poll_interval is not None else self.client.config.poll_interval_s
        self.max_polls = max_polls if max_polls is not None else self.client.config.max_polls

    async def execute(self, request: ExecuteRequest, identity: SessionIdentity) -> ExecutionResult:
        if identity is None or not identity.is_authenticated():
            raise Unauthorized()

        code = request.code or ""
        language_key = (request.language or "").strip()
        if not code.strip() or not language_key:
            raise InvalidInput()

        language = languages.resolve(language_key)
        if language is None:
            supported = languages.supported_keys()
            raise UnsupportedLanguage(
                f"Unsupported language '{language_key}'. Supported: {', '.join(supported)}",
                details={"supported": supported},
            )

        try:
            token = await self.client.submit(code, language.id, request.stdin or "")
        except JudgeAuthFailed:
            logger.error("execute.submit_auth_failed team_code=%s language=%s", identity.team_code, language.key)
            raise
        except JudgeUnavailable:
            logger.warning("execute.submit_failed team_code=%s language=%s", identity.team_code, language.key)
            raise
        if not token:
            raise JudgeProtocolError("The code execution service did not return a submission token.")

        logger.info("execute.submitted team_code=%s language=%s token=%s", identity.team_code, language.key, token)
        last, attempts, exhausted = await self._poll(token)

        if exhausted:
            logger.warning("execute.timeout token=%s attempts=%d", token, attempts)
            raise ExecutionTimeout()
        if last is None:
            raise JudgeProtocolError("No result was received from the code execution service.")

        if not last.status.is_terminal:
            logger.warning(
                "execute.incomplete token=%s attempts=%d status=%s", token, attempts, last.status.id
            )
        else:
            logger.info(
                "execute.finished token=%s attempts=%d status=%s", token, attempts, last.status.id
            )
        return normalize_result(last.model_dump())

    async def _poll(self, token: str) -> tuple[Optional[Judge0ExecutionResult], int, bool]:
        """Return (last fetched result, attempts used, whether the budget ran out)."""
        last: Optional[Judge0ExecutionResult] = None
        attempts = 0
        while attempts < self.max_polls:
            attempts += 1
            await self._sleep(self.poll_interval)
            try:
                last = await self.client.fetch_status(token)
            except JudgeAuthFailed:
                raise
            except (JudgeUnavailable, JudgeProtocolError) as exc:
                logger.warning(
                    "execute.poll_failed token=%s attempt=%d error=%s", token, attempts, exc.error_code
                )
                return last, attempts, False
            if last.status.is_terminal:
                return last, attempts, False
        return last, attempts, True


_execution_service: Optional[ExecutionService] = None


def get_execution_service() -> ExecutionService:
    global _execution_service
    if _execution_service is None:
        _execution_service = ExecutionService()
    return _execution_service


__all__ = [
    "ExecutionService",
    "TEXT_FIELD_DEFAULTS",
    "format_elapsed",
    "get_execution_service",
    "normalize_result",
]
