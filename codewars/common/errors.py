"""Error taxonomy shared by the execution pipeline and the submission recorder.

Every error carries the HTTP status and a stable ``error_code`` so the
exception handler in ``codewars.main`` can translate it without knowing the
concrete type.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ContestError(Exception):
    status_code: int = 500
    error_code: str = "E_UNKNOWN"
    default_message: str = "Something went wrong. Please try again later."

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "error_code": self.error_code}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInput(ContestError):
    status_code = 400
    error_code = "E_INVALID_INPUT"
    default_message = "Code and language are required."


class Unauthorized(ContestError):
    status_code = 401
    error_code = "E_UNAUTHORIZED"
    default_message = "Please log in with your team code and email."


class IncompleteSession(ContestError):
    status_code = 400
    error_code = "E_INCOMPLETE_SESSION"
    default_message = "Session is missing team code or email. Please log in again."


class UnsupportedLanguage(ContestError):
    status_code = 400
    error_code = "E_UNSUPPORTED_LANGUAGE"
    default_message = "Unsupported language."


class JudgeAuthFailed(ContestError):
    status_code = 502
    error_code = "E_JUDGE_AUTH"
    default_message = (
        "The code execution service rejected our credentials. "
        "Check the JUDGE0_AUTH_TOKEN / JUDGE0_KEY configuration."
    )


class JudgeUnavailable(ContestError):
    status_code = 500
    error_code = "E_JUDGE_UNAVAILABLE"
    default_message = "The code execution service is unavailable. Please try again later."


class JudgeProtocolError(ContestError):
    status_code = 500
    error_code = "E_JUDGE_PROTOCOL"
    default_message = "The code execution service returned an unexpected response."


class ExecutionTimeout(ContestError):
    status_code = 504
    error_code = "E_EXECUTION_TIMEOUT"
    default_message = (
        "Code execution took too long. Try simplifying your code or input "
        "(avoid infinite loops) before running again."
    )


class PersistenceError(ContestError):
    status_code = 500
    error_code = "E_PERSISTENCE"
    default_message = "Could not save your submission. Please try again later."


__all__ = [
    "ContestError",
    "InvalidInput",
    "Unauthorized",
    "IncompleteSession",
    "UnsupportedLanguage",
    "JudgeAuthFailed",
    "JudgeUnavailable",
    "JudgeProtocolError",
    "ExecutionTimeout",
    "PersistenceError",
]
