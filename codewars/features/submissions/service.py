from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from codewars.common.deps import SessionIdentity
from codewars.common.errors import IncompleteSession, InvalidInput, PersistenceError, Unauthorized
from .repository import SubmissionsRepository, submissions_repository
from .schemas import SubmissionRecord

logger = logging.getLogger("submissions")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionRecorder:
    """Persists what a team chose to submit; never runs code itself."""

    def __init__(
        self,
        repository: Optional[SubmissionsRepository] = None,
        *,
        clock: Clock = _utcnow,
    ) -> None:
        self.repository = repository or submissions_repository
        self._clock = clock
        self._last_created: Dict[str, datetime] = {}

    def _next_timestamp(self, team_code: str) -> datetime:
        # Strictly increasing per team even when the wall clock repeats or steps back.
        now = self._clock()
        previous = self._last_created.get(team_code)
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        self._last_created[team_code] = now
        return now

    async def record(
        self,
        identity: SessionIdentity,
        code: str,
        language: str,
        output: Optional[str] = "",
    ) -> SubmissionRecord:
        if identity is None or not identity.is_authenticated():
            raise Unauthorized()
        team_code = (identity.team_code or "").strip()
        email = (identity.email or "").strip()
        if not team_code or not email:
            raise IncompleteSession()
        if not (code or "").strip() or not (language or "").strip():
            raise InvalidInput("Code and language are required to submit.")

        created_at = self._next_timestamp(team_code)
        record = SubmissionRecord(
            team_code=team_code,
            email=email,
            code=code,
            language=language.strip(),
            output=output or "",
            created_at=created_at,
        )
        try:
            row = await self.repository.insert(
                team_code=record.team_code,
                email=record.email,
                code=record.code,
                language=record.language,
                output=record.output,
                created_at=record.created_at,
            )
        except Exception as exc:
            logger.exception("submit.persist_failed team_code=%s", team_code)
            raise PersistenceError() from exc

        if row and row.get("id") is not None:
            record.id = str(row["id"])
        logger.info(
            "submit.recorded team_code=%s email=%s language=%s id=%s", team_code, email, record.language, record.id
        )
        return record


submission_recorder = SubmissionRecorder()


def get_submission_recorder() -> SubmissionRecorder:
    return submission_recorder


__all__ = ["SubmissionRecorder", "submission_recorder", "get_submission_recorder"]
