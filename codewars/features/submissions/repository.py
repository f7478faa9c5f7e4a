from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from codewars.db.supabase import get_supabase


def _iso_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class SubmissionsRepository:
    """Append-only access to the ``submissions`` table."""

    _TABLE = "submissions"

    async def _client(self):
        return await get_supabase()

    async def insert(
        self,
        *,
        team_code: str,
        email: str,
        code: str,
        language: str,
        output: str,
        created_at: datetime,
    ) -> Optional[Dict[str, Any]]:
        client = await self._client()
        payload: Dict[str, Any] = {
            "team_code": team_code,
            "email": email,
            "code": code,
            "language": language,
            "output": output,
            "created_at": _iso_timestamp(created_at),
        }
        resp = await client.table(self._TABLE).insert(payload).execute()
        rows = resp.data or []
        return rows[0] if rows else None


submissions_repository = SubmissionsRepository()

__all__ = ["submissions_repository", "SubmissionsRepository"]
