from __future__ import annotations

from typing import Any, Dict, List

from codewars.db.supabase import get_supabase

DIFFICULTIES = ("easy", "medium", "hard")


class ProblemsRepository:
    _TABLE = "problems"

    async def list_by_difficulty(self, difficulty: str) -> List[Dict[str, Any]]:
        client = await get_supabase()
        resp = await client.table(self._TABLE).select("*").eq("difficulty", difficulty).execute()
        rows = resp.data or []
        # Stable order for the sidebar: explicit order first, then title
        return sorted(rows, key=lambda r: (r.get("order") if r.get("order") is not None else 1 << 30, r.get("title") or ""))


problems_repository = ProblemsRepository()
