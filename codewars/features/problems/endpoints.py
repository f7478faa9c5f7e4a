from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from codewars.common.deps import require_session
from codewars.common.errors import InvalidInput, PersistenceError
from .repository import DIFFICULTIES, problems_repository

logger = logging.getLogger("problems")

router = APIRouter(prefix="/api", tags=["problems"], dependencies=[Depends(require_session)])


@router.get("/problems", summary="List contest problems for one difficulty level")
async def list_problems(difficulty: str = Query("easy")) -> Dict[str, List[Dict[str, Any]]]:
    level = (difficulty or "").strip().lower()
    if level not in DIFFICULTIES:
        raise InvalidInput(f"Unknown difficulty '{difficulty}'. Use one of: {', '.join(DIFFICULTIES)}")
    try:
        problems = await problems_repository.list_by_difficulty(level)
    except Exception as exc:
        logger.exception("problems.fetch_failed difficulty=%s", level)
        raise PersistenceError("Failed to load problems. Please refresh the page.") from exc
    return {"problems": problems}
