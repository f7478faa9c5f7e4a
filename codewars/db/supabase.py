"""Supabase client utilities.

Provides a lazily created, module-level cached **async** Supabase client via
`get_supabase()`. Tables used by the contest backend:

- ``registrations``: team code + participants (read by the login flow)
- ``problems``: contest problems with a ``difficulty`` column
- ``submissions``: append-only submission records
"""

from __future__ import annotations

import asyncio
from typing import Optional

from supabase import AsyncClient, create_async_client

from codewars.core.config import get_settings

# ---- Async client (singleton) ------------------------------------------------
_client_async: Optional[AsyncClient] = None
_client_lock = asyncio.Lock()


async def get_supabase() -> AsyncClient:
    """Return a cached `AsyncClient` instance (lazy-created, coroutine-safe)."""
    global _client_async
    if _client_async is not None:
        return _client_async

    async with _client_lock:
        if _client_async is None:
            settings = get_settings()
            if not settings.supabase_url or not settings.supabase_key:
                raise RuntimeError("SUPABASE_URL / SUPABASE_KEY not configured")
            try:
                _client_async = await create_async_client(
                    settings.supabase_url, settings.supabase_key
                )
            except Exception as exc:  # pragma: no cover (network/init failure)
                raise RuntimeError("Could not create Supabase async client") from exc
    return _client_async
