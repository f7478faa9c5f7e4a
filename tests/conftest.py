import sys
import os

# Ensure repo root on sys.path for imports like `codewars...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pytest

from fakesupabase import FakeSupabase


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_supabase(monkeypatch):
    """In-memory stand-in for the Supabase client, patched where each module imported it."""
    fake = FakeSupabase()

    async def fake_get_supabase():
        return fake

    monkeypatch.setattr("codewars.auth.service.get_supabase", fake_get_supabase)
    monkeypatch.setattr("codewars.features.submissions.repository.get_supabase", fake_get_supabase)
    monkeypatch.setattr("codewars.features.problems.repository.get_supabase", fake_get_supabase)
    return fake
