from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Optional
from urllib.parse import urlparse, urlunparse

from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)

JUDGE0_CE_PORT = 2358


def _normalise_judge_url(raw: str) -> str:
    base = (raw or "").strip()
    if not base:
        return ""
    if not base.startswith("http://") and not base.startswith("https://"):
        # assume http if scheme omitted
        base = "http://" + base
    parsed = urlparse(base)
    # Self-hosted Judge0 CE listens on 2358; https hosts (RapidAPI) keep their default port
    if parsed.scheme == "http" and parsed.port is None:
        parsed = parsed._replace(netloc=f"{parsed.netloc}:{JUDGE0_CE_PORT}")
        base = urlunparse(parsed)
    return base.rstrip("/")


@dataclass(frozen=True)
class JudgeConfig:
    """Read-only judge settings handed to the Judge0 client at construction."""

    base_url: str
    auth_headers: Mapping[str, str] = field(default_factory=dict)
    cpu_time_limit: float = 2.0
    memory_limit: int = 128000
    request_timeout_s: float = 10.0
    poll_interval_s: float = 1.0
    max_polls: int = 30

    def __post_init__(self) -> None:
        object.__setattr__(self, "auth_headers", MappingProxyType(dict(self.auth_headers or {})))

    @property
    def configured(self) -> bool:
        return bool(self.base_url)


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Supabase
        raw_url = os.getenv("SUPABASE_URL", "")
        self.supabase_url: str = raw_url.rstrip("/")
        self.supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY", "")
        self.supabase_service_role_key: str = (
            os.getenv("SUPABASE_SERVICE_ROLE_KEY")
            or os.getenv("SUPABASE_SERVICE_KEY")
            or ""
        )
        # Judge0
        self.judge0_api_url: str = _normalise_judge_url(os.getenv("JUDGE0_BASE_URL") or os.getenv("JUDGE0_URL", ""))
        self.judge0_auth_header: str = os.getenv("JUDGE0_AUTH_HEADER", "X-Auth-Token")
        self.judge0_auth_token: str = os.getenv("JUDGE0_AUTH_TOKEN", "")
        self.judge0_api_key: str = os.getenv("JUDGE0_KEY", "")
        self.judge0_host: str = os.getenv("JUDGE0_HOST", "")
        self.judge0_cpu_time_limit: float = float(os.getenv("JUDGE0_CPU_TIME_LIMIT", "2.0"))
        self.judge0_memory_limit: int = int(os.getenv("JUDGE0_MEMORY_LIMIT", "128000"))
        self.judge0_timeout_s: float = float(os.getenv("JUDGE0_TIMEOUT_S", "10"))
        # Polling policy for /api/execute
        self.execute_poll_interval_s: float = float(os.getenv("EXECUTE_POLL_INTERVAL_S", "1.0"))
        self.execute_max_polls: int = int(os.getenv("EXECUTE_MAX_POLLS", "30"))
        # Session cookie
        self.session_secret: str = os.getenv("SESSION_SECRET", "codewars-dev-secret")
        self.session_ttl_seconds: int = int(os.getenv("SESSION_TTL_SECONDS", "3600"))
        self.cookie_domain: Optional[str] = os.getenv("COOKIE_DOMAIN") or None
        self.cookie_secure: bool = os.getenv("COOKIE_SECURE", "true").lower() != "false"
        self.cookie_samesite: str = os.getenv("COOKIE_SAMESITE", "lax").capitalize()  # Lax|Strict|None
        # App meta
        self.app_name: str = "CodeWars Contest"
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"

    @property
    def supabase_key(self) -> str:
        return self.supabase_service_role_key or self.supabase_anon_key

    def judge_auth_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.judge0_auth_token:
            headers[self.judge0_auth_header] = self.judge0_auth_token
        if self.judge0_api_key and self.judge0_host:
            headers.update({
                "X-RapidAPI-Key": self.judge0_api_key,
                "X-RapidAPI-Host": self.judge0_host,
            })
        return headers

    def judge_config(self) -> JudgeConfig:
        return JudgeConfig(
            base_url=self.judge0_api_url,
            auth_headers=self.judge_auth_headers(),
            cpu_time_limit=self.judge0_cpu_time_limit,
            memory_limit=self.judge0_memory_limit,
            request_timeout_s=self.judge0_timeout_s,
            poll_interval_s=self.execute_poll_interval_s,
            max_polls=self.execute_max_polls,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
