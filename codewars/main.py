"""FastAPI entrypoint for the contest backend."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import os
import re
import uuid
import logging
from datetime import datetime, timezone
from time import perf_counter

from codewars.core.config import get_settings
from codewars.auth.routes import router as auth_router
from codewars.common.errors import ContestError, InvalidInput
from codewars.common.middleware import SessionRefreshMiddleware
from codewars.common.schemas import HealthCheckResponse
from codewars.features.execution.endpoints import router as execution_router
from codewars.features.submissions.endpoints import router as submissions_router
from codewars.features.problems.endpoints import router as problems_router

_settings = get_settings()
app = FastAPI(title=_settings.app_name, debug=_settings.debug)
_START_TIME = datetime.now(timezone.utc)
logger = logging.getLogger("request")


# ------------------------
# CORS Setup
# ------------------------
def _split_env_csv(name: str, default: str = ""):
    raw = os.getenv(name, default)
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


_FRONTEND_ORIGINS = _split_env_csv(
    "ALLOW_ORIGINS",
    "http://localhost:8080,http://localhost:3000,http://127.0.0.1:8080,http://127.0.0.1:3000",
)

_CORS_ORIGIN_REGEX = re.compile(r"https?://(localhost|127\.0\.0\.1)(:\d+)?", re.I)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_FRONTEND_ORIGINS,
    allow_origin_regex=_CORS_ORIGIN_REGEX.pattern,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
app.add_middleware(SessionRefreshMiddleware, auto_refresh=True)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    t0 = perf_counter()
    response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    logger.info(
        "%s %s %dms %s request_id=%s",
        request.method,
        request.url.path,
        int((perf_counter() - t0) * 1000),
        response.status_code,
        req_id,
    )
    return response


# ------------------------
# Error translation
# ------------------------
@app.exception_handler(ContestError)
async def _contest_error_handler(request: Request, exc: ContestError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({".".join(str(part) for part in e.get("loc", ())[1:]) or "body" for e in exc.errors()})
    err = InvalidInput("Request body is malformed: expected JSON with string fields.", details={"fields": fields})
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


# ------------------------
# Routers
# ------------------------
app.include_router(auth_router)
app.include_router(execution_router)
app.include_router(submissions_router)
app.include_router(problems_router)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/healthz",
    }


@app.get("/healthz", tags=["meta"], response_model=HealthCheckResponse, summary="Liveness probe")
async def healthz() -> HealthCheckResponse:
    now = datetime.now(timezone.utc)
    judge_ready = _settings.judge_config().configured
    store_ready = bool(_settings.supabase_url and _settings.supabase_key)
    return HealthCheckResponse(
        status="ok" if judge_ready and store_ready else "degraded",
        time_utc=now,
        uptime_seconds=round((now - _START_TIME).total_seconds(), 2),
        version=os.getenv("APP_VERSION", "dev"),
        components={
            "judge0": "configured" if judge_ready else "missing-config",
            "supabase": "configured" if store_ready else "missing-config",
        },
    )
