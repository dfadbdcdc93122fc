"""
FastAPI application factory.

Usage:
    python -m api.app                    # Dev server on port 8000
    APP_DATA_DIR=/srv/sgay python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

Each ``create_app()`` call builds its own HouseStore, OfficerStore and
SessionContext (or takes the ones passed in) and keeps them on
``app.state``; routes reach them through ``api.deps``.

Structured JSON logging when APP_LOG_FORMAT=json.
CORS middleware with configurable origins via APP_CORS_ORIGINS.
"""

import json
import logging
import time
import uuid
from collections.abc import Callable
from datetime import date

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.routes import aggregations, auth, dashboard, download, houses, officers, reports
from housing.errors import AuthenticationError, DataLoadError
from housing.session import SessionContext
from housing.store import HouseStore, OfficerStore
from utils.config import AppConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "client_ip",
                    "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("sgay_api")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)


def _load_stores(cfg: AppConfig) -> tuple[HouseStore, OfficerStore]:
    """Seed both stores from the configured files.

    A missing or unreadable seed file is logged and replaced by an empty
    store so the API still starts.
    """
    store_kwargs = {"latency_ms": cfg.simulated_latency_ms, "cache_ttl": cfg.cache_ttl}
    try:
        house_store = HouseStore.from_json(cfg.beneficiaries_path, **store_kwargs)
    except DataLoadError:
        _logger.exception("Starting with no houses")
        house_store = HouseStore(**store_kwargs)
    try:
        officer_store = OfficerStore.from_json(cfg.officers_path, **store_kwargs)
    except DataLoadError:
        _logger.exception("Starting with no officers")
        officer_store = OfficerStore([], **store_kwargs)
    return house_store, officer_store


def create_app(
    config: AppConfig | None = None,
    house_store: HouseStore | None = None,
    officer_store: OfficerStore | None = None,
    session: SessionContext | None = None,
    today: Callable[[], date] = date.today,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings; read from the environment when omitted.
        house_store: Override the house store (useful for testing).
        officer_store: Override the officer store.
        session: Override the session context.
        today: Reference date for the reports.

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or _cfg
    _logger.debug("config %s", cfg.to_dict())
    if house_store is None or officer_store is None:
        loaded_houses, loaded_officers = _load_stores(cfg)
        house_store = house_store if house_store is not None else loaded_houses
        officer_store = officer_store if officer_store is not None else loaded_officers
    if session is None:
        session = SessionContext(cfg.session_path)

    app = FastAPI(
        title="SGAY Scheme Monitor API",
        summary="Tracks beneficiary house construction, funds and progress across constituencies.",
        description=(
            "## SGAY Scheme Monitor API\n\n"
            "Read access to beneficiary houses, field officers, dashboard "
            "statistics and reports; write access for signed-in admins and "
            "officers.\n\n"
            "### Key concepts\n"
            "- **Amounts** are rupee display strings with Indian digit grouping "
            "(`Rs. 1,20,000`); `remaining` is always `allocated - utilized`.\n"
            "- **Stage** (`Not Started`, `In Progress`, `Delayed`, `Completed`) "
            "and **progress** (0-100) are set independently.\n"
            "- **Writes** need `Authorization: Bearer <token>` from "
            "`POST /api/v1/auth/login`. The login is a placeholder with "
            "fixed demo accounts.\n"
            "- Edits live in memory only; a restart reverts to the seed files."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "houses", "description": "Beneficiary houses: list, filter, create, edit, delete."},
            {"name": "officers", "description": "Field officers and the houses assigned to them."},
            {"name": "auth", "description": "Placeholder login for the admin and officer roles."},
            {"name": "dashboard", "description": "Dashboard cards and chart series."},
            {"name": "aggregations", "description": "Group-by summaries for charts."},
            {"name": "reports", "description": "Monthly, constituency and financial reports."},
            {"name": "download", "description": "Exports as CSV, NDJSON, Excel or plain text."},
            {"name": "meta", "description": "Health check."},
        ],
    )
    app.state.config = cfg
    app.state.house_store = house_store
    app.state.officer_store = officer_store
    app.state.session = session
    app.state.today = today

    # ── CORS middleware ────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with its duration and a short request id."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "client_ip": client_ip,
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f ip=%s rid=%s",
                request.method, path, response.status_code, duration_ms,
                client_ip, request_id,
            )
        if duration_ms > 500:
            _logger.warning(
                "slow_request method=%s path=%s duration_ms=%.1f",
                request.method, path, duration_ms,
            )
        return response

    # ── Security headers ──────────────────────────────────────────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        """Add X-Content-Type-Options and X-Frame-Options."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("unhandled error path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc),
                "status_code": 500,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad request", "detail": str(exc), "status_code": 400},
        )

    @app.exception_handler(ValidationError)
    async def record_validation_handler(request: Request, exc: ValidationError):
        # A patch that is valid on its own but yields an invalid merged record
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid record", "detail": str(exc), "status_code": 422},
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content={"error": "Unauthorized", "detail": str(exc), "status_code": 401},
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 OK with the size and cache counters of each store."""
        return {
            "status": "ok",
            "houses": len(app.state.house_store),
            "officers": len(app.state.officer_store),
            "cache": {
                "houses": app.state.house_store.cache.stats(),
                "officers": app.state.officer_store.cache.stats(),
            },
        }

    # ── Raw beneficiary file ──────────────────────────────────────────────────

    @app.get("/api/houses", tags=["houses"], summary="Raw beneficiary seed file")
    def raw_houses():
        """Serve the beneficiary seed file exactly as stored on disk."""
        path = app.state.config.beneficiaries_path
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            _logger.exception("Failed to read beneficiary data from %s", path)
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to load beneficiary data"},
            )

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api/v1"
    app.include_router(houses.router,       prefix=prefix)
    app.include_router(officers.router,     prefix=prefix)
    app.include_router(auth.router,         prefix=prefix)
    app.include_router(dashboard.router,    prefix=prefix)
    app.include_router(aggregations.router, prefix=prefix)
    app.include_router(reports.router,      prefix=prefix)
    app.include_router(download.router,     prefix=prefix)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
