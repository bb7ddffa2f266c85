"""FastAPI application wiring for the bank API."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from psycopg_pool import ConnectionPool

from .api.errors import install_error_handlers
from .api.routes import router as account_router
from .config import Settings, get_settings
from .domain.contracts import AccountStore
from .domain.service import AccountService
from .logging_config import get_logger, setup_logging
from .memory_store import InMemoryAccountStore
from .repository import PostgresAccountStore

logger = get_logger("bank_api")

REQUESTS = Counter(
    "bank_api_requests_total",
    "HTTP requests handled, by route template and status.",
    ["method", "path", "status"],
)
LATENCY = Histogram(
    "bank_api_request_seconds",
    "HTTP request latency in seconds, by route template.",
    ["method", "path"],
)


def _open_store(settings: Settings) -> tuple[AccountStore, ConnectionPool | None]:
    """Build the configured store; the pool is returned so the lifespan can close it."""
    if settings.store_backend == "memory":
        logger.info("account store using in-memory backend")
        return InMemoryAccountStore(), None
    if settings.store_backend != "postgres":
        raise ValueError(f"unknown STORE_BACKEND {settings.store_backend!r}")

    pool = ConnectionPool(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=False,
    )
    # Fails fast when the database is unreachable at startup.
    pool.open(wait=True)
    logger.info("account store using postgres backend")
    return PostgresAccountStore(pool), pool


def create_app(store: AccountStore | None = None, settings: Settings | None = None) -> FastAPI:
    """Create the application; ``store`` overrides the configured backend."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise the account store and service for the app lifecycle."""
        pool = None
        active_store = store
        if active_store is None:
            active_store, pool = _open_store(settings)
        active_store.init()
        app.state.account_service = AccountService(active_store, settings)
        try:
            yield
        finally:
            if pool is not None:
                pool.close()

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and feed the Prometheus counters."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        route = request.scope.get("route")
        # unmatched paths share one label so scanners cannot grow the series
        path = getattr(route, "path", "<unmatched>")
        REQUESTS.labels(request.method, path, str(response.status_code)).inc()
        LATENCY.labels(request.method, path).observe(elapsed)
        logger.info(
            "HTTP %s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed * 1000,
        )
        return response

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        """Return a minimal readiness indicator used by orchestration systems."""
        return {"status": "ok"}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    install_error_handlers(app)
    app.include_router(account_router)
    return app


app = create_app()


def run() -> None:
    """Serve the API on the configured listen address."""
    settings = get_settings()
    logger.info("JSON API server running on %s:%s", settings.http_host, settings.http_port)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run()
