"""FastAPI application for the Tee Time Reservations API."""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.errors import register_exception_handlers
from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from storage.s3 import S3Storage

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB pool (and avatar storage) on startup, close on shutdown."""
    settings = get_settings()
    pool = DatabasePool(logger=logging.getLogger("database"))
    await pool.initialize(dsn=settings.database_url)
    app.state.db_pool = pool
    app.state.db_manager = DatabaseManager(pool.pool)
    if settings.init_schema:
        await app.state.db_manager.initialize_schema()
        logger.info("Database schema initialized")

    if settings.s3_bucket_name:
        app.state.storage = S3Storage(
            settings.s3_bucket_name,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            endpoint_url=settings.s3_endpoint,
        )
    else:
        logger.warning("S3_BUCKET_NAME not set; avatar uploads are disabled")
    yield
    await pool.close()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Tee Time Reservations API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s -> %d (%.1f ms) request_id=%s",
            request.method, request.url.path, response.status_code, elapsed_ms, request_id,
        )
        return response

    register_exception_handlers(app)

    from api.routers import auth, users, ttrs, invitations, notifications
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["users"])
    app.include_router(ttrs.router, prefix="/api/v1/ttrs", tags=["ttrs"])
    app.include_router(invitations.router, prefix="/api/v1/invitations", tags=["invitations"])
    app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["notifications"])

    @app.get("/api/health")
    async def health(request: Request):
        pool = getattr(request.app.state, "db_pool", None)
        healthy = await pool.health_check() if pool else False
        return {"status": "ok" if healthy else "degraded", "database": healthy}

    return app


app = create_app()
