import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from travel_api.core.config import (
    CORS_ORIGINS,
    DATABASE_URL,
    DEV_EMPLOYEE_EMAIL,
    DEV_EMPLOYEE_FIRST_NAME,
    DEV_EMPLOYEE_LAST_NAME,
    DEV_EMPLOYEE_PASSWORD,
    ENV,
    IS_DEV,
    JWT_SECRET_KEY,
    RATE_LIMIT_ENABLED,
)
from travel_api.core.database import Database
from travel_api.core.errors import AppError, Conflict
from travel_api.core.logging_setup import configure_logging
from travel_api.core.rate_limiter import RateLimiterService
from travel_api.core.responses import error_response
from travel_api.core.startup_checks import (
    ensure_migrations_applied,
    validate_database_environment,
)
from travel_api.domain import UserRole
from travel_api.middleware.observability import ObservabilityMiddleware
from travel_api.middleware.rate_limit import ClientRateLimitMiddleware
import travel_api.models  # noqa: F401
from travel_api.repositories.users import SqlUserRepository
from travel_api.routers.auth import router as auth_router
from travel_api.routers.tourists import router as tourists_router
from travel_api.routers.trips import router as trips_router
from travel_api.services.credentials import CredentialStore
from travel_api.services.passwords import password_looks_hashed
from travel_api.services.tokens import TokenService

API_VERSION = "1.0.0"
BOOTSTRAP_PREFIX = "[EMPLOYEE_BOOTSTRAP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini")))

logger = logging.getLogger(__name__)


def _bootstrap_initial_employee(database: Database) -> None:
    if not DEV_EMPLOYEE_PASSWORD:
        logger.info("%s skipped: configure DEV_EMPLOYEE_PASSWORD.", BOOTSTRAP_PREFIX)
        return
    if password_looks_hashed(DEV_EMPLOYEE_PASSWORD):
        logger.error("%s DEV_EMPLOYEE_PASSWORD must be plain text", BOOTSTRAP_PREFIX)
        return

    db = database.session()
    try:
        credentials = CredentialStore(SqlUserRepository(db))
        existing = credentials.find_by_email(DEV_EMPLOYEE_EMAIL)
        if existing:
            logger.info("%s exists id=%s email=%s", BOOTSTRAP_PREFIX, existing.id, existing.email)
            return

        employee = credentials.register(
            email=DEV_EMPLOYEE_EMAIL,
            password=DEV_EMPLOYEE_PASSWORD,
            first_name=DEV_EMPLOYEE_FIRST_NAME,
            last_name=DEV_EMPLOYEE_LAST_NAME,
            role=UserRole.EMPLOYEE,
        )
        logger.info("%s created id=%s email=%s", BOOTSTRAP_PREFIX, employee.id, employee.email)
    except Conflict:
        # another worker created it first
        logger.info("%s exists email=%s", BOOTSTRAP_PREFIX, DEV_EMPLOYEE_EMAIL)
    finally:
        db.close()


def _startup_tasks(app: FastAPI) -> None:
    database: Database = app.state.database
    try:
        validate_database_environment(str(database.engine.url))
        if database.is_sqlite:
            database.create_all()
        else:
            ensure_migrations_applied(engine=database.engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        _bootstrap_initial_employee(database)
    except Exception:
        logger.exception("[STARTUP] ERROR startup failed")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    _startup_tasks(app)
    yield
    app.state.database.dispose()


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
        return error_response(
            exc.status_code,
            exc.message,
            detail=exc.detail,
            include_detail=request.app.state.expose_error_detail,
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        detail = f"{location}: {message}" if location else message
        return error_response(400, "Validation failed", detail=detail, include_detail=True)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return error_response(404, f"Route {request.url.path} not found")
        return error_response(
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            500,
            "Internal server error",
            detail=str(exc),
            include_detail=request.app.state.expose_error_detail,
        )


def create_app(
    *,
    database: Optional[Database] = None,
    token_service: Optional[TokenService] = None,
    rate_limiter: Optional[RateLimiterService] = None,
    rate_limit_enabled: bool = RATE_LIMIT_ENABLED,
    trusted_proxies: Optional[Iterable[str]] = None,
    expose_error_detail: bool = IS_DEV,
) -> FastAPI:
    """Build the API with its own storage handle and token service.

    Raises ``ConfigurationError`` when no signing secret is configured.
    """
    app = FastAPI(
        title="Travel Agency API",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    app.state.database = database or Database.from_url(DATABASE_URL)
    app.state.token_service = token_service or TokenService(JWT_SECRET_KEY)
    app.state.expose_error_detail = expose_error_detail

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if rate_limit_enabled:
        app.add_middleware(ClientRateLimitMiddleware, rate_limiter=rate_limiter, trusted_proxies=trusted_proxies)
    app.add_middleware(ObservabilityMiddleware)

    _register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(tourists_router)
    app.include_router(trips_router)

    @app.get("/")
    def root():
        return {
            "success": True,
            "message": "Welcome to the Travel Agency API",
            "version": API_VERSION,
            "documentation": "/api/docs",
            "endpoints": {
                "auth": "/api/auth",
                "tourists": "/api/tourists",
                "trips": "/api/trips",
                "health": "/api/health",
            },
        }

    @app.get("/api/health")
    def health():
        return {
            "success": True,
            "message": "Travel Agency API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": API_VERSION,
            "environment": ENV,
        }

    return app


def build_default_app() -> FastAPI:
    configure_logging()
    logger.info("starting env=%s dev=%s", ENV, IS_DEV)
    return create_app()
