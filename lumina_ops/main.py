from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging
import uuid

from .config import Settings, settings as default_settings
from .exceptions import (
    ConflictError,
    IncompleteChecklistError,
    InvalidTransitionError,
    MissingEvidenceError,
    NotFoundError,
    OperationsError,
    PermissionDeniedError,
    UnknownRoleError,
    ValidationError,
)
from .models.user import Role, User
from .store import OperationsStore
from .utils.logging_config import setup_logging, set_request_context

from .routers import ai, bookings, dashboard, inventory, issues, jobs, properties, users

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# Most specific first: lookup walks this list with isinstance
ERROR_STATUS_CODES = [
    (ValidationError, 422),
    (NotFoundError, 404),
    (IncompleteChecklistError, 409),
    (MissingEvidenceError, 409),
    (InvalidTransitionError, 409),
    (ConflictError, 409),
    (UnknownRoleError, 400),
    (PermissionDeniedError, 403),
]


def status_code_for(exc: OperationsError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    config: Settings = app.state.settings
    logger.info(f"Starting lumina-ops {VERSION} ({config.environment})")
    if not config.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set - AI advice will return fallback text")
    yield
    logger.info("Shutting down lumina-ops")


# Request ID Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


# Security Headers Middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(OperationsError)
    async def operations_error_handler(request: Request, exc: OperationsError) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code}")
        payload = exc.to_dict()
        payload["path"] = request.url.path
        return JSONResponse(status_code=status_code, content=payload)


def bootstrap_admin(store: OperationsStore, config: Settings) -> Optional[User]:
    """Create the first admin so an empty store can be operated at all"""
    if store.users or not config.bootstrap_admin_id:
        return None
    admin = store.add_user(User(
        id=config.bootstrap_admin_id,
        name=config.bootstrap_admin_name,
        email=config.bootstrap_admin_email,
        role=Role.ADMIN,
    ))
    logger.info(f"Created bootstrap admin user (id={admin.id})")
    return admin


def create_app(
    config: Optional[Settings] = None,
    store: Optional[OperationsStore] = None,
) -> FastAPI:
    """
    Build the API around one OperationsStore. Tests pass their own
    settings and store; production uses the environment settings and a
    fresh empty store.
    """
    config = config or default_settings
    setup_logging(level=config.log_level, json_format=config.log_json)

    app = FastAPI(
        title="Lumina Ops API",
        description="Short-let property operations: turnovers, maintenance and inventory",
        version=VERSION,
        lifespan=lifespan
    )
    app.state.settings = config
    app.state.store = store or OperationsStore(notification_limit=config.notification_limit)
    bootstrap_admin(app.state.store, config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(properties.router)
    app.include_router(bookings.router)
    app.include_router(jobs.router)
    app.include_router(inventory.router)
    app.include_router(issues.router)
    app.include_router(dashboard.router)
    app.include_router(ai.router)

    @app.get("/")
    async def root():
        return {
            "message": "Lumina Ops API",
            "version": VERSION,
            "docs": "/docs",
            "status": "running",
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
