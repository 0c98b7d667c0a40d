from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core.config import settings
from app.core.database import engine
from app.core.exceptions import ContactSearchException
from app.core.rate_limit import limiter
from app.core.scheduler import start_scheduler, shutdown_scheduler
from app.api.routes.auth import router as auth_router
from app.api.routes.password import router as password_router
from app.services.jwt_service import JWTService
from app.services.password_reset_store import PasswordResetStore
from app.services.token_blacklist import TokenBlacklist

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def run_migrations():
    """Run database migrations on startup."""
    try:
        from alembic.config import Config
        from alembic import command

        logger.info("Running database migrations...")
        alembic_cfg = Config("alembic.ini")
        command.upgrade(alembic_cfg, "head")
        logger.info("Database migrations completed successfully")
    except Exception as e:
        logger.error(f"Failed to run migrations: {e}")
        # Don't fail startup, migrations might already be applied


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Contact Search API...")

    config_errors = settings.validate_required_secrets()
    for error in config_errors:
        logger.error(f"Configuration error: {error}")
    if config_errors and IS_PRODUCTION:
        raise RuntimeError("Invalid configuration; refusing to start")

    if IS_PRODUCTION:
        run_migrations()

    # Token state lives for the lifetime of the process only
    app.state.token_blacklist = TokenBlacklist()
    app.state.password_resets = PasswordResetStore()
    app.state.jwt_service = JWTService(app.state.token_blacklist)
    app.state.scheduler = start_scheduler(
        app.state.token_blacklist,
        app.state.password_resets,
        settings.TOKEN_CLEANUP_INTERVAL_MS,
    )

    logger.info("Contact Search API started successfully")
    yield
    # Shutdown
    shutdown_scheduler(app.state.scheduler)
    logger.info("Shutting down Contact Search API...")

# Determine if running in production
IS_PRODUCTION = settings.ENVIRONMENT == "production"

app = FastAPI(
    title="Contact Search API",
    description="Contact management backend: authentication and password management",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production
    docs_url=None if IS_PRODUCTION else "/docs",
    redoc_url=None if IS_PRODUCTION else "/redoc",
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def error_body(error_code: str, message: str) -> dict:
    return {
        "error": error_code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Exception handlers
@app.exception_handler(ContactSearchException)
async def contact_search_exception_handler(request: Request, exc: ContactSearchException):
    """Handle custom Contact Search exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.detail),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle framework HTTP errors (404 routes, 405 methods)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with the first problem found."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("INVALID_ARGUMENT", message),
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors."""
    logger.error(f"Database error: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_body("DATABASE_ERROR", "A database error occurred"),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=error_body("INTERNAL_ERROR", "An unexpected error occurred"),
    )

# Configure CORS
allowed_origins = [settings.FRONTEND_URL]
if not IS_PRODUCTION:
    # Allow localhost variations in development
    allowed_origins.extend([
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    max_age=600,  # Cache preflight requests for 10 minutes
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(password_router, prefix="/api")


@app.get("/")
def root():
    return {"message": "Welcome to Contact Search API"}


@app.get("/health")
def health_check():
    """Health check endpoint for load balancers and monitoring."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "1.0.0",
    }

    # Check database connectivity
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["database"] = "disconnected"

    return health_status
