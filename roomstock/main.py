from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
import time
import uuid

from .config import settings
from .database import create_tables
from .utils.logging_config import setup_logging, get_logger, set_request_context, clear_request_context
from .utils.rate_limiter import limiter, get_real_client_ip, get_retry_after

from .routers import availability, health

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    logger.info(f"Starting roomstock ({settings.environment})")

    create_tables()

    yield

    logger.info("Shutting down roomstock")


# Create FastAPI app
app = FastAPI(
    title="Roomstock - Room Availability API",
    description="Unit-level room availability for hotel properties",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiter state
app.state.limiter = limiter


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Retry-After"],
)


# Security Headers Middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


# Request ID Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id, get_real_client_ip(request))
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.api_request(
                request.method,
                request.url.path,
                response.status_code,
                round((time.perf_counter() - started) * 1000, 2)
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


app.add_middleware(RequestIdMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


# Rate limit handler
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    retry_after = get_retry_after(request, exc)
    logger.warning(f"Rate limit exceeded on {request.url.path} ({exc.detail})")
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests, please try again later", "retryAfter": retry_after},
        headers={"Retry-After": str(retry_after)}
    )


# Persistence failures: logged in full, generic to the caller
@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        f"Database error on {request.method} {request.url.path}: {exc.__class__.__name__}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"}
    )


# Include routers
app.include_router(availability.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "message": "Roomstock availability API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "running"
    }
