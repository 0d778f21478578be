"""
Main application file.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.api import api_router
from app.middleware import add_security_headers_middleware, add_rate_limit_middleware
from app.utils.connection_manager import connection_manager
from app.utils.error_handling import AppError, format_error_response, log_error
from config.config import settings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Define lifespan handler
@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Lifespan event handler for FastAPI application.
    Refuses to start without database credentials; Stripe is optional.
    """
    settings.require_database_credentials()
    connection_manager.get_supabase_client()

    if not settings.stripe_configured:
        logger.warning("Stripe checkout is not configured; billing endpoints will report it")
    if not settings.webhook_configured:
        logger.warning("Stripe webhook secret is not configured; webhooks will be rejected")

    logger.info(f"{settings.APP_NAME} started")

    yield

    logger.info(f"Shutting down {settings.APP_NAME} server...")
    connection_manager.close_all_connections()

# Create FastAPI app with lifespan handler
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# Add security headers middleware
add_security_headers_middleware(app)

# Add rate limiting middleware
add_rate_limit_middleware(app)

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        log_error(exc, {"path": request.url.path})
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=format_error_response(exc))

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."
    return JSONResponse(status_code=400, content={"error": message})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log_error(exc, {"path": request.url.path})
    return JSONResponse(status_code=500, content=format_error_response(exc))

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

# Include API router
app.include_router(api_router)

@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
    }

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
