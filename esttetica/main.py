"""
Esttetica API - Main Application
FastAPI application with CORS, error handling, middleware, and logging
Subscription entitlement, Stripe billing and help endpoints
"""
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.exceptions import RequestValidationError
import logging
from datetime import datetime
import traceback


from esttetica.api.routes import (
    billing_router,
    subscription_router,
    tools_router,
    help_router,
)
from esttetica.api.routes.billing import preflight_response
from esttetica.core.config import settings, get_cors_origins
from esttetica.core.exceptions import AppError, PremiumRequiredError
from esttetica.database import test_connection, init_db, close_db_connection


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.PROJECT_DESCRIPTION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# ==================== MIDDLEWARE ====================


# Compression: GZip responses
app.add_middleware(GZipMiddleware, minimum_size=1000)


# CORS: the web app and the billing portal redirect call from any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    max_age=3600,
)


# Billing preflights bypass CORSMiddleware; keep this registered after it
@app.middleware("http")
async def billing_preflight(request: Request, call_next):
    if request.method == "OPTIONS" and request.url.path.startswith("/api/billing/"):
        return preflight_response()
    return await call_next(request)


# ==================== ROUTERS ====================


app.include_router(subscription_router, prefix="/api/subscription", tags=["Subscription"])
app.include_router(billing_router, prefix="/api/billing", tags=["Billing"])
app.include_router(tools_router, prefix="/api/tools", tags=["Tools"])
app.include_router(help_router, prefix="/api/help", tags=["Help"])


# ==================== ERROR HANDLERS ====================


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Handle domain errors raised by services and dependencies"""
    logger.info(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.message
        }
    )


@app.exception_handler(PremiumRequiredError)
async def premium_required_handler(request: Request, exc: PremiumRequiredError):
    """Send callers without an active subscription to the fallback page"""
    logger.info(f"Premium required for {request.url.path}, redirecting to {exc.redirect_to}")
    return RedirectResponse(url=exc.redirect_to, status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed response"""
    logger.warning(f"Validation error on {request.url}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "detail": "Validation error",
            "errors": jsonable_errors(exc)
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raised ValueError itself
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")

    # Don't expose internal errors in production
    error_message = str(exc) if settings.DEBUG else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "detail": error_message,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# ==================== HEALTH & STATUS ENDPOINTS ====================


@app.get("/", tags=["System"])
async def root():
    """Root endpoint - API information"""
    return {
        "success": True,
        "message": "Welcome to Esttetica API",
        "app_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/api/docs",
        "status": "operational",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint for monitoring"""
    try:
        connection_ok = test_connection()

        return {
            "success": True,
            "status": "healthy" if connection_ok else "degraded",
            "database": "connected" if connection_ok else "disconnected",
            "timestamp": datetime.utcnow().isoformat(),
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat()
            }
        )


@app.get("/status", tags=["System"])
async def status_check():
    """Detailed status check"""
    return {
        "success": True,
        "status": "operational",
        "timestamp": datetime.utcnow().isoformat(),
        "service": {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG
        },
        "integrations": {
            "stripe": "configured" if settings.stripe_configured else "not configured",
            "supabase": "configured" if settings.supabase_configured else "not configured",
            "webhook_signatures": "enforced" if settings.is_production else "not enforced"
        }
    }


@app.get("/api/version", tags=["System"])
async def get_version():
    """Get API version information"""
    return {
        "success": True,
        "api_version": settings.VERSION,
        "app_name": settings.PROJECT_NAME,
        "stripe_api_version": settings.STRIPE_API_VERSION
    }


# ==================== STARTUP & SHUTDOWN ====================


@app.on_event("startup")
async def startup_event():
    """Run on application startup"""
    logger.info("="*70)
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    logger.info("="*70)
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Frontend URL: {settings.FRONTEND_URL}")

    if not settings.stripe_configured:
        logger.warning("[WARN] STRIPE_SECRET_KEY not set - billing calls will fail")
    if not settings.supabase_configured:
        logger.warning("[WARN] Supabase not configured - authenticated endpoints will return 401")

    logger.info("Testing database connection...")
    if test_connection():
        logger.info("[OK] Database connection successful!")
    else:
        logger.warning("[WARN] Database connection failed - continuing in degraded mode")

    logger.info("Initializing database tables...")
    if init_db():
        logger.info("[OK] Database initialization complete!")
    else:
        logger.warning("[WARN] Database init returned False - tables may not exist")

    logger.info("="*70)
    logger.info("[OK] Application startup complete!")
    logger.info("="*70)


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown"""
    logger.info("Shutting down application...")
    close_db_connection()
    logger.info("Application shutdown complete")


# ==================== REQUEST LOGGING ====================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    # Skip logging for health checks
    if request.url.path in ["/health", "/status"]:
        return await call_next(request)

    start_time = datetime.utcnow()
    client_host = request.client.host if request.client else "unknown"
    logger.info(f">> {request.method} {request.url.path} - {client_host}")

    try:
        response = await call_next(request)
        duration = (datetime.utcnow() - start_time).total_seconds()
        logger.info(f"<< {request.method} {request.url.path} - {response.status_code} ({duration:.2f}s)")
        return response
    except Exception as e:
        duration = (datetime.utcnow() - start_time).total_seconds()
        logger.error(f"[ERROR] {request.method} {request.url.path} - Error: {str(e)} ({duration:.2f}s)")
        raise
