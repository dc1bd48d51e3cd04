"""
FastAPI Application Entry Point

JWT Pizza Service - REST backend for the pizza-ordering platform.

Endpoints:
    - /api/auth: Register, login, logout
    - /api/user: Profile read and update
    - /api/order: Menu and diner orders (fulfilled by the pizza factory)
    - /api/franchise: Franchises and their stores
    - GET /api/docs: Endpoint catalogue
    - GET /health: System health check

Version: 1.0.0
"""

import asyncio
import sys
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from pizza_service.core.config import get_settings, setup_logging
from pizza_service.core.exceptions import StatusCodeError
from pizza_service.database import get_db, init_db, engine
from pizza_service.routers import ALL_ROUTERS
from pizza_service.schemas import DocsResponse, HealthResponse
from pizza_service.services.factory import BaseFactoryService, get_factory_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"🍕 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("✅ Database initialized")

    factory_service = get_factory_service()
    logger.info(f"✅ Factory Service: {factory_service.provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Pizza ordering backend: authentication with allow-listed JWTs, "
        "franchise and store management, menu, and factory-fulfilled orders."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

for module in ALL_ROUTERS:
    app.include_router(module.router)


# =============================================================================
# ROOT, DOCS & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    return {
        "message": "welcome to JWT Pizza",
        "version": settings.app_version,
    }


@app.get(
    "/api/docs",
    response_model=DocsResponse,
    tags=["Root"],
    summary="Endpoint catalogue",
)
async def api_docs() -> DocsResponse:
    """List every API endpoint and the services this instance talks to."""
    return DocsResponse(
        version=settings.app_version,
        endpoints=[doc for module in ALL_ROUTERS for doc in module.docs],
        config={
            "factory": settings.factory_url,
            "db": settings.database_host,
        },
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db),
    factory: BaseFactoryService = Depends(get_factory_service),
) -> HealthResponse:
    """Verify the database and the pizza factory are reachable."""
    db_status = "healthy"
    try:
        await db.execute(select(func.now()))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    factory_status = "healthy" if await factory.health_check() else "unhealthy"

    overall = "operational" if db_status == factory_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        factory_service=f"{factory.provider_name}: {factory_status}",
        timestamp=datetime.now(),
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(StatusCodeError)
async def status_code_error_handler(request: Request, exc: StatusCodeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.debug(f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else first.get("msg", "invalid request")
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "unknown endpoint" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "message": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
