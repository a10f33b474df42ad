"""mixhub Backend - 频道目录与下载代理服务入口。"""

from datetime import UTC, datetime
from pathlib import Path

import sentry_sdk
from fastapi import Depends, FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from src.core.application import dependencies as core_app_deps
from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure import dependencies as infra_deps
from src.core.infrastructure.container import ServiceContainer, build_container
from src.core.infrastructure.logging import setup_logging
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from src.core.interfaces.http.middleware import access_log_middleware
from src.core.interfaces.http.rate_limit import enforce_rate_limit
from src.core.interfaces.http.routers import api_router
from src.modules.catalog.application import dependencies as catalog_app_deps
from src.modules.conversion.application import dependencies as conversion_app_deps
from src.modules.media.application import dependencies as media_app_deps
from src.modules.realtime.application import dependencies as realtime_app_deps


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting mixhub backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"YouTube channel: {settings.YOUTUBE_CHANNEL_ID or 'not configured'}")

    container = await build_container(settings)
    app.state.container = container

    yield

    logger.info("Shutting down mixhub backend...")
    await container.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="频道目录聚合、下载转换代理与播放同步",
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[core_app_deps.get_settings] = infra_deps.get_settings
app.dependency_overrides[core_app_deps.get_rate_limiter] = infra_deps.get_rate_limiter
app.dependency_overrides[core_app_deps.get_response_cache] = (
    infra_deps.get_response_cache
)
app.dependency_overrides[catalog_app_deps.get_catalog_source] = (
    infra_deps.get_catalog_source
)
app.dependency_overrides[conversion_app_deps.get_conversion_provider] = (
    infra_deps.get_conversion_provider
)
app.dependency_overrides[media_app_deps.get_waveform_store] = (
    infra_deps.get_waveform_store
)
app.dependency_overrides[realtime_app_deps.get_room_hub] = infra_deps.get_room_hub

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Response compression
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Access log
app.middleware("http")(access_log_middleware)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get(
    f"{settings.API_PREFIX}/health",
    tags=["health"],
    dependencies=[Depends(enforce_rate_limit)],
)
async def health_check(
    container: ServiceContainer = Depends(infra_deps.get_container),
):
    """Health check endpoint.

    缓存不可用不影响服务（会降级为 no-op），因此只报告 degraded 而不是 unhealthy。
    """
    cache_health = await container.cache.check_health()
    cache_ok = cache_health.get("status") in ("ok", "skipped")

    return {
        "status": "healthy" if cache_ok else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": round(container.uptime_sec, 3),
        "environment": container.config.ENVIRONMENT,
        "version": container.config.VERSION,
        "components": {
            "cache": cache_health,
        },
        "config": {
            "youtube_channel": container.config.YOUTUBE_CHANNEL_ID,
            "catalog_source_configured": container.config.catalog_source_configured,
            "conversion_configured": container.config.conversion_configured,
            "cache_backend": container.cache.backend_name,
            "rate_limit_backend": container.rate_limiter.backend_name,
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to mixhub API",
        "docs": f"{settings.API_PREFIX}/docs",
    }


# Browser client static assets (optional)
if settings.STATIC_DIR and Path(settings.STATIC_DIR).is_dir():
    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
