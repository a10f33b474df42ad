"""API router configuration."""

from fastapi import APIRouter, Depends

from src.core.interfaces.http.rate_limit import enforce_rate_limit
from src.modules.catalog.interfaces.router import router as catalog_router
from src.modules.conversion.interfaces.router import router as conversion_router
from src.modules.media.interfaces.router import router as media_router
from src.modules.realtime.interfaces.router import router as realtime_router

api_router = APIRouter()

# HTTP 路由按客户端 IP 限流；WebSocket 中继不计入
rate_limited = [Depends(enforce_rate_limit)]

# Channel catalog and search
api_router.include_router(catalog_router, dependencies=rate_limited)

# Download options / conversion / stream
api_router.include_router(conversion_router, dependencies=rate_limited)

# Waveforms
api_router.include_router(media_router, dependencies=rate_limited)

# Playback relay
api_router.include_router(realtime_router)
