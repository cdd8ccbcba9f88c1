# backend/portfolio_dashboard/routes/health.py
from fastapi import APIRouter, Request
from datetime import datetime, timezone

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "version": settings.api_version,
        "app": settings.app_name
    }


@router.get("/health/detailed")
async def detailed_health_check(request: Request):
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "services": {
            "api": "healthy",
            "price_provider": settings.price_provider,
            "fundamentals_provider": settings.fundamentals_provider,
        },
        "cache": request.app.state.quote_cache.stats(),
        "refresh_interval_seconds": settings.refresh_interval_seconds,
    }
