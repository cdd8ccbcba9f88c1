# backend/portfolio_dashboard/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routes import health, snapshot
from .services.factory import build_snapshot_service
from .utils.cache import build_quote_cache
from .utils.logger import setup_logger
from .utils.settings import Settings, get_settings

# Initialize logger
logger = setup_logger()


def create_app(settings: Optional[Settings] = None,
               price_provider=None, fundamentals_provider=None) -> FastAPI:
    """Build the API. Providers default to the ones named in settings."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One cache and one set of sources for the life of the process
        quote_cache = build_quote_cache(settings)
        app.state.settings = settings
        app.state.quote_cache = quote_cache
        app.state.snapshot_service = build_snapshot_service(
            settings, quote_cache, price_provider, fundamentals_provider
        )

        if settings.price_cache_ttl > settings.refresh_interval_seconds:
            logger.warning(
                f"Price cache TTL ({settings.price_cache_ttl}s) is longer than the refresh "
                f"interval ({settings.refresh_interval_seconds}s); polls may see stale prices"
            )
        logger.info(f"{settings.app_name} started")

        yield

        quote_cache.clear()
        provider = app.state.snapshot_service.fundamentals_source.provider
        if hasattr(provider, "close"):
            provider.close()
        logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Live portfolio snapshot: holdings enriched with prices and fundamentals",
        version=settings.api_version,
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(snapshot.router, prefix="/api/snapshot", tags=["Snapshot"])

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Global exception: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "portfolio_dashboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
