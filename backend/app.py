"""FastAPI application entry point for the sunsign forecast API."""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from errors import register_error_handlers
from services import topics
from services.cache import TTLCache
from services.coalesce import CoalescingFetcher
from services.fetcher import ContentFetcher
from services.refresh import RefreshPipeline
from services.scheduler import WarmScheduler

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def build_pipeline(config: Settings) -> RefreshPipeline:
    fetcher = ContentFetcher(config.source_base_url, timeout_seconds=config.fetch_timeout_seconds)
    if config.coalesce_fetches:
        fetcher = CoalescingFetcher(fetcher)
    return RefreshPipeline(
        TTLCache(ttl_seconds=config.cache_ttl_seconds),
        fetcher,
        refresh_on_hit=config.refresh_on_hit,
    )


def create_app(config: Settings = settings, pipeline: RefreshPipeline | None = None) -> FastAPI:
    app = FastAPI(title="Sunsign Forecast API", version="1.0.0")

    app.state.settings = config
    app.state.pipeline = pipeline or build_pipeline(config)
    app.state.scheduler = WarmScheduler(
        app.state.pipeline,
        topics.sorted_signs(),
        interval_seconds=config.refresh_interval_seconds,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if config.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.forecast import router as forecast_router

    app.include_router(health_router)
    app.include_router(forecast_router)

    @app.on_event("startup")
    async def _start_cache_warming() -> None:
        problems = config.validate()
        if problems:
            logger.warning("Settings out of range (must be positive): %s", ", ".join(problems))
        if config.warm_on_startup:
            app.state.scheduler.start()

    @app.on_event("shutdown")
    async def _stop_cache_warming() -> None:
        app.state.scheduler.stop()

    return app


app = create_app()


def main() -> None:
    logger.info("Starting server at port %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
