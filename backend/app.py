"""
WeatherVibe Backend Application

FastAPI application hosting the weather engine, its tick loop and the
administrative API.
"""

import os
import sys
import traceback
from contextlib import asynccontextmanager

import log_config  # noqa: F401
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from loguru import logger

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import api
from api import router as api_router

from core.weathervibe.commands import CommandHandler
from core.weathervibe.engine import WeatherVibeEngine
from core.weathervibe.service import WeatherTickService
from core.weathervibe.settings import load_config_source
from core.weathervibe.transport import create_transport


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for startup/shutdown."""
    # Startup
    logger.info("WeatherVibe starting")

    source = load_config_source(os.environ.get("WEATHERVIBE_CONFIG"))
    engine = WeatherVibeEngine(source, transport=create_transport())
    api.engine = engine
    api.commands = CommandHandler(engine)

    tick_service = None
    if engine.enabled:
        tick_service = WeatherTickService(engine)
        await tick_service.start()
        logger.info(f"🌦️ Weather scheduling enabled for {len(engine.settings.zone_ids)} zone(s)")
    else:
        logger.warning("⚠️ Weather scheduling disabled (WeatherVibe.Enable = 0)")

    yield

    # Shutdown
    logger.info("WeatherVibe shutting down")
    if tick_service:
        await tick_service.stop()


# Create FastAPI application
app = FastAPI(
    title="WeatherVibe API",
    description="Per-zone ambient weather scheduling with weighted picks and smooth fades",
    version="0.1.0",
    lifespan=lifespan,
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Log unhandled exceptions with their request path and return a 500."""
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    logger.error(f"Unhandled exception: {exc}")
    logger.error(f"Request path: {request.url.path}")
    logger.error(f"Stack trace:\n{tb_str}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "type": type(exc).__name__,
            "message": "Internal server error",
        },
    )


# Include API router
app.include_router(api_router)


# For development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
