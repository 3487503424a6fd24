"""
Climasim Backend Application

FastAPI application hosting the simulator and its clock.
"""

import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from . import log_config  # noqa: F401
from . import api
from .api import router as api_router

from core.climasim.settings import load_settings
from core.climasim.simulator import ClimateSimulator


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for startup/shutdown."""
    # Startup
    logger.info("Climasim starting")

    settings = load_settings()
    simulator = ClimateSimulator(settings)
    api.simulator = simulator

    ctx = simulator.context
    logger.info(
        f"🌡️ Room: {ctx.selected_room.value}, location: {ctx.location}, "
        f"tick interval: {settings.tick_interval_seconds}s"
    )
    if settings.state_path:
        logger.info(f"💾 Persisting state to {settings.state_path}")
    else:
        logger.warning("⚠️ No state_path configured, state is kept in memory only")

    await simulator.start()

    yield

    # Shutdown
    logger.info("Climasim shutting down")
    await simulator.stop()
    simulator.close()
    api.simulator = None


# Create FastAPI application
app = FastAPI(
    title="Climasim API",
    description="Multi-room air-conditioner simulation",
    version=api.VERSION,
    lifespan=lifespan,
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle all unhandled exceptions gracefully."""
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


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


def main():
    """Run the API server (`climasim` console script or `python -m backend.app`)."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)


# For development
if __name__ == "__main__":
    main()
