"""FastAPI application entry point."""
import logging

from fastapi import FastAPI

from wayfarer import __version__
from wayfarer.api.routes import encounters, travel
from wayfarer.config import get_settings
from wayfarer.middleware.error_handler import setup_error_handlers

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Wayfarer",
    description="Deterministic travel and encounter simulation core",
    version=__version__,
)

setup_error_handlers(app, debug=settings.DEBUG)


@app.get("/")
async def root():
    return {"status": "online", "service": "wayfarer", "version": __version__}


@app.get("/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "debug_mode": settings.DEBUG,
        "active_sessions": len(travel.active_sessions),
    }


# Routes
app.include_router(travel.router, prefix="/api/travel", tags=["travel"])
app.include_router(encounters.router, prefix="/api/encounters", tags=["encounters"])

logger.info(f"Wayfarer {__version__} ready (debug={settings.DEBUG})")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("wayfarer.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
