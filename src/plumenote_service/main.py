"""Main FastAPI application for PlumeNote Service."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config.settings import get_settings
from .infrastructure.database.client import DatabaseClient
from .core.note_manager import NoteManager
from .core.view_manager import ViewManager
from .core.recent_manager import RecentNotesManager
from .core.analytics_manager import AnalyticsManager
from .api.errors import http_exception_handler, validation_exception_handler
from .api.routes import admin, notes
from .models.requests import HealthResponse

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Global instances
db_client: DatabaseClient = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    global db_client

    settings = get_settings()
    logger.info(f"Starting {settings.service_name} v{__version__}")

    logger.info("Initializing database...")
    db_client = DatabaseClient(settings.database_url)
    await db_client.initialize()

    # Set managers in route modules
    note_mgr = NoteManager(db_client)
    view_mgr = ViewManager(db_client, timedelta(minutes=settings.view_dedup_window_minutes))
    recent_mgr = RecentNotesManager(
        db_client,
        default_limit=settings.recent_notes_default_limit,
        max_limit=settings.recent_notes_max_limit,
    )
    analytics_mgr = AnalyticsManager(
        db_client,
        activity_window_days=settings.activity_window_days,
        active_users_window_days=settings.active_users_window_days,
        top_notes_limit=settings.top_notes_limit,
        top_contributors_limit=settings.top_contributors_limit,
        timezone_name=settings.stats_timezone,
    )
    notes.set_managers(note_mgr, view_mgr, recent_mgr)
    admin.set_managers(analytics_mgr)

    logger.info(f"{settings.service_name} is ready")

    yield

    # Cleanup
    logger.info("Shutting down...")
    await db_client.close()
    db_client = None
    logger.info("Shutdown complete")


app = FastAPI(
    title="PlumeNote Service",
    description="Note view tracking, recent notes and admin statistics for PlumeNote",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(notes.router)
app.include_router(admin.router)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    settings = get_settings()

    db_connected = db_client is not None

    return HealthResponse(
        status="healthy" if db_connected else "degraded",
        service=settings.service_name,
        version=__version__,
        database_connected=db_connected
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "plumenote-service",
        "version": __version__,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "plumenote_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=True
    )
