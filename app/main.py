# app/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.db import init_models
from app.utils.logger import setup_app_logging, get_logger
# Local application imports - Routes
from app.agencies.router import router as agency_routes
from app.roster.router import router as roster_routes
from app.bookings.router import router as booking_routes
from app.billing.router import router as billing_routes
from app.reports.router import router as reports_routes
from app.dashboard.router import router as dashboard_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create the database tables before serving requests
    """
    await init_models()
    yield


# Create the FastAPI app
agency_app = FastAPI(
    title=f"Agency Back Office - {settings.environment}",
    description="Travel agency back-office API: roster, bookings, billing and reports",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure logging
if settings.environment.lower() != "production":
    setup_app_logging(
        agency_app,
        log_level=settings.log_level,
        use_json=settings.log_json,
        log_file=settings.log_file,
        app_name="Agency Back Office",
        environment=settings.environment,
    )
else:
    setup_app_logging(
        agency_app,
        log_level=settings.log_level,
        use_json=True,
        log_file=settings.log_file,
        app_name="Agency Back Office",
        environment="production",
    )
logger = get_logger(__name__)

# Add CORS middleware
agency_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_cors_urls.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
agency_app.include_router(agency_routes)
agency_app.include_router(dashboard_routes)
agency_app.include_router(roster_routes)
agency_app.include_router(booking_routes)
agency_app.include_router(billing_routes)
agency_app.include_router(reports_routes)


# Root API to check if the server is up
@agency_app.get("/", tags=["Base"])
async def health_check():
    """
    Root API to check if the server is up
    """
    logger.info("Calling root API for testing")
    return {"status": "ok"}
