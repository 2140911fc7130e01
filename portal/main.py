"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.config import settings
from portal.database import Database
from portal.errors import PortalError
from portal.repositories import (
    InMemoryCandidateRepository,
    InMemoryLockRepository,
    InMemorySessionRepository,
    MongoCandidateRepository,
    MongoLockRepository,
    MongoSessionRepository,
)
from portal.routers import admin, assessment
from portal.services.container import PortalServices, build_services
from portal.services.provider import OpenAIProvider

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, settings.log_level.upper(), logging.INFO)
)
logger = logging.getLogger(__name__)


async def _build_default_services() -> PortalServices:
    if settings.storage_backend == "memory":
        sessions = InMemorySessionRepository()
        candidates = InMemoryCandidateRepository()
        locks = InMemoryLockRepository()
    else:
        await Database.connect()
        db = Database.get_database()
        sessions = MongoSessionRepository(db)
        candidates = MongoCandidateRepository(db)
        locks = MongoLockRepository(db)

    services = build_services(
        provider=OpenAIProvider(),
        sessions=sessions,
        candidates=candidates,
        locks=locks,
        admin_directory=settings.admin_directory,
        violation_threshold=settings.violation_termination_threshold,
    )
    added = await services.ledger.seed_directory(settings.candidate_seed_directory)
    logger.info("Candidate directory seeded with %d new entries", added)
    return services


def create_app(services: Optional[PortalServices] = None) -> FastAPI:
    """Build the application; pass ``services`` to skip default wiring."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        owns_services = services is None
        app.state.services = services or await _build_default_services()
        yield
        # Shutdown
        if owns_services:
            provider = app.state.services.provider
            if isinstance(provider, OpenAIProvider):
                await provider.aclose()
            await Database.disconnect()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    # Include routers
    app.include_router(assessment.router)
    app.include_router(admin.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Proctored Assessment Portal API",
            "version": settings.app_version,
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
