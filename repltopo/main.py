"""Replication Topology API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TopologyError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging configured on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repltopo.api.error_handlers import register_error_handlers
from repltopo.api.routes import health, topology
from repltopo.api.routes.health import SERVICE_VERSION
from repltopo.config import get_settings
from repltopo.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    handler = setup_logging(settings.log_level, settings.log_format)
    logger.info("Replication topology API started")
    yield
    logger.info("Replication topology API shutting down")
    logging.root.removeHandler(handler)


app = FastAPI(
    title="Replication Topology API", version=SERVICE_VERSION, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(topology.router)

register_error_handlers(app)
