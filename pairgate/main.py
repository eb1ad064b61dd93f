"""PairGate API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PairGateError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Engine created and expiration sweeper started on startup via lifespan;
      the sweeper is cancelled on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py, registered once below
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pairgate.api.error_handlers import register_error_handlers
from pairgate.api.routes import (
    actions, discovery, founding, health, interests, lounges, messaging,
    places, viewers,
)
from pairgate.config import get_settings
from pairgate.infrastructure.observability import setup_logging
from pairgate.services import expiration_sweeper
from pairgate.services.coordination_engine import init_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine = init_engine(settings)
    expiration_sweeper.sweeper = expiration_sweeper.ExpirationSweeper(
        engine, settings.sweep_interval_seconds,
    )
    expiration_sweeper.sweeper.start()
    logger.info("PairGate API started")
    yield
    logger.info("PairGate API shutting down")
    await expiration_sweeper.sweeper.stop()


app = FastAPI(
    title="PairGate API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(viewers.router)
app.include_router(discovery.router)
app.include_router(interests.router)
app.include_router(actions.router)
app.include_router(founding.router)
app.include_router(messaging.router)
app.include_router(lounges.router)
app.include_router(places.router)

register_error_handlers(app)
