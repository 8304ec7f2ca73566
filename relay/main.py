"""
Relay FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relay import config
from relay.middleware.rate_limit import rate_store
from relay.routes import api as api_routes
from relay.routes import auth_routes
from relay.services.sweeper import Sweeper
from relay.services.token_store import token_store

logging.basicConfig(
    level=getattr(logging, config.settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

sweeper = Sweeper({"tokens": token_store.store, "rate_limits": rate_store})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Starts the background sweep task and cancels it on shutdown.
    """
    sweep_task_handle = asyncio.create_task(sweeper.run())
    app.state.sweep_task = sweep_task_handle
    logger.info("Background sweep task started (every %ss)", sweeper.interval_seconds)

    yield

    sweep_task_handle.cancel()
    try:
        await sweep_task_handle
    except asyncio.CancelledError:
        logger.info("Background sweep task stopped")


app = FastAPI(
    title="Relay",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(auth_routes.router)
app.include_router(api_routes.router)
