"""FastAPI application entry point for the Timelock Vault.

Lifecycle:
    1. Startup: Initialize logging, log the Chain's starting height.
    2. Running: Serve the REST API on a single Uvicorn process.
    3. Shutdown: Log the final height and transaction count.

The Chain lives on ``app.state.chain`` for the lifetime of the process; every
vault it holds is kept in memory until shutdown.

Run with:
    uv run uvicorn timelock_vault.main:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from timelock_vault import __version__
from timelock_vault.config import Settings, get_settings
from timelock_vault.ledger.chain import Chain
from timelock_vault.logging_config import get_logger, setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    settings: Settings = app.state.settings

    setup_logging(
        log_level=settings.app_log_level,
        json_logs=not settings.is_development,
    )
    logger = get_logger(__name__)
    chain: Chain = app.state.chain
    logger.info(
        "app.starting",
        env=settings.app_env,
        debug=settings.app_debug,
        height=chain.current_height(),
        auto_mine=settings.chain_auto_mine,
    )
    logger.info("app.started", host=settings.app_host, port=settings.app_port)

    yield

    logger.info(
        "app.stopped",
        height=chain.current_height(),
        tx_count=len(chain.receipts),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory — creates and configures the FastAPI app."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Timelock Vault",
        description=(
            "Single-use, two-party time-locked escrow for native value or tokens."
        ),
        version=__version__,
        lifespan=lifespan,
        debug=settings.app_debug,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.chain = Chain.from_settings(settings)

    # --- Middleware ---
    from timelock_vault.api.middleware import setup_middleware

    setup_middleware(app)

    # --- REST API Routes ---
    from timelock_vault.api.routes.chain import router as chain_router
    from timelock_vault.api.routes.health import router as health_router
    from timelock_vault.api.routes.vaults import router as vaults_router

    app.include_router(health_router)
    app.include_router(vaults_router)
    app.include_router(chain_router)

    return app


# The app instance used by Uvicorn
app = create_app()
