"""
FastAPI app exposing the password-manager broker to a host application.

The host renders password blocks, fires retrieval triggers and shows notices;
this app owns the in-memory session and talks to the password-manager CLI.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI

from .api.settings import router as settings_router
from .api.vault import router as vault_router
from .broker import Broker
from .clipboard import Clipboard
from .config import BrokerConfig
from .logging import get_logger
from .vault.fetcher import CredentialFetcher
from .vault.session import VaultSession

logger = get_logger("main")


def create_app(
    config: Optional[BrokerConfig] = None,
    session: Optional[VaultSession] = None,
    clipboard: Optional[Clipboard] = None,
    fetcher: Optional[CredentialFetcher] = None,
) -> FastAPI:
    """Build the app around a Broker. Collaborators can be injected for tests."""
    broker = Broker(
        config or BrokerConfig(),
        session=session,
        clipboard=clipboard,
        fetcher=fetcher,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting passbridge ({broker.config.password_manager} @ {broker.config.binary_path})")
        yield
        broker.shutdown()
        logger.info("Shutting down, session cleared")

    app = FastAPI(
        title="passbridge",
        description="Clipboard delivery of password-manager secrets",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.broker = broker

    app.include_router(vault_router)
    app.include_router(settings_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "is_unlocked": broker.session.is_unlocked,
            "timestamp": datetime.now().isoformat(),
        }

    return app
