"""
Process entry point: connect to MongoDB, serve HTTP, shut down gracefully.

Usage:
    todo-service
    python -m todo_api.server

On SIGINT/SIGTERM uvicorn stops accepting connections and gives in-flight
requests ``SHUTDOWN_GRACE_SECONDS`` to finish before they are cancelled.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from .context import AppContext
from .db import MongoTodoStore
from .errors import StoreError
from .logging_config import setup_logging
from .main import create_app
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

IDLE_TIMEOUT_SECONDS = 60


# PUBLIC_INTERFACE
def build_config(app: FastAPI, settings: Settings) -> uvicorn.Config:
    """Return the uvicorn configuration used to serve ``app``."""
    return uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=IDLE_TIMEOUT_SECONDS,
        timeout_graceful_shutdown=settings.shutdown_grace,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


async def serve(settings: Settings) -> None:
    """
    Connect the store and run the HTTP server until it is asked to exit.

    An unreachable MongoDB is fatal: the error is logged and the process exits
    with status 1 before the listener is opened.
    """
    try:
        store = await MongoTodoStore.connect(settings)
    except StoreError as exc:
        logger.critical("Cannot reach MongoDB: %s", exc)
        raise SystemExit(1) from exc

    app = create_app(AppContext(store=store, settings=settings))
    server = uvicorn.Server(build_config(app, settings))
    logger.info("Server starting on port %s", settings.port)
    try:
        await server.serve()
    finally:
        logger.info("Shutting down server...")
        store.close()


# PUBLIC_INTERFACE
def main(settings: Optional[Settings] = None) -> None:
    """Run the service in the foreground."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        # uvicorn re-raises the captured SIGINT once its shutdown has completed
        pass
    logger.info("Server gracefully stopped")


if __name__ == "__main__":
    main()
