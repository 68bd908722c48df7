"""
FastAPI application entry point for the cadastro API.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cadastro.config import Settings, get_settings
from cadastro.db import DbClient
from cadastro.dependencies import build_db_client
from cadastro.handlers import UnhandledErrorMiddleware, register_error_handlers
from cadastro.logging_config import configure_logging
from cadastro.routes import router

logger = logging.getLogger(__name__)

__version__ = "1.0.0"


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Unhandled task failures are logged and the server keeps running."""
    logger.error(
        "Unhandled exception in event loop: %s",
        context.get("message"),
        exc_info=context.get("exception"),
    )


def _log_uncaught(exc_type, exc, tb) -> None:
    logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))


def _log_uncaught_thread(args: threading.ExceptHookArgs) -> None:
    logger.critical(
        "Uncaught exception in thread %s",
        args.thread.name if args.thread else "?",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )


def install_excepthooks() -> None:
    """Log uncaught exceptions before the interpreter terminates."""
    sys.excepthook = _log_uncaught
    threading.excepthook = _log_uncaught_thread


def create_app(
    db: Optional[DbClient] = None, settings: Optional[Settings] = None
) -> FastAPI:
    """Build the application around an explicitly provided store client.

    When ``db`` is omitted the client is built from ``settings``.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
        base_url = f"http://localhost:{settings.port}"
        logger.info("API rodando na porta %d", settings.port)
        logger.info("Health check: %s/health", base_url)
        logger.info("Clientes: %s/clientes", base_url)
        logger.info("Cidades: %s/cidades", base_url)
        yield

    app = FastAPI(title="Cadastro API", version=__version__, lifespan=lifespan)
    app.state.db = db if db is not None else build_db_client(settings)

    # Added first so CORSMiddleware wraps it.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app


def main() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level)
    install_excepthooks()
    uvicorn.run(
        "cadastro.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
