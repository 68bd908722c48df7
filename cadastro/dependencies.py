"""
Dependency wiring for the FastAPI app.

The store client is built once by the application factory and kept on
``app.state``; handlers receive it through these dependencies.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request

from cadastro.config import Settings
from cadastro.db import DbClient, FirebaseDbClient, InMemoryDbClient
from cadastro.services import CidadeService, ClienteService

logger = logging.getLogger(__name__)


def build_db_client(settings: Settings) -> DbClient:
    """Return the store client selected by the settings."""
    if settings.use_in_memory_backends or not settings.firebase_database_url:
        logger.warning(
            "Using in-memory store; data is lost when the process exits"
        )
        return InMemoryDbClient()
    return FirebaseDbClient(
        settings.firebase_database_url,
        credentials_path=settings.firebase_credentials,
    )


def get_db_client(request: Request) -> DbClient:
    return request.app.state.db


def get_cliente_service(db: DbClient = Depends(get_db_client)) -> ClienteService:
    return ClienteService(db)


def get_cidade_service(db: DbClient = Depends(get_db_client)) -> CidadeService:
    return CidadeService(db)
