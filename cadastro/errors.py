"""
Error taxonomy for the cadastro API.

Every error carries the HTTP status it maps to and a client-facing
message; handlers.py turns them into ``{"erro": message}`` bodies.
"""

from __future__ import annotations

from typing import Any


class CadastroError(Exception):
    """Base class for errors raised by the resource handlers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def payload(self) -> dict[str, Any]:
        return {"erro": self.message}


class ValidationError(CadastroError):
    """Missing or invalid request fields."""

    status_code = 400


class ConflictError(CadastroError):
    """An entity with the requested id already exists."""

    status_code = 409


class NotFoundError(CadastroError):
    status_code = 404


class IntegrityError(CadastroError):
    """Delete blocked because dependent records still reference the entity."""

    status_code = 400

    def __init__(self, message: str, clientes_vinculados: int):
        super().__init__(message)
        self.clientes_vinculados = clientes_vinculados

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["clientesVinculados"] = self.clientes_vinculados
        return body


class InternalError(CadastroError):
    status_code = 500


INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"
