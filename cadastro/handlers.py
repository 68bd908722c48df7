"""
Centralized error handlers for FastAPI.

Maps cadastro errors to HTTP responses with an ``{"erro": ...}`` body.
No stack traces or internal details are exposed to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from firebase_admin.exceptions import FirebaseError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from cadastro.errors import INTERNAL_ERROR_MESSAGE, CadastroError

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_500 = 500


def _error_response(status_code: int, body: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return "JSON inválido no corpo da requisição"
    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        name = ".".join(loc) or "corpo"
        if name not in fields:
            fields.append(name)
    return "Dados inválidos: " + ", ".join(fields)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(CadastroError)
    async def handle_cadastro_error(
        request: Request, exc: CadastroError
    ) -> JSONResponse:
        """Handle validation, conflict, not-found and integrity errors."""
        if exc.status_code >= HTTP_500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning(
                "%s %s -> %d: %s",
                request.method,
                request.url.path,
                exc.status_code,
                exc.message,
            )
        return _error_response(exc.status_code, exc.payload())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed JSON or wrongly typed fields are client errors."""
        message = _describe_validation_errors(exc)
        logger.warning("%s %s -> 400: %s", request.method, request.url.path, message)
        return _error_response(HTTP_400, {"erro": message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = "Rota não encontrada" if exc.status_code == HTTP_404 else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"erro": message},
            headers=exc.headers,
        )

    @app.exception_handler(FirebaseError)
    async def handle_firebase_error(
        request: Request, exc: FirebaseError
    ) -> JSONResponse:
        """Store failures surface as generic internal errors."""
        logger.error(
            "Store error on %s %s: %s (%s)",
            request.method,
            request.url.path,
            exc,
            exc.code,
        )
        return _error_response(HTTP_500, {"erro": INTERNAL_ERROR_MESSAGE})


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn unexpected exceptions into a 500 ``{"erro"}`` response.

    Installed inside the CORS middleware so the response still carries the
    CORS headers. Never exposes internals.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(
                "Unexpected error on %s %s: %s",
                request.method,
                request.url.path,
                type(exc).__name__,
            )
            return _error_response(HTTP_500, {"erro": INTERNAL_ERROR_MESSAGE})
