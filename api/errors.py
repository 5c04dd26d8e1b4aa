"""
Error types of the HTTP layer and their mapping to ``{"error": message}``.

401: AuthenticationError
400: InvalidRequestError, request-model validation, empty documents
500: upstream provider failures, failed ingestion, anything unexpected
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ai_services.exceptions import AIServiceException
from ingest.pipeline import IngestionError, EmptyDocumentError

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(GatewayError):
    status_code = 401


class InvalidRequestError(GatewayError):
    status_code = 400


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(400, _validation_message(exc))

    @app.exception_handler(EmptyDocumentError)
    async def empty_document_handler(request: Request, exc: EmptyDocumentError):
        return error_response(400, str(exc))

    @app.exception_handler(IngestionError)
    async def ingestion_error_handler(request: Request, exc: IngestionError):
        logger.error(f"❌ Ingestion failed: {exc}")
        return error_response(500, str(exc))

    @app.exception_handler(AIServiceException)
    async def ai_service_error_handler(request: Request, exc: AIServiceException):
        logger.error(f"❌ Upstream provider error on {request.url.path}: {exc}")
        return error_response(500, str(exc) or "AI error")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"❌ Unexpected error on {request.url.path}: {exc}", exc_info=True)
        return error_response(500, str(exc) or "Internal error")
