"""Exception-to-HTTP mapping for the MediStock API.

Protean's standard handlers cover validation, missing objects and invalid
states. The handlers here add authentication, authorization, the address
prompt at checkout, optimistic-lock conflicts and a catch-all 500.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from medistock.exceptions import AddressRequiredError, NotAuthenticatedError, NotAuthorizedError

logger = structlog.get_logger(__name__)


def _field_messages(exc: RequestValidationError) -> dict:
    """Pydantic errors regrouped as {field: [messages]}, like Protean validation errors."""
    messages = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field_name = ".".join(location) or "request"
        messages.setdefault(field_name, []).append(error.get("msg", "Invalid value"))
    return messages


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _field_messages(exc)})

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"error": str(exc) or "Not authenticated"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotAuthorizedError)
    async def not_authorized_handler(request: Request, exc: NotAuthorizedError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"error": str(exc) or "Not authorized"})

    @app.exception_handler(AddressRequiredError)
    async def address_required_handler(request: Request, exc: AddressRequiredError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": AddressRequiredError.message, "requiresAddress": True},
        )

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        logger.warning("request.version_conflict", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=409,
            content={"error": "The record was changed by another request, please retry"},
        )

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed", path=request.url.path)
        return JSONResponse(status_code=500, content={"error": "Server error"})
