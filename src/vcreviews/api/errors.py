"""Maps domain and gate failures onto the API's error contract.

Every error body carries a machine-readable ``error`` code and a human
``message``. Quota denials are a business outcome with their own code so
clients can route to the upgrade flow; transient failures say they can be
retried.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import DBAPIError

from vcreviews.api.schemas import QuotaStatusResponse
from vcreviews.shared.errors import AuthenticationRequired, QuotaExceeded, TransientFailure

logger = structlog.get_logger(__name__)


def error_response(status_code: int, error: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message, **extra})


def _field_name(loc) -> str:
    # ("body", "ratings", "responsiveness") -> "ratings.responsiveness"
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields: dict[str, list[str]] = {}
    for error in exc.errors():
        fields.setdefault(_field_name(error.get("loc", ())), []).append(error.get("msg", "Invalid value"))
    message = "Invalid request: " + ", ".join(sorted(fields))
    return error_response(400, "validation_error", message, fields=fields)


async def handle_domain_validation(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"request": [str(exc.messages)]}
    fields = {
        to_camel(name): list(errors) if isinstance(errors, list | tuple) else [str(errors)]
        for name, errors in messages.items()
    }
    message = "; ".join(f"{name}: {' '.join(errors)}" for name, errors in fields.items())
    return error_response(400, "validation_error", message, fields=fields)


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, "not_found", str(exc) or "Not found")


async def handle_authentication_required(request: Request, exc: AuthenticationRequired) -> JSONResponse:
    return error_response(401, "authentication_required", exc.message)


async def handle_quota_exceeded(request: Request, exc: QuotaExceeded) -> JSONResponse:
    view_stats = QuotaStatusResponse.from_status(exc.status).model_dump(by_alias=True)
    return error_response(403, "quota_exceeded", exc.message, upgradeUrl=exc.upgrade_url, viewStats=view_stats)


async def handle_transient_failure(request: Request, exc: TransientFailure) -> JSONResponse:
    logger.error("transient_failure", path=request.url.path, operation=exc.operation, error=exc.message)
    return error_response(500, "service_unavailable", "Temporarily unable to complete the request", retryable=True)


async def handle_store_failure(request: Request, exc: DBAPIError) -> JSONResponse:
    logger.error("store_failure", path=request.url.path, error=str(exc.orig) if exc.orig else str(exc))
    return error_response(500, "service_unavailable", "Storage is temporarily unavailable", retryable=True)


def register_error_handlers(app: FastAPI) -> None:
    # Protean's handlers first, then the API contract's handlers on top
    register_exception_handlers(app)

    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(ValidationError, handle_domain_validation)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(AuthenticationRequired, handle_authentication_required)
    app.add_exception_handler(QuotaExceeded, handle_quota_exceeded)
    app.add_exception_handler(TransientFailure, handle_transient_failure)
    app.add_exception_handler(DBAPIError, handle_store_failure)
