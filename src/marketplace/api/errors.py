"""Exception handlers translating domain failures into ``{message, errors}`` bodies.

Validation failures (Protean or request parsing) answer 400 with a field-error
list; access-control failures answer 401/403; lookups 404; anything else 500.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.exceptions import MarketplaceError
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def field_errors_from_protean(messages):
    """Flatten Protean's ``{field: [message, ...]}`` into ``[{field, message}]``."""
    errors = []
    if isinstance(messages, dict):
        for field, field_messages in messages.items():
            if isinstance(field_messages, (list, tuple)):
                errors.extend({"field": field, "message": str(message)} for message in field_messages)
            else:
                errors.append({"field": field, "message": str(field_messages)})
    elif messages:
        errors.append({"field": "", "message": str(messages)})
    return errors


def field_errors_from_request(exc):
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return errors


def _validation_response(errors):
    message = errors[0]["message"] if len(errors) == 1 else "Validation failed"
    return JSONResponse(status_code=400, content={"message": message, "errors": errors})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _protean_validation(request: Request, exc: ValidationError):
        return _validation_response(field_errors_from_protean(exc.messages))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return _validation_response(field_errors_from_request(exc))

    @app.exception_handler(MarketplaceError)
    async def _marketplace_error(request: Request, exc: MarketplaceError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(ObjectNotFoundError)
    async def _object_not_found(request: Request, exc: ObjectNotFoundError):
        return JSONResponse(status_code=404, content={"message": "Resource not found"})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 and exc.detail == "Not Found" else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"message": message})

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Server error"})
