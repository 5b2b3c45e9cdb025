import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)


class ScalelogError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ScalelogError):
    status_code = 400
    message = "Bad Request"


class NotFoundError(ScalelogError):
    status_code = 404
    message = "Not Found"


class StorageError(ScalelogError):
    status_code = 500
    message = "Storage error"


class StoreConnectionError(StorageError):
    """The document store could not be reached or the client could not be built."""

    status_code = 503
    message = "Service Unavailable"


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def scalelog_error_handler(request: Request, exc: ScalelogError):
    return _error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Report the first offending field only; never echo the raw input back.
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "Invalid request"
    log.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return _error_response(400, message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ScalelogError, scalelog_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
