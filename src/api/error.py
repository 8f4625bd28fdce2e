"""API error rendering

Every error leaves the API as {"error": {"code", "message"}}. The internal
reason of a use case error is logged, never serialized.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

# HTTP status per use case error code; unknown codes render as 500
ERROR_STATUS_CODES = {
    "DOCUMENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ACCESS_DENIED": status.HTTP_403_FORBIDDEN,
    "IDENTITY_NOT_VERIFIED": status.HTTP_403_FORBIDDEN,
    "ALREADY_ISSUED": status.HTTP_409_CONFLICT,
    "INVALID_DOCUMENT_STATUS": status.HTTP_409_CONFLICT,
    "SEQUENCE_CONFLICT": status.HTTP_409_CONFLICT,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_VERIFICATION_ID": status.HTTP_400_BAD_REQUEST,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
}


class ClientError(Exception):
    """Raised by routes to return a use case error to the caller"""

    def __init__(self, error: Error, status_code: int = None):
        self.error = error
        self.status_code = status_code or ERROR_STATUS_CODES.get(
            error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        super().__init__(error.message)


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    error = exc.error
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {error.code} {error.reason}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(error.code, "An unexpected error occurred"),
        )

    if error.reason:
        logger.info(f"{request.method} {request.url.path}: {error.code} ({error.reason})")
    return JSONResponse(status_code=exc.status_code, content=error_body(error.code, error.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else "Invalid request parameters"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_ERROR", message),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_ERROR", "An unexpected error occurred"),
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
