"""Translates domain errors into JSON responses and tags requests with an id."""

import logging
import uuid

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from vidshare.domain import errors

logger = logging.getLogger(__name__)

# Most specific class first; the first isinstance match wins.
STATUS_BY_ERROR: list[tuple[type[errors.VidShareError], int]] = [
    (errors.FileTooLargeError, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE),
    (errors.ValidationError, status.HTTP_400_BAD_REQUEST),
    (errors.InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (errors.UnauthorizedUploadError, status.HTTP_401_UNAUTHORIZED),
    (errors.ForbiddenError, status.HTTP_403_FORBIDDEN),
    (errors.NotFoundError, status.HTTP_404_NOT_FOUND),
    (errors.DuplicateUsernameError, status.HTTP_409_CONFLICT),
    (errors.DuplicateEmailError, status.HTTP_409_CONFLICT),
    (errors.PoolExhaustedError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (errors.PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (errors.StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(exc: errors.VidShareError) -> int:
    for error_cls, code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: errors.VidShareError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(errors.VidShareError, domain_error_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={
                    "code": "INTERNAL_ERROR",
                    "message": str(exc),
                },
            )


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
