import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import (
    AlreadyReviewedError,
    AuthenticationRequired,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger("whitelist.api")


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _respond(request: Request, status_code: int, payload: dict) -> JSONResponse:
    request_id = _get_request_id(request)
    if request_id:
        payload["request_id"] = request_id
    response = JSONResponse(status_code=status_code, content=payload)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


def register_exception_handlers(app: FastAPI) -> None:
    """Translate lifecycle errors into HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return _respond(
            request,
            400,
            {
                "detail": "Validation failed",
                "errors": [{"field": e.field, "message": e.message} for e in exc.errors],
            },
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        status_code = 401 if isinstance(exc, AuthenticationRequired) else 403
        return _respond(request, status_code, {"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _respond(request, 404, {"detail": str(exc)})

    @app.exception_handler(AlreadyReviewedError)
    async def already_reviewed_handler(request: Request, exc: AlreadyReviewedError):
        application = exc.application
        return _respond(
            request,
            409,
            {
                "detail": str(exc),
                "status": application.status.value,
                "reviewedBy": application.reviewed_by,
                "reviewedAt": (
                    application.reviewed_at.isoformat() if application.reviewed_at else None
                ),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _respond(request, exc.status_code, {"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _respond(request, 422, {"detail": jsonable_errors(exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_error request_id=%s", _get_request_id(request), exc_info=exc
        )
        return _respond(request, 500, {"detail": "Internal Server Error"})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ``ctx`` may hold exception instances which JSON cannot encode.
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
