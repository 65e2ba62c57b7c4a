"""Domain errors and their HTTP mapping."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("taskboard")


class TaskboardError(Exception):
    """Base class for errors surfaced to the API boundary."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(TaskboardError):
    """Malformed or missing input, with per-field messages."""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]], detail: str = "The given data was invalid.") -> None:
        super().__init__(detail)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})


class AuthenticationError(TaskboardError):
    """Missing, invalid or revoked token, or wrong password."""

    status_code = 401
    error_code = "invalid_token"


class CredentialsError(AuthenticationError):
    """A password did not verify. The bearer token, if any, is still valid."""

    error_code = "invalid_credentials"


class AuthorizationError(TaskboardError):
    """Authenticated actor does not own the resource."""

    status_code = 403


class NotFoundError(TaskboardError):
    """Resource id does not exist."""

    status_code = 404


def request_errors_to_fields(errors: list[dict]) -> dict[str, list[str]]:
    """Collapse Pydantic error entries into a field -> messages map."""
    fields: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[-1] if loc else "__root__"
        message = error.get("msg", "Invalid value")
        # Pydantic prefixes custom validator messages
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        fields.setdefault(field, []).append(message)
    return fields


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "errors": exc.errors})

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error": exc.error_code},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = request_errors_to_fields(exc.errors())
        logger.info("Rejected %s %s: invalid fields %s", request.method, request.url.path, sorted(fields))
        return JSONResponse(
            status_code=422,
            content={"detail": "The given data was invalid.", "errors": fields},
        )
