"""Domain errors raised by the service layer and their HTTP mapping."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class GuardlineError(Exception):
    """Base class for errors that map to a 4xx response."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(GuardlineError):
    """A referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(GuardlineError):
    """The record was already converted or a unique constraint was hit."""

    status_code = status.HTTP_409_CONFLICT


class ValidationFailedError(GuardlineError):
    """The payload breaks a business rule the schema alone cannot express."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


async def guardline_error_handler(request: Request, exc: GuardlineError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GuardlineError, guardline_error_handler)
