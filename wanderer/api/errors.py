"""Map typed domain errors onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wanderer.domain.errors import (
    DomainError,
    DuplicateError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

STATUS_CODES: dict[type[DomainError], int] = {
    ValidationError: 422,
    NotFoundError: 404,
    ForbiddenError: 403,
    InvalidTransitionError: 409,
    DuplicateError: 409,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = next(
        (code for cls, code in STATUS_CODES.items() if isinstance(exc, cls)), 400
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
