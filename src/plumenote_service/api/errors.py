"""RFC 7807 problem details for HTTP errors."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models.requests import ProblemDetail

ERROR_TYPE_BASE = "https://plumenote.app/errors"

_KINDS = {
    400: ("validation", "Validation Error"),
    401: ("unauthorized", "Unauthorized"),
    403: ("forbidden", "Forbidden"),
    404: ("not-found", "Not Found"),
    422: ("validation", "Validation Error"),
    500: ("internal", "Internal Server Error"),
}


def problem_detail(status: int, detail: str) -> ProblemDetail:
    kind, title = _KINDS.get(status, (str(status), "Error"))
    return ProblemDetail(type=f"{ERROR_TYPE_BASE}/{kind}", title=title, status=status, detail=detail)


def _problem_response(status: int, detail: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=problem_detail(status, detail).model_dump(),
        headers=headers,
        media_type="application/problem+json",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException as a problem details body."""
    return _problem_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as a 422 problem details body.

    Each error becomes ``location: message``, joined with ``; ``.
    """
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return _problem_response(422, "; ".join(messages) or "Invalid request")
