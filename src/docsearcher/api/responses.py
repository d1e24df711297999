"""Rendering of service outcomes into HTTP responses.

``Success`` becomes status 200 with the JSON payload; ``Failure`` becomes
``{code, message}`` with the status of its error kind.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docsearcher.models.response import ErrorResponse, Failure, Outcome

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation error — malformed request"},
    404: {"model": ErrorResponse, "description": "Requested cluster, bucket or document does not exist"},
    500: {"model": ErrorResponse, "description": "Search engine rejected the operation"},
    503: {"model": ErrorResponse, "description": "Search engine unreachable"},
}


def render(outcome: Outcome[Any]) -> JSONResponse:
    """Render an operation outcome as a JSON response."""
    if isinstance(outcome, Failure):
        return JSONResponse(
            status_code=outcome.status_code,
            content=outcome.to_response().model_dump(),
        )
    return JSONResponse(status_code=outcome.status_code, content=jsonable_encoder(outcome.value))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request-body validation failures as ``{code: 400, message}``."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(code=400, message=f"Invalid request: {details}").model_dump(),
    )
