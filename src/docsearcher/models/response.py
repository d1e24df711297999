"""Response envelope — The outcome every backend operation resolves to.

An operation returns exactly one of two variants:

* ``Success`` — the payload (a model, a list of models, or an
  ``Acknowledgement``) rendered with HTTP 200.
* ``Failure`` — a ``ServiceError`` whose ``kind`` decides the HTTP status.

Not-found and validation problems travel as ``Failure`` values, never as
exceptions, so callers see them in the return type.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure taxonomy shared by all backends."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    BACKEND_ERROR = "backend_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def is_client_error(self) -> bool:
        return self.status_code < 500


_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.BACKEND_UNAVAILABLE: 503,
    ErrorKind.BACKEND_ERROR: 500,
}


class ServiceError(BaseModel):
    """A classified failure with a human-readable message."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str


class Acknowledgement(BaseModel):
    """Payload of a successful write."""

    code: int = Field(default=200, description="HTTP status code")
    message: str = Field(default="Ok", description="Acknowledgement message")


class ErrorResponse(BaseModel):
    """Wire shape of a failure."""

    code: int = Field(description="HTTP status code")
    message: str = Field(description="Error message")


class Success(BaseModel, Generic[T]):
    """Successful outcome carrying the operation payload."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: T

    @property
    def status_code(self) -> int:
        return 200

    @property
    def is_success(self) -> bool:
        return True


class Failure(BaseModel):
    """Failed outcome carrying a classified error."""

    model_config = ConfigDict(frozen=True)

    error: ServiceError

    @property
    def status_code(self) -> int:
        return self.error.kind.status_code

    @property
    def is_success(self) -> bool:
        return False

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.status_code, message=self.error.message)


Outcome = Union[Success[T], Failure]


def ok(value: Any) -> Success[Any]:
    return Success(value=value)


def acknowledged(message: str = "Ok") -> Success[Acknowledgement]:
    return Success(value=Acknowledgement(message=message))


def fail(kind: ErrorKind, message: str) -> Failure:
    return Failure(error=ServiceError(kind=kind, message=message))


def not_found(message: str) -> Failure:
    return fail(ErrorKind.NOT_FOUND, message)


def invalid(message: str) -> Failure:
    return fail(ErrorKind.VALIDATION, message)
