"""
Result type for callers that prefer values over exceptions.

``capture`` runs a client call and returns ``Ok(value)`` or ``Err(...)``
with the error envelope's fields flattened onto it. Local mistakes
(ValidationError, ConfigurationError) are still raised.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar, Union

from .errors import (
    ApiError,
    AuthwareError,
    ConfigurationError,
    RateLimitError,
    UpdateRequiredError,
    ValidationError,
)
from .types import ErrorResponse, ResponseStatus

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful call."""

    value: T


@dataclass(frozen=True)
class Err:
    """A failed call."""

    # Status from the error envelope, None when the API sent no envelope
    code: Optional[Union[ResponseStatus, int]]
    message: str
    trace: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    error: Optional[AuthwareError] = None

    @classmethod
    def from_error(cls, error: AuthwareError) -> "Err":
        envelope: Optional[ErrorResponse] = None
        if isinstance(error, (ApiError, RateLimitError, UpdateRequiredError)):
            envelope = error.error_response
        if envelope is None:
            return cls(code=None, message=error.message, error=error)
        return cls(
            code=envelope.code,
            message=envelope.message or error.message,
            trace=envelope.trace,
            errors=list(envelope.errors or []),
            error=error,
        )


Result = Union[Ok[T], Err]


def capture(fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Result[T]":
    """Call ``fn`` and wrap its outcome."""
    try:
        return Ok(fn(*args, **kwargs))
    except (ValidationError, ConfigurationError):
        raise
    except AuthwareError as e:
        return Err.from_error(e)


async def capture_async(awaitable: Awaitable[T]) -> "Result[T]":
    """Await ``awaitable`` and wrap its outcome."""
    try:
        return Ok(await awaitable)
    except (ValidationError, ConfigurationError):
        raise
    except AuthwareError as e:
        return Err.from_error(e)
