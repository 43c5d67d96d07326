"""Span helpers for service operations."""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_tracer = trace.get_tracer("onetime_access")

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

ERROR_CODE_ATTRIBUTE = "onetime_access.error_code"


def traced(operation_name: str) -> Callable[[F], F]:
    """Run an async service method inside a span named ``operation_name``.

    Call arguments are never put on the span; the wrapped operations take
    passwords and session tokens. An exception carrying an ``error_code``
    (wrong password, consumed credential, ...) is a refused request, not a
    fault: the code is recorded as an attribute and the span keeps an unset
    status. Any other exception marks the span as an error.
    """

    def decorator(func: F) -> F:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() expects an async function, got {func!r}")

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with _tracer.start_as_current_span(
                operation_name, record_exception=False, set_status_on_exception=False
            ) as span:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    error_code = getattr(e, "error_code", None)
                    if isinstance(error_code, str):
                        span.set_attribute(ERROR_CODE_ATTRIBUTE, error_code)
                    else:
                        span.record_exception(e)
                        span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                    raise

        return wrapper  # type: ignore[return-value]

    return decorator


def add_span_event(name: str, attributes: dict | None = None) -> None:
    """Add an event to the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})
