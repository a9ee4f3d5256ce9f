"""Span helpers for service methods and pipeline state events."""

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

P = ParamSpec("P")
R = TypeVar("R")

# Keyword arguments copied onto spans. Secrets, invite codes and emails never are.
RECORDED_ARGUMENTS = frozenset(
    {"token_id", "invite_code_id", "validity_days", "limit", "offset", "range"}
)


def traced(span_name: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Run an async service method inside a span.

    Allowlisted keyword arguments become arg.<name> attributes. A raised
    exception marks the span as failed with the exception type only, so
    backend messages do not leave the process through the exporter.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() needs a coroutine function, got {func.__qualname__}")
        tracer = trace.get_tracer(func.__module__)

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                for key, value in kwargs.items():
                    if key in RECORDED_ARGUMENTS and value is not None:
                        span.set_attribute(f"arg.{key}", str(value))
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Attach attributes to the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)


def add_span_event(name: str, attributes: dict[str, Any] | None = None) -> None:
    """Record a pipeline state transition (or any named event) on the current span."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})
