from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger("pagewalk")


@dataclass(frozen=True)
class QueryEvent:
    """A single round trip to a collection source."""

    operation: str
    collection: str
    filter: dict[str, Any] | None = None
    duration_ms: float = 0.0
    result_count: int | None = None
    source: str = ""
    failed: bool = False


class _ObservabilityState:
    """Global mutable state for observability."""

    def __init__(self) -> None:
        self.enabled: bool = False
        self.slow_query_threshold_ms: float = 100.0
        self.listeners: list[Callable[[QueryEvent], Any]] = []
        self.events: list[QueryEvent] = []
        self.capture_events: bool = False


_state = _ObservabilityState()


def enable_tracing(slow_query_ms: float = 100.0, capture_events: bool = False) -> None:
    """Enable fetch tracing and observability."""
    _state.enabled = True
    _state.slow_query_threshold_ms = slow_query_ms
    _state.capture_events = capture_events


def disable_tracing() -> None:
    """Disable tracing and clear all state."""
    _state.enabled = False
    _state.slow_query_threshold_ms = 100.0
    _state.listeners.clear()
    _state.events.clear()
    _state.capture_events = False


def get_events() -> list[QueryEvent]:
    return list(_state.events)


def clear_events() -> None:
    _state.events.clear()


def add_listener(callback: Callable[[QueryEvent], Any]) -> None:
    """Register a listener that receives a QueryEvent after each round trip."""
    _state.listeners.append(callback)


def remove_listener(callback: Callable[[QueryEvent], Any]) -> None:
    _state.listeners.remove(callback)


def emit_event(event: QueryEvent) -> None:
    """Store the event, warn when it was slow, and notify listeners."""
    if not _state.enabled:
        return

    if _state.capture_events:
        _state.events.append(event)

    if event.duration_ms > _state.slow_query_threshold_ms:
        logger.warning(
            "Slow fetch: %s on %s took %.1fms (threshold: %.1fms)",
            event.operation,
            event.collection,
            event.duration_ms,
            _state.slow_query_threshold_ms,
        )

    for listener in _state.listeners:
        listener(event)

    _try_emit_otel_span(event)


def _try_emit_otel_span(event: QueryEvent) -> None:
    """Emit an OpenTelemetry span when the optional dependency is installed."""
    try:
        from opentelemetry import trace
    except ImportError:
        return

    tracer = trace.get_tracer("pagewalk")
    with tracer.start_as_current_span(f"pagewalk.{event.operation}") as span:
        span.set_attribute("db.collection", event.collection)
        span.set_attribute("db.operation", event.operation)
        span.set_attribute("pagewalk.source", event.source)
        if event.result_count is not None:
            span.set_attribute("pagewalk.result_count", event.result_count)
        if event.duration_ms:
            span.set_attribute("db.duration_ms", event.duration_ms)


@asynccontextmanager
async def track_query(operation: str, collection: str, source: str = "", filter: dict | None = None):
    """Time a source round trip and emit a QueryEvent.

    Callers record ``ctx["result_count"]`` before leaving the block.
    """
    if not _state.enabled:
        yield {"result_count": None}
        return

    start = time.perf_counter()
    ctx: dict[str, Any] = {"result_count": None}
    failed = False
    try:
        yield ctx
    except BaseException:
        failed = True
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        emit_event(
            QueryEvent(
                operation=operation,
                collection=collection,
                filter=filter,
                duration_ms=duration_ms,
                result_count=ctx.get("result_count"),
                source=source,
                failed=failed,
            )
        )
