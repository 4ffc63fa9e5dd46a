"""Logging, metric and tracing helpers shared by the poet.

Prometheus and OpenTelemetry are declared dependencies, but the helpers probe
for them softly: when either library cannot be imported the returned handles
turn into no-ops and generation carries on unchanged.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Optional


try:  # pragma: no cover - optional dependency probing
    from prometheus_client import Counter as _PromCounter
    from prometheus_client import Histogram as _PromHistogram
except ImportError:  # pragma: no cover - Prometheus not installed
    _PromCounter = None
    _PromHistogram = None

try:  # pragma: no cover - optional dependency probing
    from opentelemetry import trace as _otel_trace
except ImportError:  # pragma: no cover - OpenTelemetry not installed
    _otel_trace = None


_TRACER_NAME = "computer_poet"


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Adapter that appends bound and per-call context as inline JSON."""

    def bind(self, **context: Any) -> "StructuredLoggerAdapter":
        merged = dict(self.extra)
        merged.update(context)
        return StructuredLoggerAdapter(self.logger, merged)

    def process(self, msg: str, kwargs: Dict[str, Any]):
        event_context: Dict[str, Any] = dict(self.extra)
        provided = kwargs.pop("context", None)
        if isinstance(provided, dict):
            event_context.update(provided)
        if event_context:
            # ensure_ascii=False keeps Chinese words readable in the log.
            payload = json.dumps(
                event_context, sort_keys=True, default=str, ensure_ascii=False
            )
            msg = f"{msg} | {payload}"
        return msg, kwargs


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """Return a project logger with optional bound context."""

    return StructuredLoggerAdapter(logging.getLogger(name), context)


class _MetricHandle:
    """Base wrapper giving metrics a ``labels`` passthrough."""

    def __init__(self, impl: Any = None) -> None:
        self._impl = impl

    @property
    def enabled(self) -> bool:
        return self._impl is not None

    def labels(self, **labels: Any):
        impl = getattr(self._impl, "labels", None)
        if impl is None:
            return self.__class__(None)
        return self.__class__(impl(**labels))


class CounterHandle(_MetricHandle):
    """Counter that ignores increments when Prometheus is absent."""

    def inc(self, amount: float = 1.0) -> None:
        if self._impl is not None:
            self._impl.inc(amount)


class HistogramHandle(_MetricHandle):
    """Histogram that ignores observations when Prometheus is absent."""

    def observe(self, value: float) -> None:
        if self._impl is not None:
            self._impl.observe(value)

    @contextmanager
    def time(self) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(time.perf_counter() - start)


def _registered_collector(name: str) -> Any:
    # prometheus_client refuses duplicate names; reuse the registered one.
    from prometheus_client import REGISTRY

    return getattr(REGISTRY, "_names_to_collectors", {}).get(name)


def create_counter(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> CounterHandle:
    """Create a counter that survives when Prometheus is not installed."""

    if _PromCounter is None:
        return CounterHandle()
    try:
        impl = _PromCounter(name, documentation, labelnames=tuple(label_names or ()))
    except ValueError:
        impl = _registered_collector(name)
    return CounterHandle(impl)


def create_histogram(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> HistogramHandle:
    """Create a histogram that no-ops when Prometheus is unavailable."""

    if _PromHistogram is None:
        return HistogramHandle()
    try:
        impl = _PromHistogram(name, documentation, labelnames=tuple(label_names or ()))
    except ValueError:
        impl = _registered_collector(name)
    return HistogramHandle(impl)


@contextmanager
def start_span(name: str, attributes: Optional[Dict[str, Any]] = None):
    """Start an OpenTelemetry span if tracing is available."""

    if _otel_trace is None:
        yield None
        return

    tracer = _otel_trace.get_tracer(_TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        add_span_attributes(span, attributes or {})
        yield span


def add_span_attributes(span: Any, attributes: Dict[str, Any]) -> None:
    """Attach ``attributes`` to ``span`` if tracing is active."""

    if span is None:
        return
    for key, value in attributes.items():
        if isinstance(key, str) and value is not None:
            span.set_attribute(key, value)


def record_exception(span: Any, error: BaseException) -> None:
    """Mark ``span`` as failed with ``error`` when tracing is active."""

    if span is None:
        return
    span.record_exception(error)
    span.set_attribute("error", True)


__all__ = [
    "StructuredLoggerAdapter",
    "get_logger",
    "CounterHandle",
    "HistogramHandle",
    "create_counter",
    "create_histogram",
    "start_span",
    "add_span_attributes",
    "record_exception",
]
