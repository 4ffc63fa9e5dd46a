"""Per-generation telemetry: timings, counters and metadata for one poem."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from copy import deepcopy
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .observability import get_logger

TelemetryListener = Callable[[str, Dict[str, Any]], None]


class StructuredTelemetry:
    """Collects the events of the current trace and keeps the last snapshot.

    A trace covers one poem request. ``snapshot`` returns the live state while
    ``latest_snapshot`` is safe to read from another thread (the Gradio UI
    polls it while a poem is being written).
    """

    def __init__(
        self,
        time_fn: Optional[Callable[[], float]] = None,
        *,
        max_events: int = 128,
        listeners: Optional[Iterable[TelemetryListener]] = None,
    ) -> None:
        self._time_fn = time_fn or time.perf_counter
        self._max_events = max(1, int(max_events))
        self._lock = threading.RLock()
        self._listeners: List[TelemetryListener] = list(listeners or [])
        self._trace_id = 0
        self._latest: Dict[str, Any] = {}
        self._clear()

    def _clear(self) -> None:
        self._trace_name: Optional[str] = None
        self._timings: Dict[str, Dict[str, float]] = {}
        self._counters: Dict[str, float] = {}
        self._events: List[Dict[str, Any]] = []
        self._metadata: Dict[str, Any] = {}

    def _state(self) -> Dict[str, Any]:
        return {
            "trace_id": self._trace_id,
            "name": self._trace_name,
            "timings": {key: dict(value) for key, value in self._timings.items()},
            "counters": dict(self._counters),
            "events": [dict(event) for event in self._events],
            "metadata": dict(self._metadata),
        }

    def _publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self._latest = deepcopy(self._state())
            listeners = tuple(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, dict(payload))
            except Exception:
                # A broken listener must not abort poem generation.
                continue

    def now(self) -> float:
        return float(self._time_fn())

    def start_trace(self, name: str) -> int:
        """Discard the previous trace and start recording ``name``."""

        with self._lock:
            self._trace_id += 1
            self._clear()
            self._trace_name = name
            self._metadata["trace_name"] = name
            self._metadata["start_time"] = self.now()
            trace_id = self._trace_id
        self._publish("trace_started", {"trace_id": trace_id, "name": name})
        return trace_id

    def record_timing(
        self,
        name: str,
        duration: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        duration = max(0.0, float(duration))
        details = dict(metadata or {})
        with self._lock:
            bucket = self._timings.setdefault(
                name, {"count": 0, "total": 0.0, "min": duration, "max": duration}
            )
            bucket["count"] += 1
            bucket["total"] += duration
            bucket["min"] = min(bucket["min"], duration)
            bucket["max"] = max(bucket["max"], duration)
            bucket["avg"] = bucket["total"] / bucket["count"]

            event: Dict[str, Any] = {"name": name, "duration": duration}
            if details:
                event["metadata"] = details
            self._events.append(event)
            del self._events[: -self._max_events]
        self._publish("timing", {"name": name, "duration": duration, "metadata": details})

    @contextmanager
    def timer(
        self,
        name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Time the enclosed block; the yielded dict becomes event metadata."""

        payload: Dict[str, Any] = dict(metadata or {})
        start = self.now()
        self._publish("timer_started", {"name": name, "metadata": dict(payload)})
        try:
            yield payload
        finally:
            self.record_timing(name, self.now() - start, payload)

    def increment(self, name: str, amount: float = 1.0) -> None:
        value = float(amount)
        with self._lock:
            self._counters[name] = self._counters.get(name, 0.0) + value
            current = self._counters[name]
        self._publish("counter", {"name": name, "delta": value, "value": current})

    def annotate(self, key: str, value: Any) -> None:
        with self._lock:
            self._metadata[key] = value
        self._publish("metadata", {"key": key, "value": value})

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return self._state()

    def latest_snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return deepcopy(self._latest)

    def add_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry is not listener]


class TelemetryLogger:
    """Listener that writes telemetry events to the project logger."""

    def __init__(
        self,
        *,
        logger: Optional[logging.LoggerAdapter] = None,
        level: int = logging.INFO,
        level_map: Optional[Dict[str, int]] = None,
    ) -> None:
        self._logger = logger or get_logger(__name__).bind(component="telemetry")
        self._default_level = level
        self._level_map = dict(level_map or {})

    def __call__(self, event_type: str, payload: Dict[str, Any]) -> None:
        level = self._level_map.get(event_type, self._default_level)
        if not self._logger.isEnabledFor(level):
            return

        context = {"telemetry.event": event_type}
        context.update({str(key): value for key, value in payload.items()})
        name = payload.get("name") or payload.get("key") or payload.get("trace_id") or "event"
        self._logger.log(level, f"Telemetry {event_type}: {name}", context=context)


__all__ = ["StructuredTelemetry", "TelemetryLogger", "TelemetryListener"]
