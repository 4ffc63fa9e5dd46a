import json
import logging

from computer_poet.utils.observability import create_counter, create_histogram, get_logger
from computer_poet.utils.telemetry import StructuredTelemetry, TelemetryLogger


def test_structured_telemetry_emits_logging_events(caplog):
    telemetry = StructuredTelemetry()
    listener = TelemetryLogger()
    telemetry.add_listener(listener)

    caplog.set_level(logging.INFO, logger="computer_poet.utils.telemetry")

    telemetry.start_trace("test-trace")
    with telemetry.timer("phase"):
        pass
    telemetry.increment("poem.completed")
    telemetry.annotate("result.lines", 4)

    messages = [record.message for record in caplog.records]
    assert any("Telemetry trace_started: test-trace" in message for message in messages)
    assert any("Telemetry timer_started: phase" in message for message in messages)
    assert any("Telemetry timing: phase" in message for message in messages)
    assert any("Telemetry counter: poem.completed" in message for message in messages)
    assert any("Telemetry metadata: result.lines" in message for message in messages)


def test_snapshot_aggregates_timings():
    ticks = iter([0.0, 1.0, 1.5, 2.0, 4.0])
    telemetry = StructuredTelemetry(time_fn=lambda: next(ticks))

    telemetry.start_trace("generate_poem")
    with telemetry.timer("render") as meta:
        meta["lines"] = 2
    with telemetry.timer("render"):
        pass

    snapshot = telemetry.snapshot()
    assert snapshot["timings"]["render"]["count"] == 2
    assert snapshot["timings"]["render"]["total"] == 2.5
    assert snapshot["events"][0]["metadata"] == {"lines": 2}
    assert telemetry.latest_snapshot()["timings"]["render"]["max"] == 2.0


def test_start_trace_resets_state():
    telemetry = StructuredTelemetry()
    telemetry.start_trace("first")
    telemetry.increment("poem.invoked")
    second_id = telemetry.start_trace("second")

    snapshot = telemetry.snapshot()
    assert snapshot["trace_id"] == second_id
    assert snapshot["counters"] == {}
    assert snapshot["name"] == "second"


def test_broken_listener_does_not_interrupt():
    seen = []

    def broken(event_type, payload):
        raise RuntimeError("boom")

    telemetry = StructuredTelemetry(listeners=[broken, lambda kind, payload: seen.append(kind)])
    telemetry.increment("poem.invoked")

    assert seen == ["counter"]
    telemetry.remove_listener(broken)


def test_logger_binds_context_as_json(caplog):
    caplog.set_level(logging.INFO, logger="computer_poet.tests")
    logger = get_logger("computer_poet.tests").bind(component="unit")

    logger.info("Word chosen", context={"word": "月亮"})

    message = caplog.records[-1].message
    text, payload = message.split(" | ", 1)
    assert text == "Word chosen"
    assert json.loads(payload) == {"component": "unit", "word": "月亮"}


def test_metric_handles_tolerate_duplicate_registration():
    first = create_counter("poet_test_events_total", "Events seen by the tests.", label_names=("kind",))
    second = create_counter("poet_test_events_total", "Events seen by the tests.", label_names=("kind",))
    first.labels(kind="a").inc()
    second.labels(kind="b").inc(2)

    histogram = create_histogram("poet_test_duration_seconds", "Durations seen by the tests.")
    with histogram.time():
        pass
    histogram.observe(0.5)
