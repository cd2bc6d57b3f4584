import pytest

from rendezvous.telemetry import MemoryReporter, TelemetryContext

pytestmark = pytest.mark.unit


def test_disabled_context_is_a_shared_noop():
    reporter = MemoryReporter()
    ctx = TelemetryContext(reporter, enabled=False)

    with ctx("outer"):
        ctx.count("events")

    assert ctx is TelemetryContext(enabled=False)
    assert reporter.timings == {}
    assert reporter.metrics == {}


def test_enabled_without_reporters_stays_noop():
    assert TelemetryContext(enabled=True) is TelemetryContext(enabled=False)


def test_env_toggle_enables_telemetry(monkeypatch):
    reporter = MemoryReporter()
    monkeypatch.setenv("RENDEZVOUS_TELEMETRY", "1")

    ctx = TelemetryContext(reporter)
    with ctx("stage"):
        pass

    assert "stage" in reporter.timings


def test_nested_scopes_and_counters():
    reporter = MemoryReporter()
    ctx = TelemetryContext(reporter, enabled=True)

    with ctx("pipeline"), ctx("stage", stage="SolverStage"):
        ctx.count("defect")

    assert set(reporter.timings) == {"pipeline", "pipeline.stage"}
    (_, metadata), = reporter.timings["pipeline.stage"]
    assert metadata["stage"] == "SolverStage"
    assert metadata["parent_scope"] == "pipeline"
    (value, counter_meta), = reporter.metrics["pipeline.stage.defect"]
    assert value == 1
    assert counter_meta["metric_type"] == "counter"
    assert "pipeline.stage" in reporter.get_report()


def test_failing_reporter_does_not_break_the_scope(caplog):
    class Broken:
        def record_timing(self, scope, duration, **metadata):
            raise RuntimeError("sink offline")

        def record_metric(self, scope, value, **metadata):
            raise RuntimeError("sink offline")

    ctx = TelemetryContext(Broken(), enabled=True)
    with ctx("stage"):
        ctx.metric("size", 3)

    assert "sink offline" in caplog.text


def test_failed_scope_is_flagged():
    reporter = MemoryReporter()
    ctx = TelemetryContext(reporter, enabled=True)

    with pytest.raises(KeyError), ctx("stage"):
        raise KeyError("x")

    (_, metadata), = reporter.timings["stage"]
    assert metadata["failed"] is True
