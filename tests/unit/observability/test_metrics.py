"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from gist.observability.metrics import (
    AGENT_EVENTS_RELAYED,
    AGENT_RUNS_STARTED,
    AGENT_SOURCE_ERRORS,
    MALFORMED_FRAMES,
    PERSISTENCE_FAILURES,
    RUN_DURATION,
    RUN_OUTCOMES,
)


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestCounters:
    """Tests for counters with labels."""

    def test_runs_started(self) -> None:
        before = sample("gist_agent_runs_started_total", {"backend": "scripted"})
        AGENT_RUNS_STARTED.labels(backend="scripted").inc()
        assert sample("gist_agent_runs_started_total", {"backend": "scripted"}) == before + 1

    def test_events_relayed(self) -> None:
        before = sample("gist_agent_events_relayed_total", {"event_type": "text"})
        AGENT_EVENTS_RELAYED.labels(event_type="text").inc(3)
        assert sample("gist_agent_events_relayed_total", {"event_type": "text"}) == before + 3

    def test_source_errors(self) -> None:
        labels = {"backend": "claude", "error_type": "RuntimeError"}
        before = sample("gist_agent_source_errors_total", labels)
        AGENT_SOURCE_ERRORS.labels(**labels).inc()
        assert sample("gist_agent_source_errors_total", labels) == before + 1

    def test_run_outcomes(self) -> None:
        before = sample("gist_run_outcomes_total", {"outcome": "completed"})
        RUN_OUTCOMES.labels(outcome="completed").inc()
        assert sample("gist_run_outcomes_total", {"outcome": "completed"}) == before + 1

    def test_malformed_frames(self) -> None:
        before = sample("gist_malformed_frames_total")
        MALFORMED_FRAMES.inc()
        assert sample("gist_malformed_frames_total") == before + 1

    def test_persistence_failures(self) -> None:
        labels = {"operation": "patch_turn"}
        before = sample("gist_persistence_failures_total", labels)
        PERSISTENCE_FAILURES.labels(**labels).inc()
        assert sample("gist_persistence_failures_total", labels) == before + 1


class TestRunDuration:
    """Tests for the run duration histogram."""

    def test_observe(self) -> None:
        labels = {"outcome": "cancelled"}
        before = sample("gist_run_duration_seconds_count", labels)
        RUN_DURATION.labels(**labels).observe(1.5)
        assert sample("gist_run_duration_seconds_count", labels) == before + 1
