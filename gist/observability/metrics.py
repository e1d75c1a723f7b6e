"""Prometheus metrics for Gist.

Tracks agent runs, the events relayed for them, frame decoding problems,
and best-effort persistence failures.
"""

from prometheus_client import Counter, Histogram

# Server-side relay metrics
AGENT_RUNS_STARTED = Counter(
    "gist_agent_runs_started_total",
    "Total number of agent runs started by the streaming endpoint",
    labelnames=["backend"],
)

AGENT_EVENTS_RELAYED = Counter(
    "gist_agent_events_relayed_total",
    "Total number of agent events written to event streams",
    labelnames=["event_type"],
)

AGENT_SOURCE_ERRORS = Counter(
    "gist_agent_source_errors_total",
    "Agent event sources that raised instead of finishing",
    labelnames=["backend", "error_type"],
)

# Client-side run metrics
RUN_OUTCOMES = Counter(
    "gist_run_outcomes_total",
    "Finished runs by terminal state",
    labelnames=["outcome"],
)

RUN_DURATION = Histogram(
    "gist_run_duration_seconds",
    "Wall-clock duration of a streamed run",
    labelnames=["outcome"],
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0),
)

MALFORMED_FRAMES = Counter(
    "gist_malformed_frames_total",
    "Stream frames dropped because they did not decode to an event",
)

# Persistence metrics
PERSISTENCE_FAILURES = Counter(
    "gist_persistence_failures_total",
    "Durable store calls that failed and were swallowed",
    labelnames=["operation"],
)
