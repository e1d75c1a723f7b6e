"""Configuration model exports.

    from gist.config.models import AgentConfig, StreamingConfig
"""

from gist.config.models.agent import AgentBackend, AgentConfig
from gist.config.models.api import APIConfig
from gist.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from gist.config.models.streaming import StreamingConfig

__all__ = [
    # Agent
    "AgentBackend",
    "AgentConfig",
    # API
    "APIConfig",
    # Observability
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "TracingConfig",
    # Streaming
    "StreamingConfig",
]
