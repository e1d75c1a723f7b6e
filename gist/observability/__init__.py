"""Observability: structured logging, request tracing, metrics.

Provides standardized observability primitives using structlog for logging,
OpenTelemetry for tracing, and Prometheus for metrics.
"""
