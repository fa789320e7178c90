"""Observability: structured logging and MLflow tracing helpers."""

from plannera.observability.logging import get_correlation_id, setup_logging
from plannera.observability.tracing import start_span, trace

__all__ = ["get_correlation_id", "setup_logging", "start_span", "trace"]
