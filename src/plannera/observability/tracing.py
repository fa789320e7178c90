"""Thin MLflow tracing helpers used by the ingestion pipeline.

    from plannera.observability.tracing import start_span, trace

    @trace(name="ingest_lep_xml", span_type="CHAIN")
    def ingest(...): ...

    with start_span("parse") as span:
        span.set_inputs({...})
"""

from contextlib import contextmanager

import mlflow


def trace(name: str | None = None, **kwargs):
    """Decorator: wrap a function in an MLflow trace."""
    return mlflow.trace(name=name, **kwargs) if name else mlflow.trace(**kwargs)


@contextmanager
def start_span(name: str = "span", **kwargs):
    """Context manager: open an MLflow span."""
    with mlflow.start_span(name=name, **kwargs) as span:
        yield span


def set_tracking_uri(uri: str) -> None:
    mlflow.set_tracking_uri(uri)


def set_experiment(name: str) -> None:
    mlflow.set_experiment(name)
