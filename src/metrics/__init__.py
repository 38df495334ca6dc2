"""Training metrics primitives.

This package provides a small foundation for:
- Recording named numeric observations (timings, evaluator scores) per series.
- Answering latest / percentile / mean queries over a series' full history.
- Exporting a run's metrics to a sink (DuckDB or in-memory).
"""

from .errors import InvalidArgumentError, MetricsError, NotFoundError
from .models import Metric
from .recorder import MetricsRecorder
from .sinks import DuckDBMetricsSink, InMemoryMetricsSink, MetricsSink

__all__ = [
    "DuckDBMetricsSink",
    "InMemoryMetricsSink",
    "InvalidArgumentError",
    "Metric",
    "MetricsError",
    "MetricsRecorder",
    "MetricsSink",
    "NotFoundError",
]
