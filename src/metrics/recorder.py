"""Thread-safe recorder for named training metric series.

The trainer appends observations (batch timings, evaluator scores) while
listeners query them for progress lines and end-of-run summaries. Queries run
against the full history of a series; percentiles are recomputed on demand.
"""

from __future__ import annotations

import math
import numbers
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from fractions import Fraction

from pydantic import ValidationError

from .errors import InvalidArgumentError, NotFoundError
from .models import Metric
from .sinks import MetricsSink


def _percentile_index(p: float, n: int) -> int:
    """Index of percentile `p` in a sorted series of length `n`."""
    # exact arithmetic: p / 100 in floats can round below an integer index
    exact = Fraction(p) if isinstance(p, numbers.Rational) else Fraction(float(p))
    return math.floor(exact * (n - 1) / 100)


class MetricsRecorder:
    """Accumulates metrics per series name and answers latest/percentile queries.

    A single lock guards the whole mapping. Reads copy the series under the
    lock and do any sorting afterwards, so a reader never observes a series
    mid-append.
    """

    def __init__(self) -> None:
        """Create an empty recorder."""
        self._lock = threading.Lock()
        # name -> observations in arrival order (dicts keep creation order)
        self._series: dict[str, list[Metric]] = {}

    def record(
        self,
        name: str,
        value: int | float,
        *,
        unit: str | None = None,
        timestamp: datetime | None = None,
    ) -> Metric:
        """Append `value` to the series `name`, creating the series if needed."""
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidArgumentError(f"Metric {name!r} value must be a number. Got: {value!r}")
        # unwrap numpy/torch-style scalars into plain Python numbers
        value = int(value) if isinstance(value, numbers.Integral) else float(value)
        try:
            if timestamp is None:
                metric = Metric(name=name, value=value, unit=unit)
            else:
                metric = Metric(name=name, value=value, unit=unit, timestamp=timestamp)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid metric {name!r}: {exc}") from exc
        self.add_metric(metric)
        return metric

    def add_metric(self, metric: Metric) -> None:
        """Append an already-built metric to its series."""
        with self._lock:
            self._series.setdefault(metric.name, []).append(metric)

    def has_metric(self, name: str) -> bool:
        """Return True if at least one observation exists under `name`."""
        with self._lock:
            return bool(self._series.get(name))

    def get_metric(self, name: str) -> tuple[Metric, ...]:
        """Return every observation recorded under `name`, oldest first."""
        with self._lock:
            series = self._series.get(name)
            if not series:
                raise NotFoundError(name)
            return tuple(series)

    def metric_names(self) -> list[str]:
        """Return all series names in the order they were first recorded."""
        with self._lock:
            return list(self._series)

    def latest(self, name: str) -> int | float:
        """Return the most recently recorded value for `name`."""
        with self._lock:
            series = self._series.get(name)
            if not series:
                raise NotFoundError(name)
            return series[-1].value

    def percentile(self, name: str, p: float) -> int | float:
        """Return the value at percentile `p` (0-100) over the whole series.

        The series is sorted ascending and the element at index
        ``floor(p / 100 * (n - 1))`` is returned, so ``p=0`` gives the minimum
        and ``p=100`` the maximum.
        """
        if isinstance(p, bool) or not isinstance(p, numbers.Real) or not 0 <= p <= 100:
            raise InvalidArgumentError(f"percentile must be within [0, 100]. Got: {p!r}")
        values = sorted(m.value for m in self.get_metric(name))
        return values[_percentile_index(p, len(values))]

    def mean(self, name: str) -> float:
        """Return the arithmetic mean of the series `name`."""
        values = [m.value for m in self.get_metric(name)]
        return math.fsum(values) / len(values)

    def snapshot(self) -> dict[str, tuple[Metric, ...]]:
        """Return a consistent point-in-time copy of every series."""
        with self._lock:
            return {name: tuple(series) for name, series in self._series.items()}

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        """Record the wall-clock duration of the block under `name`, in nanoseconds."""
        start = time.perf_counter_ns()
        try:
            yield
        finally:
            self.record(name, time.perf_counter_ns() - start, unit="ns")

    def export(self, sink: MetricsSink) -> int:
        """Write every recorded metric to `sink`; return how many were written."""
        metrics = [m for series in self.snapshot().values() for m in series]
        sink.write_many(metrics)
        return len(metrics)

    def __len__(self) -> int:
        """Return the number of series with at least one observation."""
        with self._lock:
            return len(self._series)
