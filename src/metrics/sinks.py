"""Metric sinks (storage backends for exported series)."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import duckdb

from .models import Metric


class MetricsSink(Protocol):
    """A synchronous sink for exported metrics.

    Recording never touches a sink; sinks only see metrics when a recorder is
    explicitly exported (typically once, when training ends).
    """

    def write_many(self, metrics: Iterable[Metric]) -> None:
        """Persist a batch of metrics."""

    def close(self) -> None:
        """Close any underlying resources."""


class InMemoryMetricsSink:
    """In-memory sink for tests and local debugging."""

    def __init__(self) -> None:
        """Create an empty in-memory sink."""
        self._lock = threading.Lock()
        self._metrics: list[Metric] = []
        self.closed = False

    def write_many(self, metrics: Iterable[Metric]) -> None:
        """Append metrics to the in-memory list (thread-safe)."""
        with self._lock:
            self._metrics.extend(metrics)

    def close(self) -> None:
        """Mark the sink closed; written metrics stay readable via `snapshot()`."""
        self.closed = True

    def snapshot(self) -> Sequence[Metric]:
        """Return a point-in-time copy of all written metrics."""
        with self._lock:
            return list(self._metrics)


_BIGINT_MIN = -(2**63)
_BIGINT_MAX = 2**63 - 1


def _int_value(value: int | float) -> int | None:
    """Exact copy of integer values for the `int_value` column (`value` is a lossy double)."""
    if isinstance(value, int) and _BIGINT_MIN <= value <= _BIGINT_MAX:
        return value
    return None


@dataclass(frozen=True)
class DuckDBOptions:
    path: Path
    table: str = "training_metrics"


class DuckDBMetricsSink:
    """DuckDB sink for durable local persistence of a run's metrics."""

    def __init__(self, *, path: str | Path, table: str = "training_metrics") -> None:
        """Create (or open) a DuckDB-backed sink at the given path."""
        self._opts = DuckDBOptions(path=Path(path), table=table)
        self._lock = threading.Lock()
        self._conn = duckdb.connect(str(self._opts.path))
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        """Create the backing table if it does not exist yet."""
        create_sql = f"""
        create table if not exists {self._opts.table} (
          recorded_at timestamptz not null,
          name varchar not null,
          value double not null,
          int_value bigint,
          unit varchar
        )
        """
        with self._lock:
            self._conn.execute(create_sql)

    def write_many(self, metrics: Iterable[Metric]) -> None:
        """Insert metrics into DuckDB in a single batch."""
        rows = [[m.timestamp, m.name, float(m.value), _int_value(m.value), m.unit] for m in metrics]
        if not rows:
            return
        insert_sql = f"""
        insert into {self._opts.table}
        (recorded_at, name, value, int_value, unit)
        values (?, ?, ?, ?, ?)
        """
        with self._lock:
            self._conn.executemany(insert_sql, rows)

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        with self._lock:
            self._conn.close()
