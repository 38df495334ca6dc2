"""Listener that records epoch and batch timings into the trainer's metrics."""

from __future__ import annotations

import time
from collections.abc import Callable

from ..trainer import Trainer
from .base import TrainingListenerAdapter


class TimeMeasureTrainingListener(TrainingListenerAdapter):
    """Records `epoch`, `train` and `validate` durations in nanoseconds.

    Batch timings are the gap between consecutive batch events within an
    epoch, so the first batch of each epoch records no value.
    """

    def __init__(self, *, clock: Callable[[], int] = time.perf_counter_ns) -> None:
        self._clock = clock
        self._epoch_start: int | None = None
        self._train_batch_start: int | None = None
        self._validate_batch_start: int | None = None

    def on_training_begin(self, trainer: Trainer) -> None:
        self._epoch_start = self._clock()

    def on_epoch(self, trainer: Trainer) -> None:
        now = self._clock()
        if self._epoch_start is not None:
            trainer.metrics.record("epoch", now - self._epoch_start, unit="ns")
        self._epoch_start = now
        # batch gaps never span an epoch boundary
        self._train_batch_start = None
        self._validate_batch_start = None

    def on_training_batch(self, trainer: Trainer) -> None:
        now = self._clock()
        if self._train_batch_start is not None:
            trainer.metrics.record("train", now - self._train_batch_start, unit="ns")
        self._train_batch_start = now

    def on_validation_batch(self, trainer: Trainer) -> None:
        now = self._clock()
        if self._validate_batch_start is not None:
            trainer.metrics.record("validate", now - self._validate_batch_start, unit="ns")
        self._validate_batch_start = now
