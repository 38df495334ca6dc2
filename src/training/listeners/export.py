"""Listener that persists a run's metrics when training ends."""

from __future__ import annotations

import logging

from metrics import MetricsSink

from ..trainer import Trainer
from .base import TrainingListenerAdapter

logger = logging.getLogger(__name__)


class MetricsExportTrainingListener(TrainingListenerAdapter):
    """Exports every recorded metric to `sink` on training end, then closes the sink."""

    def __init__(self, *, sink: MetricsSink) -> None:
        self._sink = sink

    def on_training_end(self, trainer: Trainer) -> None:
        try:
            written = trainer.metrics.export(self._sink)
        finally:
            self._sink.close()
        logger.info("Exported %d metrics.", written)
