"""Demo entrypoint wiring together the training listeners.

This module intentionally contains a small, end-to-end "smoke test" that:

- Loads configuration from environment.
- Builds a simulated trainer that records synthetic timings and scores.
- Publishes training events to the logging, timing and export listeners.

It is **not** a training loop; no model is executed. It is a convenient
manual harness for checking log output and metric export.
"""

from __future__ import annotations

import logging
import os
import random
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from config import load_config
from metrics import DuckDBMetricsSink, MetricsRecorder
from training.bus import TrainingEventBus
from training.listeners.export import MetricsExportTrainingListener
from training.listeners.logging_listener import LoggingTrainingListener
from training.listeners.time_measure import TimeMeasureTrainingListener
from training.models import (
    Device,
    EngineInfo,
    EpochEnd,
    TrainingBatch,
    TrainingBegin,
    TrainingEnd,
    ValidationBatch,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamedEvaluator:
    name: str


@dataclass
class SimulatedTrainer:
    """Trainer stand-in exposing what listeners read; values are random."""

    metrics: MetricsRecorder = field(default_factory=MetricsRecorder)
    loss: NamedEvaluator = NamedEvaluator("SoftmaxCrossEntropyLoss")
    training_evaluators: Sequence[NamedEvaluator] = ()
    validation_evaluators: Sequence[NamedEvaluator] = ()
    devices: Sequence[Device] = (Device.cpu(),)
    engine: EngineInfo = EngineInfo(name="Simulated", version="0.0.1")

    def __post_init__(self) -> None:
        evaluators = (NamedEvaluator("Accuracy"), self.loss)
        self.training_evaluators = self.training_evaluators or evaluators
        self.validation_evaluators = self.validation_evaluators or evaluators

    def train_batch(self, rng: random.Random, progress: float) -> None:
        """Record one batch worth of phase timings and evaluator scores."""
        for phase, mean_ms in (("forward", 4.0), ("backward", 7.0), ("step", 1.5), ("training-metrics", 0.4)):
            self.metrics.record(phase, int(rng.gauss(mean_ms, mean_ms / 5) * 1_000_000), unit="ns")
        self._record_scores("train_", rng, progress)

    def validate_batch(self, rng: random.Random, progress: float) -> None:
        self._record_scores("validate_", rng, progress)

    def _record_scores(self, prefix: str, rng: random.Random, progress: float) -> None:
        self.metrics.record(prefix + "Accuracy", min(1.0, 0.5 + 0.45 * progress + rng.uniform(-0.02, 0.02)))
        self.metrics.record(prefix + self.loss.name, max(0.0, 2.0 * (1.0 - progress) + rng.uniform(0.0, 0.1)))


def configure_logging(level: int) -> None:
    """Configure root logging for console output."""
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


def run_demo() -> None:
    """Run a simulated multi-epoch training session through the listeners."""
    cfg = load_config()
    configure_logging(cfg.reporting.log_level_value)

    epochs = int(os.getenv("DEMO_EPOCHS", "2"))
    train_batches = int(os.getenv("DEMO_TRAIN_BATCHES", "50"))
    validate_batches = int(os.getenv("DEMO_VALIDATE_BATCHES", "10"))
    batch_size = int(os.getenv("DEMO_BATCH_SIZE", "32"))
    rng = random.Random(int(os.getenv("DEMO_SEED", "0")))

    trainer = SimulatedTrainer()
    bus = TrainingEventBus(
        [
            TimeMeasureTrainingListener(),
            LoggingTrainingListener(
                batch_size,
                train_batches,
                validate_batches,
                progress_bar=cfg.reporting.progress_bar,
            ),
        ]
    )
    if cfg.metrics.db_path is not None:
        sink = DuckDBMetricsSink(path=cfg.metrics.db_path, table=cfg.metrics.table)
        bus.subscribe(MetricsExportTrainingListener(sink=sink))
        logger.info("Exporting metrics to %s", cfg.metrics.db_path)

    bus.publish(TrainingBegin(), trainer)
    total = epochs * train_batches
    for epoch in range(epochs):
        for i in range(train_batches):
            time.sleep(0.001)
            trainer.train_batch(rng, (epoch * train_batches + i + 1) / total)
            bus.publish(TrainingBatch(), trainer)
        for _ in range(validate_batches):
            trainer.validate_batch(rng, (epoch + 1) * train_batches / total)
            bus.publish(ValidationBatch(), trainer)
        bus.publish(EpochEnd(), trainer)
    bus.publish(TrainingEnd(), trainer)


def main() -> None:
    """CLI entrypoint for running the demo with `python src/main.py` or `training-demo`."""
    run_demo()


if __name__ == "__main__":
    main()
