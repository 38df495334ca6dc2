"""Listener that reports training progress through progress bars and log lines."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TextIO

from metrics import MetricsRecorder

from ..models import describe_devices
from ..progress import ProgressBar
from ..trainer import Evaluator, Trainer
from .base import TrainingListenerAdapter

_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000

# (series, divisor, unit label) reported at training end, in this order.
_LATENCY_SUMMARY: tuple[tuple[str, int, str], ...] = (
    ("train", _NS_PER_MS, "ms"),
    ("forward", _NS_PER_MS, "ms"),
    ("training-metrics", _NS_PER_MS, "ms"),
    ("backward", _NS_PER_MS, "ms"),
    ("step", _NS_PER_MS, "ms"),
    ("epoch", _NS_PER_S, "s"),
)


def _evaluators_status(metrics: MetricsRecorder, evaluators: Sequence[Evaluator], prefix: str) -> str:
    """Format `name: value` pairs from the latest `<prefix><name>` of each evaluator."""
    # .2f keeps the status short enough to stay on one progress bar line
    return ", ".join(f"{e.name}: {float(metrics.latest(prefix + e.name)):.2f}" for e in evaluators)


class LoggingTrainingListener(TrainingListenerAdapter):
    """Logs the progress of each training batch and epoch.

    Batches advance the "Training" / "Validating" progress bars; epochs and the
    end of training are summarized as log lines on the injected logger.
    """

    def __init__(
        self,
        batch_size: int,
        train_data_size: int,
        validate_data_size: int,
        *,
        logger: logging.Logger | None = None,
        progress_bar: bool = True,
        stream: TextIO | None = None,
    ) -> None:
        """Create a listener.

        Args:
            batch_size: Number of items per training batch (used for speed).
            train_data_size: Number of training batches per epoch.
            validate_data_size: Number of validation batches per epoch.
            logger: Destination for log lines; defaults to this module's logger.
            progress_bar: Render progress bars; when False only log lines are produced.
            stream: Output stream for progress bars (tqdm defaults to stderr).
        """
        self.batch_size = batch_size
        self.train_data_size = train_data_size
        self.validate_data_size = validate_data_size
        self._logger = logger or logging.getLogger(__name__)

        self.num_epochs = 0
        self.training_progress = 0
        self.validate_progress = 0

        self.training_bar = ProgressBar("Training", train_data_size, enabled=progress_bar, stream=stream)
        self.validate_bar = ProgressBar("Validating", validate_data_size, enabled=progress_bar, stream=stream)

    def on_training_begin(self, trainer: Trainer) -> None:
        self._logger.info("Running %s on: %s.", type(self).__name__, describe_devices(trainer.devices))

        init = time.perf_counter_ns()
        engine = trainer.engine
        loaded = time.perf_counter_ns()
        self._logger.info(
            "Load %s Engine Version %s in %.3f ms.",
            engine.name,
            engine.version,
            (loaded - init) / _NS_PER_MS,
        )

    def on_training_batch(self, trainer: Trainer) -> None:
        self.training_bar.update(self.training_progress, self.training_status(trainer))
        self.training_progress += 1

    def on_validation_batch(self, trainer: Trainer) -> None:
        self.validate_bar.update(self.validate_progress)
        self.validate_progress += 1

    def on_epoch(self, trainer: Trainer) -> None:
        metrics = trainer.metrics
        self._logger.info("Epoch %d finished.", self.num_epochs)
        self._logger.info("Train: %s", _evaluators_status(metrics, trainer.training_evaluators, "train_"))
        if metrics.has_metric("validate_" + trainer.loss.name):
            self._logger.info(
                "Validate: %s", _evaluators_status(metrics, trainer.validation_evaluators, "validate_")
            )
        else:
            self._logger.info("validation has not been run.")

        self.num_epochs += 1
        self.training_progress = 0
        self.validate_progress = 0
        self.training_bar.reset()
        self.validate_bar.reset()

    def on_training_end(self, trainer: Trainer) -> None:
        metrics = trainer.metrics
        self.training_bar.close()
        self.validate_bar.close()

        self._logger.info("Training: %d batches", self.train_data_size)
        self._logger.info("Validation: %d batches", self.validate_data_size)

        for name, divisor, unit in _LATENCY_SUMMARY:
            if not metrics.has_metric(name):
                # e.g. no "train" timing when only one iteration ran
                self._logger.debug("No %s metrics recorded; skipping latency summary.", name)
                continue
            p50 = metrics.percentile(name, 50) / divisor
            p90 = metrics.percentile(name, 90) / divisor
            self._logger.info("%s P50: %.3f %s, P90: %.3f %s", name, p50, unit, p90, unit)

    def training_status(self, trainer: Trainer) -> str:
        """Status suffix for the training bar: evaluator values plus throughput."""
        metrics = trainer.metrics
        status = _evaluators_status(metrics, trainer.training_evaluators, "train_")
        if metrics.has_metric("train"):
            batch_time_s = metrics.latest("train") / _NS_PER_S
            if batch_time_s > 0:
                status += f", speed: {self.batch_size / batch_time_s:.2f} images/sec"
        return status
