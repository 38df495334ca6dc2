"""Training listener interface.

The event bus calls one of these hooks per training event so observers can be
swapped or stacked without changing the trainer.
"""

from __future__ import annotations

from typing import Protocol

from ..trainer import Trainer


class TrainingListener(Protocol):
    def on_training_begin(self, trainer: Trainer) -> None:
        """Called once before the first epoch."""

    def on_training_batch(self, trainer: Trainer) -> None:
        """Called after each training batch has been recorded."""

    def on_validation_batch(self, trainer: Trainer) -> None:
        """Called after each validation batch has been recorded."""

    def on_epoch(self, trainer: Trainer) -> None:
        """Called at the end of every epoch."""

    def on_training_end(self, trainer: Trainer) -> None:
        """Called once after the last epoch."""


class TrainingListenerAdapter:
    """TrainingListener with no-op hooks; subclasses override what they need."""

    def on_training_begin(self, trainer: Trainer) -> None:
        pass

    def on_training_batch(self, trainer: Trainer) -> None:
        pass

    def on_validation_batch(self, trainer: Trainer) -> None:
        pass

    def on_epoch(self, trainer: Trainer) -> None:
        pass

    def on_training_end(self, trainer: Trainer) -> None:
        pass
