"""Trainer interface observed by listeners.

Listeners never drive training; they only read from the trainer at event
boundaries. Any object with these attributes can be observed, so listeners
stay independent of the engine actually running the model.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from metrics import MetricsRecorder

from .models import Device, EngineInfo


class Evaluator(Protocol):
    """A named scoring function; its values are recorded as `train_<name>` / `validate_<name>`."""

    @property
    def name(self) -> str: ...


class Trainer(Protocol):
    """Read-only view of a running trainer, as seen from listener hooks."""

    @property
    def metrics(self) -> MetricsRecorder:
        """Recorder the trainer writes timings and evaluator scores into."""

    @property
    def loss(self) -> Evaluator:
        """Training loss; validation is considered run once `validate_<loss>` exists."""

    @property
    def training_evaluators(self) -> Sequence[Evaluator]:
        """Evaluators reported on each training batch and epoch."""

    @property
    def validation_evaluators(self) -> Sequence[Evaluator]:
        """Evaluators reported after each validation pass."""

    @property
    def devices(self) -> Sequence[Device]:
        """Devices training is placed on."""

    @property
    def engine(self) -> EngineInfo:
        """Engine backing the trainer (may be resolved lazily)."""
