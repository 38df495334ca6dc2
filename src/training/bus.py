"""In-process training event bus.

The trainer publishes a tagged `TrainingEvent` at each lifecycle point and the
bus fans it out to every subscribed listener:

- training_begin  -> on_training_begin
- training_batch  -> on_training_batch
- validation_batch -> on_validation_batch
- epoch_end       -> on_epoch
- training_end    -> on_training_end

Dispatch is synchronous and in subscription order, so listeners see the
trainer's metrics exactly as they were when the event was published.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .listeners.base import TrainingListener
from .models import TrainingEvent
from .trainer import Trainer

logger = logging.getLogger(__name__)

_HOOKS: dict[str, str] = {
    "training_begin": "on_training_begin",
    "training_batch": "on_training_batch",
    "validation_batch": "on_validation_batch",
    "epoch_end": "on_epoch",
    "training_end": "on_training_end",
}


class TrainingEventBus:
    """Fan-out bus for training lifecycle events (trainer -> listeners)."""

    def __init__(self, listeners: Iterable[TrainingListener] = ()) -> None:
        """Create a bus, optionally pre-subscribing `listeners` in order."""
        self._listeners: list[TrainingListener] = list(listeners)

    @property
    def listeners(self) -> tuple[TrainingListener, ...]:
        return tuple(self._listeners)

    def subscribe(self, listener: TrainingListener) -> None:
        """Register a listener; subscribing the same listener twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TrainingListener) -> None:
        """Remove a listener (no further events will be delivered)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, event: TrainingEvent, trainer: Trainer) -> None:
        """Deliver `event` to every listener; listener errors propagate to the caller."""
        hook = _HOOKS.get(event.type)
        if hook is None:
            raise ValueError(f"Unknown training event type: {event.type!r}")
        logger.debug("Dispatching %s to %d listener(s)", event.type, len(self._listeners))
        for listener in list(self._listeners):
            getattr(listener, hook)(trainer)

    def publish_many(self, events: Iterable[TrainingEvent], trainer: Trainer) -> None:
        """Publish multiple events sequentially, preserving order."""
        for event in events:
            self.publish(event, trainer)
