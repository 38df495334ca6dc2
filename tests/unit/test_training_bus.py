from __future__ import annotations

import pytest

from training.bus import TrainingEventBus
from training.listeners.base import TrainingListenerAdapter
from training.models import (
    Device,
    EpochEnd,
    TrainingBatch,
    TrainingBegin,
    TrainingEnd,
    ValidationBatch,
    describe_devices,
)


class _RecordingListener(TrainingListenerAdapter):
    def __init__(self, tag: str, calls: list[tuple[str, str]]) -> None:
        self._tag = tag
        self._calls = calls

    def on_training_begin(self, trainer) -> None:
        self._calls.append((self._tag, "begin"))

    def on_training_batch(self, trainer) -> None:
        self._calls.append((self._tag, "train"))

    def on_validation_batch(self, trainer) -> None:
        self._calls.append((self._tag, "validate"))

    def on_epoch(self, trainer) -> None:
        self._calls.append((self._tag, "epoch"))

    def on_training_end(self, trainer) -> None:
        self._calls.append((self._tag, "end"))


def test_events_dispatch_to_matching_hooks_in_subscription_order(trainer) -> None:
    calls: list[tuple[str, str]] = []
    bus = TrainingEventBus([_RecordingListener("a", calls)])
    bus.subscribe(_RecordingListener("b", calls))

    bus.publish_many(
        [TrainingBegin(), TrainingBatch(), ValidationBatch(), EpochEnd(), TrainingEnd()],
        trainer,
    )

    assert calls == [
        ("a", "begin"),
        ("b", "begin"),
        ("a", "train"),
        ("b", "train"),
        ("a", "validate"),
        ("b", "validate"),
        ("a", "epoch"),
        ("b", "epoch"),
        ("a", "end"),
        ("b", "end"),
    ]


def test_unsubscribe_and_duplicate_subscribe(trainer) -> None:
    calls: list[tuple[str, str]] = []
    listener = _RecordingListener("a", calls)
    bus = TrainingEventBus()

    bus.subscribe(listener)
    bus.subscribe(listener)
    bus.publish(TrainingBatch(), trainer)
    assert calls == [("a", "train")]

    bus.unsubscribe(listener)
    bus.unsubscribe(listener)
    bus.publish(TrainingBatch(), trainer)
    assert calls == [("a", "train")]
    assert bus.listeners == ()


def test_adapter_hooks_are_no_ops(trainer) -> None:
    bus = TrainingEventBus([TrainingListenerAdapter()])

    bus.publish_many([TrainingBegin(), TrainingBatch(), EpochEnd(), TrainingEnd()], trainer)

    assert trainer.metrics.metric_names() == []


def test_listener_errors_propagate_to_publisher(trainer) -> None:
    class _Failing(TrainingListenerAdapter):
        def on_epoch(self, trainer) -> None:
            raise RuntimeError("listener failed")

    bus = TrainingEventBus([_Failing()])

    with pytest.raises(RuntimeError, match="listener failed"):
        bus.publish(EpochEnd(), trainer)


@pytest.mark.parametrize(
    ("devices", "expected"),
    [
        ([Device.cpu()], "cpu()"),
        ([Device.gpu(0)], "1 GPUs"),
        ([Device.gpu(0), Device.gpu(1)], "2 GPUs"),
    ],
)
def test_describe_devices(devices: list[Device], expected: str) -> None:
    assert describe_devices(devices) == expected


def test_events_share_metric_timestamp_clock() -> None:
    from datetime import timezone

    from metrics import models as metric_models
    from training import models as training_models

    assert training_models.utc_now is metric_models.utc_now
    assert TrainingBegin().ts.tzinfo == timezone.utc
