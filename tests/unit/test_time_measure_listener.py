from __future__ import annotations

from collections.abc import Iterator

from training.bus import TrainingEventBus
from training.listeners.time_measure import TimeMeasureTrainingListener
from training.models import EpochEnd, TrainingBatch, TrainingBegin, ValidationBatch


def _clock(ticks: list[int]):
    it: Iterator[int] = iter(ticks)
    return lambda: next(it)


def test_records_batch_gaps_and_epoch_durations(trainer) -> None:
    listener = TimeMeasureTrainingListener(clock=_clock([0, 100, 250, 450, 500, 530, 1_000, 1_100, 1_300, 2_000]))
    bus = TrainingEventBus([listener])

    bus.publish_many(
        [
            TrainingBegin(),  # 0
            TrainingBatch(),  # 100
            TrainingBatch(),  # 250
            TrainingBatch(),  # 450
            ValidationBatch(),  # 500
            ValidationBatch(),  # 530
            EpochEnd(),  # 1_000
            TrainingBatch(),  # 1_100
            TrainingBatch(),  # 1_300
            EpochEnd(),  # 2_000
        ],
        trainer,
    )

    metrics = trainer.metrics
    assert [m.value for m in metrics.get_metric("train")] == [150, 200, 200]
    assert [m.value for m in metrics.get_metric("validate")] == [30]
    assert [m.value for m in metrics.get_metric("epoch")] == [1_000, 1_000]
    assert all(m.unit == "ns" for m in metrics.get_metric("epoch"))


def test_single_batch_epoch_records_no_train_timing(trainer) -> None:
    listener = TimeMeasureTrainingListener(clock=_clock([0, 10, 20]))
    bus = TrainingEventBus([listener])

    bus.publish_many([TrainingBegin(), TrainingBatch(), EpochEnd()], trainer)

    assert not trainer.metrics.has_metric("train")
    assert trainer.metrics.latest("epoch") == 20
