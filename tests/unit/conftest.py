from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from metrics import MetricsRecorder
from training.models import Device, EngineInfo


@dataclass(frozen=True)
class FakeEvaluator:
    name: str


@dataclass
class FakeTrainer:
    metrics: MetricsRecorder = field(default_factory=MetricsRecorder)
    loss: FakeEvaluator = FakeEvaluator("loss")
    training_evaluators: Sequence[FakeEvaluator] = (FakeEvaluator("Accuracy"), FakeEvaluator("loss"))
    validation_evaluators: Sequence[FakeEvaluator] = (FakeEvaluator("Accuracy"), FakeEvaluator("loss"))
    devices: Sequence[Device] = (Device.cpu(),)
    engine: EngineInfo = EngineInfo(name="FakeEngine", version="1.2.3")


@pytest.fixture
def trainer() -> FakeTrainer:
    """A trainer stand-in with an empty recorder and Accuracy/loss evaluators."""
    return FakeTrainer()


@pytest.fixture(autouse=True)
def _no_dotenv_in_unit_tests(monkeypatch: pytest.MonkeyPatch):
    """Keep a developer's local `.env` from leaking into config tests."""
    monkeypatch.setattr("config.dotenv.load_dotenv", lambda *args, **kwargs: False)
    yield
