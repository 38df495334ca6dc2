"""Normalized models for the training-listener plumbing.

These models describe only what listeners need to observe a run:
- where training runs (devices) and on which engine
- which lifecycle point the trainer has reached (tagged events)

The trainer itself is external; see `training.trainer` for the interface
listeners read from.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from metrics.models import utc_now

DeviceType = Literal["cpu", "gpu"]


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class Device(_Model):
    """A compute device the trainer places work on."""

    device_type: DeviceType
    device_id: int = 0

    @classmethod
    def cpu(cls) -> Device:
        return cls(device_type="cpu")

    @classmethod
    def gpu(cls, device_id: int = 0) -> Device:
        return cls(device_type="gpu", device_id=device_id)

    def __str__(self) -> str:
        if self.device_type == "cpu":
            return "cpu()"
        return f"gpu({self.device_id})"


def describe_devices(devices: Sequence[Device]) -> str:
    """Summarize devices for a log line: `cpu()` for a lone CPU, else a GPU count."""
    if len(devices) == 1 and devices[0].device_type == "cpu":
        return str(Device.cpu())
    return f"{len(devices)} GPUs"


class EngineInfo(_Model):
    """Name and version of the deep learning engine backing the trainer."""

    name: str
    version: str


class TrainingBegin(_Model):
    type: Literal["training_begin"] = "training_begin"
    ts: datetime = Field(default_factory=utc_now)


class TrainingBatch(_Model):
    type: Literal["training_batch"] = "training_batch"
    ts: datetime = Field(default_factory=utc_now)


class ValidationBatch(_Model):
    type: Literal["validation_batch"] = "validation_batch"
    ts: datetime = Field(default_factory=utc_now)


class EpochEnd(_Model):
    type: Literal["epoch_end"] = "epoch_end"
    ts: datetime = Field(default_factory=utc_now)


class TrainingEnd(_Model):
    type: Literal["training_end"] = "training_end"
    ts: datetime = Field(default_factory=utc_now)


TrainingEvent = TrainingBegin | TrainingBatch | ValidationBatch | EpochEnd | TrainingEnd
