from __future__ import annotations

import logging
from pathlib import Path

import duckdb
import pytest

from main import run_demo


def test_demo_logs_summary_and_exports_metrics(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    db_path = tmp_path / "demo.duckdb"
    monkeypatch.setenv("DEMO_EPOCHS", "2")
    monkeypatch.setenv("DEMO_TRAIN_BATCHES", "3")
    monkeypatch.setenv("DEMO_VALIDATE_BATCHES", "2")
    monkeypatch.setenv("TRAINING_PROGRESS_BAR", "false")
    monkeypatch.setenv("TRAINING_METRICS_DB_PATH", str(db_path))
    monkeypatch.delenv("TRAINING_METRICS_TABLE", raising=False)
    monkeypatch.delenv("TRAINING_LOG_LEVEL", raising=False)
    caplog.set_level(logging.INFO)

    run_demo()

    messages = [r.getMessage() for r in caplog.records]
    assert "Epoch 1 finished." in messages
    assert any(m.startswith("Validate: Accuracy: ") for m in messages)
    assert any(m.startswith("train P50: ") for m in messages)
    assert any(m.startswith("epoch P50: ") for m in messages)

    conn = duckdb.connect(str(db_path))
    try:
        names = {row[0] for row in conn.execute("select distinct name from training_metrics").fetchall()}
    finally:
        conn.close()
    assert {"forward", "backward", "step", "epoch", "train", "train_Accuracy", "validate_SoftmaxCrossEntropyLoss"} <= names
