"""Console progress bar for training and validation passes."""

from __future__ import annotations

from typing import TextIO

from tqdm.auto import tqdm


class ProgressBar:
    """A fixed-size progress bar positioned explicitly by batch index.

    Usage:
        bar = ProgressBar("Training", total=100)
        for i in range(100):
            # ... run batch i ...
            bar.update(i, "loss: 0.12")
        bar.reset()  # next epoch
    """

    def __init__(self, message: str, total: int, *, enabled: bool = True, stream: TextIO | None = None):
        """Create a bar titled `message` spanning `total` batches; `enabled=False` renders nothing."""
        self.message = message
        self.total = int(total)
        self.progress = 0
        self._bar = tqdm(
            total=self.total,
            desc=message,
            file=stream,
            disable=not enabled,
            leave=False,
            dynamic_ncols=True,
        )

    def update(self, progress: int, status: str | None = None) -> None:
        """Move the bar to batch `progress` (0-based) with an optional status suffix."""
        # clamp: trainers may run more batches than the declared size
        self.progress = max(0, min(int(progress) + 1, self.total))
        self._bar.n = self.progress
        if status:
            self._bar.set_postfix_str(status, refresh=False)
        self._bar.refresh()

    def reset(self) -> None:
        """Return the bar to zero for the next epoch."""
        self.progress = 0
        self._bar.reset(total=self.total)

    def close(self) -> None:
        """Release the underlying tqdm bar."""
        self._bar.close()
