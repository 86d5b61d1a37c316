"""Progress observers for the dispatcher. Called as observer(completed, total)."""

import logging
from typing import Protocol

from tqdm import tqdm

logger = logging.getLogger(__name__)


class ProgressObserver(Protocol):
    def __call__(self, completed: int, total: int) -> None: ...

    def close(self) -> None: ...


class LoggingProgress:
    """Logs each completion at INFO under a fixed label."""

    def __init__(self, label: str) -> None:
        self._label = label

    def __call__(self, completed: int, total: int) -> None:
        logger.info("%s: %d/%d chunks (%.0f%%)", self._label, completed, total, 100 * completed / total)

    def close(self) -> None:
        pass


class TqdmProgress:
    """Terminal progress bar, one bar per dispatch. Closes itself on the final chunk."""

    def __init__(self, label: str) -> None:
        self._label = label
        self._bar: tqdm | None = None

    def __call__(self, completed: int, total: int) -> None:
        if self._bar is None:
            self._bar = tqdm(total=total, desc=self._label, unit="chunk", leave=False)
        self._bar.update(completed - self._bar.n)
        if completed >= total:
            self.close()

    def close(self) -> None:
        """Release the bar; safe to call again or before any update."""
        if self._bar is not None:
            self._bar.close()
            self._bar = None
