"""BatchAggregator: plan, dispatch and combine one logical batched request."""

import logging
from collections.abc import Callable, Sequence

from dextvl.domain.enums import CombineMode
from dextvl.domain.models.calls import CallDescriptor, CombinedResult
from dextvl.engine.combiner import combine
from dextvl.engine.dispatcher import ChunkExecutor, dispatch
from dextvl.engine.planner import plan_chunks
from dextvl.engine.progress import ProgressObserver
from dextvl.exceptions import BookkeepingViolation

logger = logging.getLogger(__name__)


class BatchAggregator:
    """Turns an arbitrarily long call list into bounded round-trips.

    Keeps a cumulative count of on-chain calls executed across every `run`.
    """

    def __init__(
        self,
        concurrency_limit: int = 1,
        progress_factory: Callable[[str], ProgressObserver] | None = None,
    ) -> None:
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {concurrency_limit}")
        self._concurrency_limit = concurrency_limit
        self._progress_factory = progress_factory
        self.call_count = 0

    async def run(
        self,
        descriptors: Sequence[CallDescriptor],
        execute: ChunkExecutor,
        max_chunk_size: int,
        mode: CombineMode,
        label: str = "batch",
    ) -> CombinedResult:
        chunks = plan_chunks(descriptors, max_chunk_size)
        logger.debug("%s: %d calls in %d chunks of <= %d", label, len(descriptors), len(chunks), max_chunk_size)

        progress = self._progress_factory(label) if self._progress_factory and chunks else None
        try:
            results = await dispatch(chunks, execute, self._concurrency_limit, progress)
        finally:
            if progress is not None:
                progress.close()
        combined = combine(results, mode)

        if combined.call_count != len(descriptors):
            raise BookkeepingViolation(
                f"{label}: executed {combined.call_count} calls for {len(descriptors)} descriptors"
            )

        self.record_calls(combined.call_count)
        return combined

    def record_calls(self, count: int) -> None:
        """Add calls executed outside `run` (single reads) to the cumulative counter."""
        self.call_count += count

    def reset_call_count(self) -> None:
        self.call_count = 0
