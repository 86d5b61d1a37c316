"""Concurrency-bounded dispatcher: runs chunks through an async executor."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from dextvl.domain.models.calls import Chunk, ChunkResult
from dextvl.engine.progress import ProgressObserver

logger = logging.getLogger(__name__)

ChunkExecutor = Callable[[Chunk], Awaitable[ChunkResult]]


async def dispatch(
    chunks: Sequence[Chunk],
    execute: ChunkExecutor,
    concurrency_limit: int = 1,
    progress: ProgressObserver | None = None,
) -> list[ChunkResult]:
    """Execute every chunk with at most `concurrency_limit` in flight.

    Results are index-aligned with `chunks` whatever the completion order.
    The first failure stops admission, cancels the chunks still in flight and
    is re-raised unchanged; no partial results are returned.
    """
    if concurrency_limit < 1:
        raise ValueError(f"concurrency_limit must be >= 1, got {concurrency_limit}")

    total = len(chunks)
    if total == 0:
        return []

    results: list[ChunkResult | None] = [None] * total
    pending = iter(enumerate(chunks))
    completed = 0
    aborted = False

    async def worker() -> None:
        nonlocal completed, aborted
        # Workers share one iterator: pulling from it is the admission step.
        for position, chunk in pending:
            if aborted:
                return
            try:
                results[position] = await execute(chunk)
            except BaseException:
                aborted = True
                raise
            completed += 1
            logger.debug("Chunk %d done (%d calls), %d/%d", chunk.index, results[position].call_count, completed, total)
            if progress is not None:
                progress(completed, total)

    n_workers = min(concurrency_limit, total)
    logger.info("Dispatching %d chunks with concurrency %d", total, n_workers)
    workers = [asyncio.create_task(worker()) for _ in range(n_workers)]
    try:
        await asyncio.gather(*workers)
    except Exception:
        logger.error("Dispatch aborted after %d/%d chunks", completed, total)
        raise
    finally:
        for task in workers:
            if not task.done():
                task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

    return results  # type: ignore[return-value]
