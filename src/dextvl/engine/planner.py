"""Chunk planner: partitions call descriptors into ordered, bounded chunks."""

from collections.abc import Sequence

from dextvl.domain.models.calls import CallDescriptor, Chunk
from dextvl.exceptions import BookkeepingViolation


def plan_chunks(descriptors: Sequence[CallDescriptor], max_chunk_size: int) -> list[Chunk]:
    """Split `descriptors` into chunks of at most `max_chunk_size`, preserving order.

    Chunk i holds descriptors [i*M, min((i+1)*M, N)). Empty input yields no chunks.
    """
    if max_chunk_size < 1:
        raise ValueError(f"max_chunk_size must be >= 1, got {max_chunk_size}")

    chunks = [
        Chunk(index=index, calls=tuple(descriptors[start:start + max_chunk_size]))
        for index, start in enumerate(range(0, len(descriptors), max_chunk_size))
    ]

    planned = sum(len(chunk) for chunk in chunks)
    if planned != len(descriptors):
        raise BookkeepingViolation(
            f"Planned {planned} calls across {len(chunks)} chunks, expected {len(descriptors)}"
        )
    return chunks
