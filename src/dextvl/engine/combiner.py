"""Result combiner: folds per-chunk results according to a CombineMode."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import Any

from dextvl.domain.enums import CombineMode
from dextvl.domain.models.calls import ZERO_ADDRESS, BalanceMapping, ChunkResult, CombinedResult


def merge_balances(partials: Iterable[BalanceMapping]) -> BalanceMapping:
    """Additively merge balance maps. A key missing from a map contributes zero."""
    merged: defaultdict[str, int] = defaultdict(int)
    for partial in partials:
        for token, amount in partial.items():
            merged[token] += int(amount)
    return dict(merged)


def with_empty_sentinel(balances: BalanceMapping) -> BalanceMapping:
    """Replace an empty mapping with {ZERO_ADDRESS: 0}; consumers expect at least one entry."""
    if not balances:
        return {ZERO_ADDRESS: 0}
    return balances


def _concat(results: Sequence[ChunkResult]) -> list[Any]:
    output: list[Any] = []
    for result in results:
        if not isinstance(result.output, list):
            raise TypeError(f"CONCAT expects list outputs, got {type(result.output).__name__}")
        output.extend(result.output)
    return output


def _sum_by_key(results: Sequence[ChunkResult]) -> BalanceMapping:
    partials = []
    for result in results:
        if not isinstance(result.output, dict):
            raise TypeError(f"SUM_BY_KEY expects mapping outputs, got {type(result.output).__name__}")
        partials.append(result.output)
    return with_empty_sentinel(merge_balances(partials))


def combine(results: Sequence[ChunkResult], mode: CombineMode) -> CombinedResult:
    call_count = sum(result.call_count for result in results)

    if mode == CombineMode.CONCAT:
        return CombinedResult(call_count=call_count, output=_concat(results))
    if mode == CombineMode.SUM_BY_KEY:
        return CombinedResult(call_count=call_count, output=_sum_by_key(results))
    raise ValueError(f"Unknown combine mode: {mode}")
