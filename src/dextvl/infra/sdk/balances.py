"""Reduction of erc20 balanceOf multicall outputs into balance maps."""

from collections.abc import Iterable
from typing import Any

from dextvl.domain.models.calls import BalanceMapping


def sum_multi_balance_of(results: Iterable[dict[str, Any]]) -> BalanceMapping:
    """Sum successful balanceOf outputs per token (the call target), lower-cased.

    Failed calls and null outputs are skipped; they still count as executed calls.
    """
    balances: dict[str, int] = {}
    for result in results:
        if not result.get("success") or result.get("output") is None:
            continue
        token = result["input"]["target"].lower()
        balances[token] = balances.get(token, 0) + int(result["output"])
    return balances
