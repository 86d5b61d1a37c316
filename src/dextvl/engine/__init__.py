"""Chunked, concurrency-bounded batch-call aggregation.

- planner.py: splits call lists into bounded chunks
- dispatcher.py: runs chunks under a concurrency limit
- combiner.py: folds chunk results (CONCAT / SUM_BY_KEY)
- aggregator.py: plan -> dispatch -> combine with call accounting
"""

from dextvl.engine.aggregator import BatchAggregator
from dextvl.engine.combiner import combine, merge_balances
from dextvl.engine.dispatcher import dispatch
from dextvl.engine.planner import plan_chunks

__all__ = [
    "BatchAggregator",
    "combine",
    "dispatch",
    "merge_balances",
    "plan_chunks",
]
