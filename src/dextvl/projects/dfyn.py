"""Dfyn Network (Polygon) TVL adapter.

Enumerates every pair from the factory, keeps the sides whose token is on
the supported-token list, and sums those tokens' balances held by the pairs.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel

from dextvl.domain.enums import Chain
from dextvl.domain.models.calls import BalanceMapping, CallDescriptor
from dextvl.domain.models.pairs import PairRecord
from dextvl.exceptions import FatalDiscoveryError
from dextvl.projects import abis
from dextvl.sdk.api import BALANCE_CHUNK_SIZE, SdkApi

logger = logging.getLogger(__name__)

FACTORY = "0xe7fb3e833efe5f9c441105eb65ef8b261266423b"


class ProjectMetadata(BaseModel):
    name: str
    token: str
    chain: Chain
    category: str
    start: int  # Unix timestamp of launch


PROJECT = ProjectMetadata(
    name="Dfyn Network",
    token="DFYN",
    chain=Chain.POLYGON,
    category="DEXes",
    start=1602073800,  # Oct 2020
)


def supported_addresses(tokens: Iterable[dict[str, Any]], chain: Chain) -> frozenset[str]:
    """Lower-cased addresses of tokens listed on `chain`; tokens without one are ignored."""
    addresses = set()
    for token in tokens:
        address = (token.get("platforms") or {}).get(chain.platform_id)
        if address:
            addresses.add(address.lower())
    return frozenset(addresses)


def _address(result: dict[str, Any]) -> str | None:
    output = result.get("output") if result.get("success", True) else None
    return output.lower() if isinstance(output, str) else None


def filter_pairs(
    pair_addresses: Sequence[str],
    token0_results: Sequence[dict[str, Any]],
    token1_results: Sequence[dict[str, Any]],
    supported: frozenset[str],
) -> list[PairRecord]:
    """Keep pairs with at least one supported token, retaining only supported sides.

    Token results are multicall entries aligned with `pair_addresses`. A failed
    token read counts as unsupported.
    """
    records = []
    for pair, token0_result, token1_result in zip(pair_addresses, token0_results, token1_results, strict=True):
        token0 = _address(token0_result)
        token1 = _address(token1_result)
        record = PairRecord(
            pair_address=pair,
            token0_address=token0 if token0 in supported else None,
            token1_address=token1 if token1 in supported else None,
        )
        if record.retained_tokens():
            records.append(record)
    return records


def build_balance_calls(pairs: Iterable[PairRecord]) -> list[CallDescriptor]:
    """One balanceOf call per (pair, retained token): target=token, params=pair."""
    return [
        CallDescriptor(target=token, params=pair.pair_address)
        for pair in pairs
        for token in pair.retained_tokens()
    ]


class DfynAdapter:
    def __init__(
        self,
        api: SdkApi,
        factory: str = FACTORY,
        chain: Chain = PROJECT.chain,
        balance_chunk_size: int = BALANCE_CHUNK_SIZE,
    ) -> None:
        self._api = api
        self._factory = factory
        self._chain = chain
        self._balance_chunk_size = balance_chunk_size

    async def supported_tokens(self) -> frozenset[str]:
        tokens = await self._api.util.supported_tokens()
        supported = supported_addresses(tokens, self._chain)
        logger.info("Loaded %d supported tokens for %s", len(supported), self._chain.value)
        return supported

    async def pair_count(self, block: int | None) -> int:
        result = await self._api.abi.call(
            abis.ALL_PAIRS_LENGTH, self._factory, block=block, chain=self._chain.value
        )
        if result["output"] is None:
            raise FatalDiscoveryError(f"allPairsLength() failed for factory {self._factory}")
        try:
            return int(result["output"])
        except (TypeError, ValueError) as e:
            raise FatalDiscoveryError(
                f"allPairsLength() returned {result['output']!r} for factory {self._factory}"
            ) from e

    async def pair_addresses(self, block: int | None) -> list[str]:
        count = await self.pair_count(block)
        calls = [CallDescriptor(target=self._factory, params=[i]) for i in range(count)]
        combined = await self._api.abi.multi_call(abis.ALL_PAIRS, calls, block=block, chain=self._chain.value)

        pairs = []
        for i, result in enumerate(combined.output):
            address = _address(result)
            if address is None:
                raise FatalDiscoveryError(f"allPairs({i}) failed for factory {self._factory}")
            pairs.append(address)
        logger.info("Discovered %d pairs from factory %s", len(pairs), self._factory)
        return pairs

    async def balance_calls(self, block: int | None) -> list[CallDescriptor]:
        """Discover pairs and build the balanceOf calls that make up TVL."""
        supported = await self.supported_tokens()
        pairs = await self.pair_addresses(block)

        calls = [CallDescriptor(target=pair) for pair in pairs]
        tasks = [
            asyncio.create_task(self._api.abi.multi_call(abi, calls, block=block, chain=self._chain.value))
            for abi in (abis.TOKEN0, abis.TOKEN1)
        ]
        try:
            token0_results, token1_results = await asyncio.gather(*tasks)
        finally:
            # A failed side must not leave the other one issuing requests.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        records = filter_pairs(pairs, token0_results.output, token1_results.output, supported)
        balance_calls = build_balance_calls(records)
        logger.info("%d of %d pairs hold supported tokens (%d balance calls)", len(records), len(pairs), len(balance_calls))
        return balance_calls

    async def tvl(self, timestamp: int, block: int | None) -> BalanceMapping:
        """Token -> locked balance (native units) at `block`.

        `timestamp` is accepted for adapter-interface compatibility; `block` pins the state read.
        """
        logger.info("Computing %s TVL at block %s (ts=%d)", PROJECT.name, block, timestamp)
        calls = await self.balance_calls(block)
        return await self._api.erc20.balance_of_multi(
            calls, block=block, chain=self._chain.value, chunk_size=self._balance_chunk_size
        )


async def compute_tvl(timestamp: int, block: int | None, api: SdkApi) -> BalanceMapping:
    return await DfynAdapter(api).tvl(timestamp, block)
