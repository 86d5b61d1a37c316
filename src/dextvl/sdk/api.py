"""SdkApi: chunked batch endpoints on top of SdkClient and BatchAggregator.

Every batched method accepts an arbitrarily long list of calls; the
aggregator splits it per call site and combines the chunk results.
"""

from collections.abc import Sequence
from typing import Any

from dextvl.domain.enums import CombineMode
from dextvl.domain.models.calls import BalanceMapping, CallDescriptor, Chunk, CombinedResult
from dextvl.engine.aggregator import BatchAggregator
from dextvl.infra.sdk.client import SdkClient

MULTICALL_CHUNK_SIZE = 5000
BALANCE_CHUNK_SIZE = 2500
ASSETS_LOCKED_CHUNK_SIZE = 1000
MAKER_ASSETS_LOCKED_CHUNK_SIZE = 3000


async def _passthrough(
    client: SdkClient, aggregator: BatchAggregator, endpoint: str, payload: dict[str, Any] | None = None
) -> Any:
    """Unchunked endpoint: forward the payload, count any reported eth calls."""
    data = await client.post(endpoint, payload)
    if isinstance(data, dict) and data.get("ethCallCount"):
        aggregator.record_calls(int(data["ethCallCount"]))
    return data


class AbiApi:
    def __init__(self, client: SdkClient, aggregator: BatchAggregator, chunk_size: int = MULTICALL_CHUNK_SIZE) -> None:
        self._client = client
        self._aggregator = aggregator
        self._chunk_size = chunk_size

    async def call(
        self,
        abi: dict | str,
        target: str,
        params: Any = None,
        block: int | None = None,
        chain: str | None = None,
    ) -> dict[str, Any]:
        result = await self._client.abi_call(abi, target, params=params, block=block, chain=chain)
        self._aggregator.record_calls(result["ethCallCount"])
        return result

    async def multi_call(
        self,
        abi: dict | str,
        calls: Sequence[CallDescriptor],
        block: int | None = None,
        chain: str | None = None,
        chunk_size: int | None = None,
    ) -> CombinedResult:
        """Batched reads; output is one `{"input", "success", "output"}` entry per call, in order."""

        async def execute(chunk: Chunk):
            return await self._client.abi_multi_call_chunk(chunk, abi, block=block, chain=chain)

        return await self._aggregator.run(
            calls,
            execute,
            max_chunk_size=chunk_size or self._chunk_size,
            mode=CombineMode.CONCAT,
            label="abi/multiCall",
        )


class Erc20Api:
    def __init__(self, client: SdkClient, aggregator: BatchAggregator, chunk_size: int = BALANCE_CHUNK_SIZE) -> None:
        self._client = client
        self._aggregator = aggregator
        self._chunk_size = chunk_size

    async def balance_of_multi(
        self,
        calls: Sequence[CallDescriptor],
        block: int | None = None,
        chain: str | None = None,
        chunk_size: int | None = None,
    ) -> BalanceMapping:
        """Sum of `target.balanceOf(params)` per target token.

        Returns {ZERO_ADDRESS: 0} when no balance was found.
        """

        async def execute(chunk: Chunk):
            return await self._client.balance_of_chunk(chunk, block=block, chain=chain)

        combined = await self._aggregator.run(
            calls,
            execute,
            max_chunk_size=chunk_size or self._chunk_size,
            mode=CombineMode.SUM_BY_KEY,
            label="erc20/balanceOf",
        )
        return combined.output  # type: ignore[return-value]

    async def info(self, target: str) -> Any:
        return await _passthrough(self._client, self._aggregator, "/erc20/info", {"target": target})

    async def symbol(self, target: str) -> Any:
        return await _passthrough(self._client, self._aggregator, "/erc20/symbol", {"target": target})

    async def decimals(self, target: str) -> Any:
        return await _passthrough(self._client, self._aggregator, "/erc20/decimals", {"target": target})

    async def total_supply(self, target: str, block: int | None = None, chain: str | None = None) -> Any:
        payload = {"target": target, "block": block, "chain": chain}
        return await _passthrough(self._client, self._aggregator, "/erc20/totalSupply", payload)

    async def balance_of(
        self, target: str, owner: str, block: int | None = None, chain: str | None = None
    ) -> Any:
        """Single `target.balanceOf(owner)` read, unchunked."""
        payload = {"target": target, "owner": owner, "block": block, "chain": chain}
        return await _passthrough(self._client, self._aggregator, "/erc20/balanceOf", payload)


class EthApi:
    """Native-coin balances."""

    def __init__(self, client: SdkClient, aggregator: BatchAggregator) -> None:
        self._client = client
        self._aggregator = aggregator

    async def get_balance(self, target: str, block: int | None = None, chain: str | None = None) -> Any:
        payload = {"target": target, "block": block, "chain": chain}
        return await _passthrough(self._client, self._aggregator, "/eth/getBalance", payload)

    async def get_balances(
        self, targets: Sequence[str], block: int | None = None, chain: str | None = None
    ) -> Any:
        payload = {"targets": list(targets), "block": block, "chain": chain}
        return await _passthrough(self._client, self._aggregator, "/eth/getBalances", payload)


class AssetsLockedApi:
    """One `getAssetsLocked` endpoint: targets in, summed token balances out."""

    def __init__(
        self,
        client: SdkClient,
        aggregator: BatchAggregator,
        endpoint: str,
        chunk_size: int = ASSETS_LOCKED_CHUNK_SIZE,
    ) -> None:
        self._client = client
        self._aggregator = aggregator
        self._endpoint = endpoint
        self._chunk_size = chunk_size

    async def get_assets_locked(
        self, targets: Sequence[str], block: int | None = None, chain: str | None = None
    ) -> BalanceMapping:
        calls = [CallDescriptor(target=target) for target in targets]

        async def execute(chunk: Chunk):
            return await self._client.assets_locked_chunk(self._endpoint, chunk, block=block, chain=chain)

        combined = await self._aggregator.run(
            calls,
            execute,
            max_chunk_size=self._chunk_size,
            mode=CombineMode.SUM_BY_KEY,
            label=self._endpoint.lstrip("/"),
        )
        return combined.output  # type: ignore[return-value]


class CdpApi(AssetsLockedApi):
    def __init__(self, client: SdkClient, aggregator: BatchAggregator, chunk_size: int = ASSETS_LOCKED_CHUNK_SIZE) -> None:
        super().__init__(client, aggregator, "/cdp/getAssetsLocked", chunk_size)
        self.maker = AssetsLockedApi(client, aggregator, "/cdp/maker/getAssetsLocked", MAKER_ASSETS_LOCKED_CHUNK_SIZE)
        self.compound = AssetsLockedApi(client, aggregator, "/cdp/compound/getAssetsLocked", chunk_size)
        self.aave = AssetsLockedApi(client, aggregator, "/cdp/aave/getAssetsLocked", chunk_size)


class UtilApi:
    def __init__(self, client: SdkClient) -> None:
        self._client = client

    async def supported_tokens(self) -> list[dict[str, Any]]:
        return await self._client.supported_tokens()

    async def lookup_block(self, timestamp: int, chain: str | None = None) -> int:
        return await self._client.lookup_block(timestamp, chain)

    async def get_eth_call_count(self) -> int:
        """Server-side eth_call counter for this API key."""
        return await self._client.get_eth_call_count()

    async def reset_eth_call_count(self) -> None:
        await self._client.reset_eth_call_count()

    async def token_list(self) -> Any:
        return await self._client.post("/util/tokenList")

    async def get_logs(self, **options: Any) -> Any:
        """Event logs; `options` is sent as-is (target, topic, keys, fromBlock, toBlock, ...)."""
        return await self._client.post("/util/getLogs", options)


class SdkApi:
    """Entry point mirroring the SDK namespaces: abi, erc20, eth, cdp, util."""

    def __init__(
        self,
        client: SdkClient,
        aggregator: BatchAggregator,
        multicall_chunk_size: int = MULTICALL_CHUNK_SIZE,
        balance_chunk_size: int = BALANCE_CHUNK_SIZE,
        assets_locked_chunk_size: int = ASSETS_LOCKED_CHUNK_SIZE,
    ) -> None:
        self._aggregator = aggregator
        self.abi = AbiApi(client, aggregator, multicall_chunk_size)
        self.erc20 = Erc20Api(client, aggregator, balance_chunk_size)
        self.eth = EthApi(client, aggregator)
        self.cdp = CdpApi(client, aggregator, assets_locked_chunk_size)
        self.util = UtilApi(client)

    @property
    def eth_call_count(self) -> int:
        """On-chain calls executed through this instance so far."""
        return self._aggregator.call_count

    def reset_eth_call_count(self) -> None:
        self._aggregator.reset_call_count()
