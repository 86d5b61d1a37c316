"""DefiPulse-style SDK client: one HTTP round-trip per batched request."""

import logging
from typing import Any

import httpx

from dextvl.domain.models.calls import Chunk, ChunkResult
from dextvl.exceptions import RemoteCallFailure
from dextvl.infra.http.rate_limited_client import RateLimitedClient
from dextvl.infra.sdk.balances import sum_multi_balance_of

logger = logging.getLogger(__name__)

INDEXER_HOST = "https://dfp-indexer-sync-staging.defipulse.com"

# Longest response excerpt kept on a RemoteCallFailure
MAX_BODY_CHARS = 500


def _response_body(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return response.text[:MAX_BODY_CHARS]


class SdkClient:
    """Executes SDK endpoints (`/abi/multiCall`, `/util/supportedTokens`, ...).

    Transport errors are re-raised as RemoteCallFailure with a compact
    description of the request and response instead of the raw httpx objects.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        http_client: RateLimitedClient,
        infura_key: str = "",
        indexer_host: str = INDEXER_HOST,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._api_key = api_key
        self._http = http_client
        self._infura_key = infura_key
        self._indexer_host = indexer_host.rstrip("/")

    def _url(self, endpoint: str) -> str:
        return f"{self._api_url}/{self._api_key}{endpoint}"

    def _params(self) -> dict[str, str] | None:
        if self._infura_key:
            return {"infura-key": self._infura_key}
        return None

    async def post(self, endpoint: str, payload: dict[str, Any] | None = None) -> Any:
        """POST to an SDK endpoint and return the decoded JSON body."""
        try:
            resp = await self._http.post(self._url(endpoint), json=payload or {}, params=self._params())
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise RemoteCallFailure(
                f"SDK {endpoint} returned HTTP {e.response.status_code}",
                method="POST",
                url=endpoint,
                status_code=e.response.status_code,
                response_body=_response_body(e.response),
            ) from e
        except httpx.HTTPError as e:
            raise RemoteCallFailure(f"SDK {endpoint} request failed: {e}", method="POST", url=endpoint) from e
        except ValueError as e:
            raise RemoteCallFailure(f"SDK {endpoint} returned a non-JSON body", method="POST", url=endpoint) from e

        if isinstance(data, dict) and data.get("error"):
            raise RemoteCallFailure(
                f"SDK {endpoint} error: {data['error']}", method="POST", url=endpoint, response_body=data
            )
        return data

    @staticmethod
    def _unpack(endpoint: str, data: Any) -> tuple[int, Any]:
        if not isinstance(data, dict) or "output" not in data:
            raise RemoteCallFailure(f"SDK {endpoint} response has no output", url=endpoint, response_body=data)
        return int(data.get("ethCallCount") or 0), data["output"]

    # ── Single calls ────────────────────────────────────────────

    async def abi_call(
        self,
        abi: dict | str,
        target: str,
        params: Any = None,
        block: int | None = None,
        chain: str | None = None,
    ) -> dict[str, Any]:
        """Single contract read. Returns {"output": ..., "ethCallCount": n}."""
        payload: dict[str, Any] = {"abi": abi, "target": target, "block": block, "chain": chain}
        if params is not None:
            payload["params"] = params
        call_count, output = self._unpack("/abi/call", await self.post("/abi/call", payload))
        return {"output": output, "ethCallCount": call_count}

    # ── Chunk executors (one round-trip per chunk) ──────────────

    async def abi_multi_call_chunk(
        self, chunk: Chunk, abi: dict | str, block: int | None = None, chain: str | None = None
    ) -> ChunkResult:
        """Multicall one chunk. Output: [{"input", "success", "output"}, ...] in call order."""
        payload = {
            "abi": abi,
            "calls": [call.to_payload() for call in chunk.calls],
            "block": block,
            "chain": chain,
        }
        call_count, output = self._unpack("/abi/multiCall", await self.post("/abi/multiCall", payload))
        if not isinstance(output, list) or len(output) != len(chunk):
            raise RemoteCallFailure(
                f"/abi/multiCall returned {len(output) if isinstance(output, list) else 'no'} results "
                f"for {len(chunk)} calls",
                url="/abi/multiCall",
            )
        return ChunkResult(call_count=call_count, output=output)

    async def balance_of_chunk(
        self, chunk: Chunk, block: int | None = None, chain: str | None = None
    ) -> ChunkResult:
        """erc20 balanceOf multicall for one chunk, reduced to a partial balance map."""
        result = await self.abi_multi_call_chunk(chunk, "erc20:balanceOf", block=block, chain=chain)
        return ChunkResult(call_count=result.call_count, output=sum_multi_balance_of(result.output))

    async def assets_locked_chunk(
        self, endpoint: str, chunk: Chunk, block: int | None = None, chain: str | None = None
    ) -> ChunkResult:
        """`getAssetsLocked`-style endpoint: targets in, token -> balance map out."""
        payload = {"targets": [call.target for call in chunk.calls], "block": block, "chain": chain}
        call_count, output = self._unpack(endpoint, await self.post(endpoint, payload))
        if not isinstance(output, dict):
            raise RemoteCallFailure(f"SDK {endpoint} returned a non-mapping output", url=endpoint)
        return ChunkResult(
            call_count=call_count,
            output={token.lower(): int(amount) for token, amount in output.items()},
        )

    # ── Utilities ───────────────────────────────────────────────

    async def supported_tokens(self) -> list[dict[str, Any]]:
        """Curated token list; each entry may carry a `platforms` chain -> address map."""
        data = await self.post("/util/supportedTokens")
        if not isinstance(data, list):
            raise RemoteCallFailure("/util/supportedTokens did not return a list", url="/util/supportedTokens")
        return data

    async def get_eth_call_count(self) -> int:
        data = await self.post("/util/getEthCallCount")
        return int(data.get("ethCallCount", 0)) if isinstance(data, dict) else int(data)

    async def reset_eth_call_count(self) -> None:
        await self.post("/util/resetEthCallCount")

    async def lookup_block(self, timestamp: int, chain: str | None = None) -> int:
        """Block number at (or just before) a Unix timestamp, from the indexer."""
        url = f"{self._indexer_host}/lookup-block"
        try:
            resp = await self._http.get(url, params={"chain": chain or "", "timestamp": timestamp})
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise RemoteCallFailure(f"lookup-block failed: {e}", method="GET", url="/lookup-block") from e
        except ValueError as e:
            raise RemoteCallFailure("lookup-block returned a non-JSON body", method="GET", url="/lookup-block") from e

        block = data.get("block") if isinstance(data, dict) else data
        if block is None:
            raise RemoteCallFailure(f"lookup-block has no block for {timestamp}", url="/lookup-block", response_body=data)
        return int(block)
