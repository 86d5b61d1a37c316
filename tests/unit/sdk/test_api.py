"""Tests for SdkApi: chunk sizes per call site and call accounting."""

from unittest.mock import AsyncMock

import pytest
from fakes import make_calls

from dextvl.domain.models.calls import ZERO_ADDRESS, Chunk, ChunkResult
from dextvl.engine.aggregator import BatchAggregator
from dextvl.sdk.api import SdkApi


@pytest.fixture()
def client():
    client = AsyncMock()

    async def multi_call(chunk: Chunk, abi, block=None, chain=None):
        return ChunkResult(call_count=len(chunk), output=[c.params[0] for c in chunk.calls])

    async def balance_of(chunk: Chunk, block=None, chain=None):
        return ChunkResult(call_count=len(chunk), output={c.target: 1 for c in chunk.calls})

    async def assets_locked(endpoint, chunk: Chunk, block=None, chain=None):
        return ChunkResult(call_count=len(chunk), output={"0xdai": len(chunk)})

    client.abi_multi_call_chunk.side_effect = multi_call
    client.balance_of_chunk.side_effect = balance_of
    client.assets_locked_chunk.side_effect = assets_locked
    client.abi_call.return_value = {"output": "7", "ethCallCount": 1}
    return client


@pytest.fixture()
def api(client):
    return SdkApi(client=client, aggregator=BatchAggregator())


class TestAbi:
    async def test_multi_call_uses_5000_chunks(self, api, client):
        combined = await api.abi.multi_call({"name": "allPairs"}, make_calls(12001), block=1, chain="polygon")

        sizes = [len(call.args[0]) for call in client.abi_multi_call_chunk.call_args_list]
        assert sizes == [5000, 5000, 2001]
        assert combined.output == list(range(12001))
        assert api.eth_call_count == 12001

    async def test_chunk_size_override(self, api, client):
        await api.abi.multi_call("erc20:symbol", make_calls(10), chunk_size=4)
        sizes = [len(call.args[0]) for call in client.abi_multi_call_chunk.call_args_list]
        assert sizes == [4, 4, 2]

    async def test_call_counted(self, api):
        result = await api.abi.call({"name": "allPairsLength"}, "0xfactory")
        assert result["output"] == "7"
        assert api.eth_call_count == 1
        api.reset_eth_call_count()
        assert api.eth_call_count == 0


class TestErc20:
    async def test_balance_of_multi_uses_2500_chunks(self, api, client):
        calls = make_calls(6000)
        balances = await api.erc20.balance_of_multi(calls, block=1, chain="polygon")

        sizes = [len(call.args[0]) for call in client.balance_of_chunk.call_args_list]
        assert sizes == [2500, 2500, 1000]
        assert balances == {"0xtoken": 3}
        assert api.eth_call_count == 6000

    async def test_empty_returns_sentinel(self, api, client):
        assert await api.erc20.balance_of_multi([]) == {ZERO_ADDRESS: 0}
        client.balance_of_chunk.assert_not_called()


class TestCdp:
    async def test_generic_assets_locked(self, api, client):
        balances = await api.cdp.get_assets_locked([f"0x{i:040x}" for i in range(2500)])

        endpoints = {call.args[0] for call in client.assets_locked_chunk.call_args_list}
        sizes = [len(call.args[1]) for call in client.assets_locked_chunk.call_args_list]
        assert endpoints == {"/cdp/getAssetsLocked"}
        assert sizes == [1000, 1000, 500]
        assert balances == {"0xdai": 2500}

    async def test_maker_uses_3000_chunks(self, api, client):
        await api.cdp.maker.get_assets_locked(["0xv"] * 3500)

        sizes = [len(call.args[1]) for call in client.assets_locked_chunk.call_args_list]
        assert client.assets_locked_chunk.call_args_list[0].args[0] == "/cdp/maker/getAssetsLocked"
        assert sizes == [3000, 500]

    async def test_compound_and_aave_endpoints(self, api, client):
        await api.cdp.compound.get_assets_locked(["0xa"])
        await api.cdp.aave.get_assets_locked(["0xb"])

        endpoints = [call.args[0] for call in client.assets_locked_chunk.call_args_list]
        assert endpoints == ["/cdp/compound/getAssetsLocked", "/cdp/aave/getAssetsLocked"]


class TestUtil:
    async def test_delegates_to_client(self, api, client):
        client.supported_tokens.return_value = [{"symbol": "USDC"}]
        client.lookup_block.return_value = 123

        assert await api.util.supported_tokens() == [{"symbol": "USDC"}]
        assert await api.util.lookup_block(1600000000, "polygon") == 123
        client.lookup_block.assert_awaited_once_with(1600000000, "polygon")


class TestPassthrough:
    async def test_erc20_single_reads(self, api, client):
        client.post.return_value = {"output": "18", "ethCallCount": 1}

        assert await api.erc20.decimals("0xusdc") == {"output": "18", "ethCallCount": 1}
        await api.erc20.balance_of("0xusdc", "0xpair", block=5, chain="polygon")

        assert client.post.await_args_list[0].args == ("/erc20/decimals", {"target": "0xusdc"})
        assert client.post.await_args_list[1].args == (
            "/erc20/balanceOf",
            {"target": "0xusdc", "owner": "0xpair", "block": 5, "chain": "polygon"},
        )
        assert api.eth_call_count == 2

    async def test_eth_balances(self, api, client):
        client.post.return_value = {"output": [], "ethCallCount": 3}

        await api.eth.get_balances(("0xa", "0xb", "0xc"), block=9)

        endpoint, payload = client.post.await_args.args
        assert endpoint == "/eth/getBalances"
        assert payload["targets"] == ["0xa", "0xb", "0xc"]
        assert api.eth_call_count == 3

    async def test_util_logs_and_token_list(self, api, client):
        client.post.return_value = {"output": []}

        await api.util.get_logs(target="0xfactory", topic="PairCreated", fromBlock=1, toBlock=2)
        await api.util.token_list()

        assert client.post.await_args_list[0].args == (
            "/util/getLogs",
            {"target": "0xfactory", "topic": "PairCreated", "fromBlock": 1, "toBlock": 2},
        )
        assert client.post.await_args_list[1].args == ("/util/tokenList",)
        assert api.eth_call_count == 0
