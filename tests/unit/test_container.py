"""Tests for Container wiring."""

import io
import sys

from dextvl.config import Settings
from dextvl.container import Container, build_progress_factory
from dextvl.engine.progress import LoggingProgress, TqdmProgress
from dextvl.projects.dfyn import DfynAdapter


class TestContainer:
    async def test_builds_adapter_from_settings(self):
        container = Container()
        container.settings.override(
            Settings(defipulse_api_url="https://sdk", defipulse_key="k", adapter_concurrency=4, balance_chunk_size=100)
        )

        adapter = container.dfyn()
        aggregator = container.aggregator()

        assert isinstance(adapter, DfynAdapter)
        assert adapter._balance_chunk_size == 100
        assert aggregator._concurrency_limit == 4
        assert container.sdk_api().abi._chunk_size == 5000
        assert container.sdk_client()._url("/abi/call") == "https://sdk/k/abi/call"
        await container.http_client().close()

    async def test_shared_call_counter(self):
        container = Container()
        assert container.sdk_api()._aggregator is container.aggregator()
        await container.http_client().close()


class TestProgressFactory:
    def test_bar_on_terminal(self):
        assert build_progress_factory(True, interactive=True) is TqdmProgress

    def test_log_lines_off_terminal(self):
        assert build_progress_factory(True, interactive=False) is LoggingProgress

    def test_detects_terminal(self, monkeypatch):
        monkeypatch.setattr(sys, "stderr", io.StringIO())
        assert build_progress_factory(True) is LoggingProgress

    def test_disabled(self):
        assert build_progress_factory(False) is None
