"""Tests for the progress observers."""

import logging

from dextvl.engine.progress import LoggingProgress, TqdmProgress


class TestLoggingProgress:
    def test_logs_ratio(self, caplog):
        with caplog.at_level(logging.INFO, logger="dextvl.engine.progress"):
            LoggingProgress("abi/multiCall")(1, 4)
        assert "abi/multiCall: 1/4 chunks (25%)" in caplog.text


class TestTqdmProgress:
    def test_bar_closes_on_last_chunk(self):
        observer = TqdmProgress("balances")
        observer(1, 3)
        assert observer._bar is not None
        assert observer._bar.n == 1

        observer(3, 3)
        assert observer._bar is None

    def test_reusable_after_close(self):
        observer = TqdmProgress("balances")
        observer(1, 1)
        observer(1, 2)
        assert observer._bar.total == 2

    def test_close_before_final_chunk(self):
        observer = TqdmProgress("balances")
        observer(1, 3)

        observer.close()
        observer.close()
        assert observer._bar is None
