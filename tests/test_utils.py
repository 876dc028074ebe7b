"""Tests for retry, fan-out and timing helpers."""
import asyncio
import logging

import pytest

from eos_eapi.errors import CommandError, EapiConnectionError
from eos_eapi.utils import (
    NodeResult,
    OperationTiming,
    PerfStats,
    global_stats,
    run_on_nodes,
    setup_logging,
    timed,
    timed_section,
    with_retry,
)
from eos_eapi.utils.connection import RETRYABLE_EXCEPTIONS


class TestWithRetry:
    """Tests for retry decorator."""

    @pytest.mark.asyncio
    async def test_success_no_retry(self):
        """Successful coroutine doesn't retry."""
        call_count = 0

        @with_retry(max_attempts=3)
        async def succeeding_func():
            nonlocal call_count
            call_count += 1
            return "success"

        assert await succeeding_func() == "success"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retry_then_success(self):
        """Connection errors are retried."""
        call_count = 0

        @with_retry(max_attempts=3, min_wait=0.01, max_wait=0.1)
        async def failing_then_succeeding():
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise EapiConnectionError("Request timed out after 60s", host="leaf1")
            return "success"

        assert await failing_then_succeeding() == "success"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_max_retries_exceeded(self):
        """The last error is raised after max attempts."""
        call_count = 0

        @with_retry(max_attempts=3, min_wait=0.01, max_wait=0.1)
        async def always_failing():
            nonlocal call_count
            call_count += 1
            raise TimeoutError("Always times out")

        with pytest.raises(TimeoutError):
            await always_failing()
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_command_error_not_retried(self):
        """Device errors are not retried."""
        call_count = 0

        @with_retry(max_attempts=3, min_wait=0.01, max_wait=0.1)
        async def rejected():
            nonlocal call_count
            call_count += 1
            raise CommandError(1002, "invalid command", errors=["Invalid input"])

        with pytest.raises(CommandError):
            await rejected()
        assert call_count == 1

    def test_retryable_exceptions(self):
        """Transport errors are retryable, device errors are not."""
        assert EapiConnectionError in RETRYABLE_EXCEPTIONS
        assert CommandError not in RETRYABLE_EXCEPTIONS


class FakeNode:
    def __init__(self, name, value=None, error=None):
        self.name = name
        self.value = value
        self.error = error


class TestRunOnNodes:
    """Tests for parallel execution across nodes."""

    @pytest.mark.asyncio
    async def test_results_in_order(self):
        """Results come back in node order, failures captured."""
        nodes = [
            FakeNode("leaf1", value="4.30.1F"),
            FakeNode("leaf2", error=EapiConnectionError("unreachable", host="leaf2")),
            FakeNode("leaf3", value="4.29.2F"),
        ]

        async def version(node):
            await asyncio.sleep(0)
            if node.error:
                raise node.error
            return node.value

        results = await run_on_nodes(nodes, version)

        assert [r.name for r in results] == ["leaf1", "leaf2", "leaf3"]
        assert [r.success for r in results] == [True, False, True]
        assert results[0].value == "4.30.1F"
        assert isinstance(results[1].error, EapiConnectionError)

    def test_node_result(self):
        """NodeResult serializes and prints its status."""
        ok = NodeResult("leaf1", True, value=1)
        failed = NodeResult("leaf2", False, error=ValueError("bad"))

        assert ok.to_dict() == {"name": "leaf1", "success": True, "value": 1, "error": ""}
        assert failed.to_dict()["error"] == "bad"
        assert "OK" in repr(ok)
        assert "FAILED" in repr(failed)


class TestTiming:
    """Tests for timing helpers."""

    @pytest.mark.asyncio
    async def test_timed_records(self):
        """Timed coroutines feed the global stats."""
        global_stats.clear()

        class Target:
            host = "leaf1"

            @timed("probe")
            async def probe(self):
                return 42

        assert await Target().probe() == 42
        assert global_stats.count("probe") == 1

    @pytest.mark.asyncio
    async def test_timed_section_failure(self, caplog):
        """Failures are logged as warnings and re-raised."""
        caplog.set_level(logging.DEBUG, logger="eos_eapi.perf")

        with pytest.raises(RuntimeError):
            async with timed_section("handle_call", host="leaf1", commands=2):
                raise RuntimeError("boom")

        assert any("FAIL: boom" in r.message and "commands=2" in r.message for r in caplog.records)

    def test_perf_stats_bounded(self):
        """Many records keep one fixed-size aggregate per operation."""
        stats = PerfStats()
        for i in range(5000):
            stats.record("execute", float(i % 10))

        timing = stats.get("execute")
        assert isinstance(timing, OperationTiming)
        assert timing.count == 5000
        assert timing.min == 0.0
        assert timing.max == 9.0
        assert timing.avg == pytest.approx(4.5)
        assert list(stats._data) == ["execute"]

    @pytest.mark.asyncio
    async def test_execute_records_aggregate(self):
        """Timed calls update the global aggregate in place."""
        global_stats.clear()

        class Target:
            host = "leaf1"

            @timed("execute")
            async def execute(self):
                return []

        target = Target()
        for _ in range(100):
            await target.execute()
        timing = global_stats.get("execute")
        for _ in range(100):
            await target.execute()

        assert global_stats.get("execute") is timing
        assert timing.count == 200

    def test_perf_stats_summary(self):
        """Summary lists each operation."""
        stats = PerfStats()
        stats.record("execute", 150.5)
        stats.record("execute", 145.2)

        summary = stats.summary()
        assert "execute" in summary
        assert "count=   2" in summary

    def test_setup_logging(self, monkeypatch, tmp_path):
        """setup_logging writes to EAPI_LOG_FILE and runs once."""
        main_logger = logging.getLogger("eos_eapi")
        perf_logger = logging.getLogger("eos_eapi.perf")
        monkeypatch.setenv("EAPI_LOG_FILE", str(tmp_path / "eapi.log"))
        monkeypatch.setattr(main_logger, "handlers", [])
        monkeypatch.setattr(perf_logger, "handlers", [])
        monkeypatch.setattr(perf_logger, "propagate", True)
        monkeypatch.setattr(main_logger, "_eapi_configured", False, raising=False)

        setup_logging()
        setup_logging()

        assert len(main_logger.handlers) == 2
        assert (tmp_path / "eapi.log").exists()
        assert (tmp_path / "eapi-perf.log").exists()
