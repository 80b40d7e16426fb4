"""
Tests for the readiness gate.
"""

import asyncio
import threading

import pytest
from unittest.mock import MagicMock

from service_proxy.app.domain.readiness import READY_MESSAGE, ReadinessGate


class TestReadinessGate:
    """Test cases for ReadinessGate."""

    @pytest.fixture
    def logger(self):
        return MagicMock()

    @pytest.fixture
    def gate(self, logger):
        return ReadinessGate(logger=logger)

    def test_starts_not_ready(self, gate):
        assert gate.is_ready() is False

    def test_mark_ready_opens_gate(self, gate, logger):
        assert gate.mark_ready() is True
        assert gate.is_ready() is True
        logger.info.assert_called_once_with(READY_MESSAGE)

    def test_repeated_mark_ready_logs_once(self, gate, logger):
        results = [gate.mark_ready() for _ in range(5)]

        assert results == [True, False, False, False, False]
        assert gate.is_ready() is True
        assert logger.info.call_count == 1

    def test_concurrent_mark_ready_single_transition(self, gate, logger):
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(gate.mark_ready())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
        assert logger.info.call_count == 1

    def test_listeners_run_once(self, gate):
        listener = MagicMock()
        gate.add_listener(listener)

        gate.mark_ready()
        gate.mark_ready()

        listener.assert_called_once_with()

    def test_listener_added_after_ready_runs_immediately(self, gate):
        gate.mark_ready()
        listener = MagicMock()

        gate.add_listener(listener)

        listener.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_wait_ready_resolves_on_transition(self, gate):
        waiter = asyncio.ensure_future(gate.wait_ready(timeout=1.0))
        await asyncio.sleep(0)
        assert not waiter.done()

        gate.mark_ready()

        assert await waiter is True

    @pytest.mark.asyncio
    async def test_wait_ready_resolves_from_other_thread(self, gate):
        timer = threading.Timer(0.05, gate.mark_ready)
        timer.start()
        try:
            assert await gate.wait_ready(timeout=2.0) is True
        finally:
            timer.join()

    @pytest.mark.asyncio
    async def test_wait_ready_times_out(self, gate):
        assert await gate.wait_ready(timeout=0.01) is False
        assert gate.is_ready() is False

    @pytest.mark.asyncio
    async def test_wait_ready_when_already_ready(self, gate):
        gate.mark_ready()
        assert await gate.wait_ready() is True

    @pytest.mark.asyncio
    async def test_timed_out_waiters_are_discarded(self, gate):
        for _ in range(5):
            assert await gate.wait_ready(timeout=0.001) is False

        assert gate._waiters == []

    @pytest.mark.asyncio
    async def test_timeout_keeps_other_waiters(self, gate):
        pending = asyncio.ensure_future(gate.wait_ready(timeout=1.0))
        await asyncio.sleep(0)

        assert await gate.wait_ready(timeout=0.001) is False
        assert len(gate._waiters) == 1

        gate.mark_ready()
        assert await pending is True
