"""
Tests for CompletionSignal and SignalRegistry
"""

import asyncio

import pytest

from threadrunner.core.errors import DuplicateTaskError, SignalAlreadySetError
from threadrunner.core.models import TaskRecord
from threadrunner.core.registry import SignalRegistry
from threadrunner.core.signal import CompletionSignal, SignalResult


class TestCompletionSignal:
    """Test one-shot completion signal behaviour"""

    def test_new_signal_is_unset(self):
        signal = CompletionSignal("A")
        assert not signal.is_set
        assert signal.result is None
        assert "unset" in repr(signal)

    @pytest.mark.asyncio
    async def test_wait_on_already_set_signal_returns_immediately(self):
        signal = CompletionSignal("A")
        signal.set_success()

        result = await asyncio.wait_for(signal.wait(), timeout=0.1)
        assert result.succeeded
        assert result.cause is None

    @pytest.mark.asyncio
    async def test_wait_blocks_until_set(self):
        signal = CompletionSignal("A")
        waiter = asyncio.create_task(signal.wait())

        await asyncio.sleep(0.01)
        assert not waiter.done()

        signal.set_success()
        result = await asyncio.wait_for(waiter, timeout=1)
        assert result.succeeded

    @pytest.mark.asyncio
    async def test_all_waiters_released_on_failure(self):
        """Fan-out: every waiter sees the same failure"""
        signal = CompletionSignal("A")
        cause = RuntimeError("boom")
        waiters = [asyncio.create_task(signal.wait()) for _ in range(5)]

        await asyncio.sleep(0)
        signal.set_failure(cause)

        results = await asyncio.wait_for(asyncio.gather(*waiters), timeout=1)
        assert all(r.failed for r in results)
        assert all(r.cause is cause for r in results)

    @pytest.mark.asyncio
    async def test_repeated_wait_returns_same_outcome(self):
        signal = CompletionSignal("A")
        signal.set_failure(ValueError("bad"))

        first = await signal.wait()
        second = await signal.wait()
        third = await signal.wait()
        assert first == second == third
        assert first.failed

    def test_second_write_is_rejected(self):
        signal = CompletionSignal("A")
        signal.set_success()

        with pytest.raises(SignalAlreadySetError):
            signal.set_success()
        with pytest.raises(SignalAlreadySetError):
            signal.set_failure(RuntimeError("late"))

        # First writer wins
        assert signal.result.succeeded

    def test_unwrap_reraises_cause(self):
        cause = KeyError("missing")
        with pytest.raises(KeyError):
            SignalResult.failure(cause).unwrap()

        SignalResult.success().unwrap()


class TestSignalRegistry:
    """Test registry construction and lookups"""

    def test_one_unset_signal_per_record(self):
        records = [
            TaskRecord(task_id="A", duration=1),
            TaskRecord(task_id="B", duration=1, blocking_task="A"),
        ]
        registry = SignalRegistry.from_records(records)

        assert len(registry) == 2
        assert set(registry) == {"A", "B"}
        assert not registry["A"].is_set
        assert sorted(registry.pending()) == ["A", "B"]

    def test_lookup_of_unknown_task_returns_none(self):
        registry = SignalRegistry.from_records([TaskRecord(task_id="A", duration=1)])

        assert registry.lookup("Z") is None
        assert registry.lookup("A") is registry["A"]
        assert "Z" not in registry

    def test_duplicate_ids_are_rejected(self):
        records = [
            TaskRecord(task_id="A", duration=1),
            TaskRecord(task_id="A", duration=2),
        ]
        with pytest.raises(DuplicateTaskError) as exc_info:
            SignalRegistry.from_records(records)

        assert exc_info.value.task_ids == ["A"]
