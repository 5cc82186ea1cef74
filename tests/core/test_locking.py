"""
Unit tests for the locking module.

Tests cover:
- AcquisitionGate mutual exclusion
- Shared gate lifecycle
- Cross-process tools install lock and timeouts
"""

import asyncio
import threading

import pytest
from filelock import FileLock, Timeout as LockTimeout

from typingskit.core.locking import (
    INSTALL_LOCK_NAME,
    AcquisitionGate,
    get_shared_gate,
    reset_shared_gate,
    tools_install_lock,
)


class TestAcquisitionGate:
    """Tests for AcquisitionGate."""

    @pytest.mark.asyncio
    async def test_locked_while_held(self):
        """Test that the gate reports when it is held."""
        gate = AcquisitionGate()

        assert gate.locked is False
        async with gate:
            assert gate.locked is True
        assert gate.locked is False

    @pytest.mark.asyncio
    async def test_released_on_exception(self):
        """Test that an exception inside the block releases the gate."""
        gate = AcquisitionGate()

        with pytest.raises(ValueError):
            async with gate:
                raise ValueError("boom")

        assert gate.locked is False

    @pytest.mark.asyncio
    async def test_mutual_exclusion(self):
        """Test that only one holder runs at a time."""
        gate = AcquisitionGate()
        active = 0
        max_active = 0

        async def worker():
            nonlocal active, max_active
            async with gate:
                active += 1
                max_active = max(max_active, active)
                await asyncio.sleep(0.01)
                active -= 1

        await asyncio.gather(*(worker() for _ in range(5)))

        assert max_active == 1

    @pytest.mark.asyncio
    async def test_waiter_suspends_until_release(self):
        """Test that a waiter stays suspended while the gate is held."""
        gate = AcquisitionGate()

        async def waiter():
            async with gate:
                return "done"

        async with gate:
            task = asyncio.create_task(waiter())
            await asyncio.sleep(0.01)
            assert not task.done()

        assert await task == "done"

    def test_usable_from_successive_event_loops(self):
        """Test that one gate serves contended waiters on two loops in turn."""
        gate = AcquisitionGate()
        max_active = 0
        active = 0

        async def worker():
            nonlocal active, max_active
            async with gate:
                active += 1
                max_active = max(max_active, active)
                await asyncio.sleep(0.01)
                active -= 1

        async def contend():
            await asyncio.gather(*(worker() for _ in range(3)))

        asyncio.run(contend())
        asyncio.run(contend())

        assert max_active == 1
        assert gate.locked is False

    def test_excludes_across_threads(self):
        """Test that loops in different threads take turns."""
        gate = AcquisitionGate()
        counter = threading.Lock()
        state = {"active": 0, "max_active": 0}
        errors = []

        async def worker():
            async with gate:
                with counter:
                    state["active"] += 1
                    state["max_active"] = max(state["max_active"], state["active"])
                await asyncio.sleep(0.02)
                with counter:
                    state["active"] -= 1

        async def contend():
            await asyncio.wait_for(
                asyncio.gather(*(worker() for _ in range(3))), timeout=10
            )

        def run_loop():
            try:
                asyncio.run(contend())
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=run_loop) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert state["max_active"] == 1
        assert gate.locked is False

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_keep_gate(self):
        """Test that a waiter cancelled mid-wait never owns the gate."""
        gate = AcquisitionGate()
        entered = threading.Event()

        async def hold():
            async with gate:
                entered.set()
                await asyncio.sleep(0.2)

        holder = threading.Thread(target=lambda: asyncio.run(hold()))
        holder.start()
        assert await asyncio.to_thread(entered.wait, 5)

        async def waiter():
            async with gate:
                pass

        task = asyncio.create_task(waiter())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        await asyncio.to_thread(holder.join)
        assert gate.locked is False

        async with gate:
            assert gate.locked is True
        assert gate.locked is False


class TestSharedGate:
    """Tests for the process-wide gate."""

    def test_shared_gate_is_singleton(self):
        assert get_shared_gate() is get_shared_gate()

    def test_reset_creates_new_gate(self):
        first = get_shared_gate()
        reset_shared_gate()
        assert get_shared_gate() is not first


class TestToolsInstallLock:
    """Tests for the cross-process install lock."""

    @pytest.mark.asyncio
    async def test_creates_lock_file(self, tmp_path):
        """Test that the lock file is placed in the tools directory."""
        async with tools_install_lock(tmp_path, timeout=5):
            assert (tmp_path / INSTALL_LOCK_NAME).exists()

        # Reacquiring proves the lock was released
        async with tools_install_lock(tmp_path, timeout=1):
            pass

    @pytest.mark.asyncio
    async def test_timeout_when_held_elsewhere(self, tmp_path):
        """Test that a held lock times out."""
        other = FileLock(tmp_path / INSTALL_LOCK_NAME)
        other.acquire()
        try:
            with pytest.raises(LockTimeout):
                async with tools_install_lock(tmp_path, timeout=0.1):
                    pass
        finally:
            other.release()
