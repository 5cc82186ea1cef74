"""
Concurrent access control for typingskit.

Two layers of exclusion protect the shared resources (the ExternalTools
installation and the project's typings directory):

- AcquisitionGate: an in-process lock that admits exactly one acquisition
  attempt at a time, across every event loop and thread. Waiting coroutines
  suspend instead of blocking their loop. A single shared gate serves every
  coordinator in the process unless one is injected explicitly.
- tools_install_lock: a cross-process file lock (via `filelock`) held while
  the acquisition tool is installed into the shared tools directory.

Usage:
    from typingskit.core.locking import get_shared_gate, tools_install_lock

    gate = get_shared_gate()
    async with gate:
        # Only one acquisition runs here at a time
        async with tools_install_lock(tools_dir):
            # Safe to npm-install into tools_dir
            pass
"""

import asyncio
import logging
import threading
import weakref
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from filelock import AsyncFileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)

INSTALL_LOCK_NAME = "install.lock"

# Seconds between attempts to take the gate while another loop holds it
GATE_POLL_INTERVAL = 0.01


class AcquisitionGate:
    """
    Process-wide mutual-exclusion gate for acquisition attempts.

    Exclusion is held by a threading.Lock, so it spans every event loop and
    thread in the process. Coroutines on the same loop first queue on a
    per-loop asyncio.Lock, so at most one of them per loop polls for the
    thread lock. Only mutual exclusion is guaranteed; waiters are not
    promised any particular wake-up order.

    Example:
        >>> gate = AcquisitionGate()
        >>> async with gate:
        ...     await do_acquisition()
    """

    def __init__(self) -> None:
        self._thread_lock = threading.Lock()
        self._loop_locks = weakref.WeakKeyDictionary()
        self._loop_locks_guard = threading.Lock()

    @property
    def locked(self) -> bool:
        """True while an acquisition attempt holds the gate."""
        return self._thread_lock.locked()

    def _loop_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        with self._loop_locks_guard:
            lock = self._loop_locks.get(loop)
            if lock is None:
                lock = asyncio.Lock()
                self._loop_locks[loop] = lock
            return lock

    async def _acquire_thread_lock(self) -> None:
        # Holders on other loops or threads release without notifying this
        # loop, so poll; a cancelled waiter never owns the lock
        while not self._thread_lock.acquire(blocking=False):
            await asyncio.sleep(GATE_POLL_INTERVAL)

    async def __aenter__(self) -> "AcquisitionGate":
        loop_lock = self._loop_lock()
        await loop_lock.acquire()
        try:
            await self._acquire_thread_lock()
        except BaseException:
            loop_lock.release()
            raise
        logger.debug("Acquired acquisition gate")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self._thread_lock.release()
        self._loop_lock().release()
        logger.debug("Released acquisition gate")


_shared_gate: Optional[AcquisitionGate] = None
_shared_gate_guard = threading.Lock()


def get_shared_gate() -> AcquisitionGate:
    """
    Get the gate shared by every coordinator in this process.

    Returns:
        The process-wide AcquisitionGate (created on first call)
    """
    global _shared_gate
    with _shared_gate_guard:
        if _shared_gate is None:
            _shared_gate = AcquisitionGate()
        return _shared_gate


def reset_shared_gate() -> None:
    """Drop the shared gate so the next caller gets a fresh one."""
    global _shared_gate
    _shared_gate = None


@asynccontextmanager
async def tools_install_lock(tools_dir: Path, timeout: float = 300):
    """
    Acquire the cross-process lock guarding installs into tools_dir.

    The lock file lives inside tools_dir, so the directory must already
    exist. Waiting happens in a worker thread, leaving the event loop free.

    Args:
        tools_dir: Shared ExternalTools directory
        timeout: Maximum wait time in seconds (default: 300 for slow installs)

    Yields:
        None

    Raises:
        LockTimeout: If the lock can't be acquired within timeout
    """
    lock_path = Path(tools_dir) / INSTALL_LOCK_NAME
    lock = AsyncFileLock(lock_path, timeout=timeout)

    try:
        async with lock:
            logger.debug(f"Acquired tools install lock: {lock_path}")
            yield
            logger.debug(f"Released tools install lock: {lock_path}")
    except LockTimeout as e:
        logger.error(
            f"Could not acquire tools install lock after {timeout}s. "
            "Another process may be installing the acquisition tool."
        )
        raise LockTimeout(str(lock_path)) from e
