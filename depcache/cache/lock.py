"""
Advisory file locks guarding cache entries.

Writers take an exclusive lock on the entry's temporary path, readers a shared
lock on the final path. Locks are bound to an open file description, so two
threads of the same process that open the file separately exclude each other
just like two processes do.

By default acquisition blocks until the lock is granted. A timeout may be
configured; it does not change the protocol, it only bounds the wait.
"""

import fcntl
import time
from contextlib import contextmanager
from enum import Enum
from typing import IO, Optional

from depcache.exceptions import LockTimeoutError


class LockMode(Enum):
    EXCLUSIVE = fcntl.LOCK_EX
    SHARED = fcntl.LOCK_SH


_POLL_INTERVAL = 0.1


def acquire(
    handle: IO, mode: LockMode = LockMode.EXCLUSIVE, timeout: Optional[float] = None
) -> None:
    """
    Acquire a lock on an open file.

    Args:
        handle: Open file object to lock
        mode: Exclusive (write) or shared (read) lock
        timeout: Maximum time to wait in seconds. None blocks indefinitely.

    Raises:
        LockTimeoutError: If a timeout is set and the lock is not granted in time
    """
    if timeout is None:
        fcntl.flock(handle, mode.value)
        return

    start_time = time.monotonic()
    while True:
        try:
            fcntl.flock(handle, mode.value | fcntl.LOCK_NB)
            return
        except BlockingIOError:
            if time.monotonic() - start_time > timeout:
                raise LockTimeoutError(getattr(handle, "name", repr(handle)), timeout)
            time.sleep(_POLL_INTERVAL)


def release(handle: IO) -> None:
    fcntl.flock(handle, fcntl.LOCK_UN)


@contextmanager
def locked(
    handle: IO, mode: LockMode = LockMode.EXCLUSIVE, timeout: Optional[float] = None
):
    """
    Hold a lock on ``handle`` for the duration of the block.

    The lock is released on every exit path, including exceptions.

    Yields:
        The locked file handle
    """
    acquire(handle, mode, timeout)
    try:
        yield handle
    finally:
        if not handle.closed:
            release(handle)
