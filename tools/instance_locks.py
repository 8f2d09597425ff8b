"""
InstanceLocks — at most one start/stop sequence per instance.

A second request for an instance that is already being started or
stopped is rejected with InstanceBusyError instead of racing the first
one at the control plane. Requests are never queued.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from tools.errors import InstanceBusyError
from tools.models import InstanceDescriptor

logger = logging.getLogger("InstanceLocks")


class InstanceLocks:
    """Keyed asyncio.Lock registry.

    All access happens on the bot's event loop, and claim() checks and
    acquires with no await in between, so the check cannot go stale.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, str] = {}  # descriptor key → operation label

    def is_busy(self, descriptor: InstanceDescriptor) -> bool:
        lock = self._locks.get(descriptor.key)
        return lock is not None and lock.locked()

    def holder(self, descriptor: InstanceDescriptor) -> Optional[str]:
        """Label of the operation currently holding the instance, if any."""
        return self._holders.get(descriptor.key)

    @asynccontextmanager
    async def claim(self, descriptor: InstanceDescriptor, operation: str = "") -> AsyncIterator[None]:
        """Hold the instance for the duration of the block.

        Raises:
            InstanceBusyError: another sequence already holds it.
        """
        key = descriptor.key
        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked():
            current = self._holders.get(key, "another operation")
            logger.warning(f"{key} busy with {current}; rejecting {operation or 'request'}")
            raise InstanceBusyError(f"{key} is busy with {current}")

        async with lock:
            self._holders[key] = operation or "an operation"
            try:
                yield
            finally:
                self._holders.pop(key, None)
