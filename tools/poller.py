"""
Poller — wait until the control plane reports a target instance state.

Calls status() at a fixed interval until the returned string equals the
target. With a timeout the wait is bounded and raises PollTimeoutError;
with timeout=None it polls until the state shows up.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from tools.errors import PollTimeoutError
from tools.models import InstanceDescriptor

logger = logging.getLogger("Poller")

DEFAULT_POLL_INTERVAL = 5.0


async def wait_for_state(
    client,
    descriptor: InstanceDescriptor,
    target: str,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Poll client.status(descriptor) until it equals target.

    Args:
        client: Anything with an async status(descriptor) -> str.
        descriptor: Instance to poll.
        target: Exact state string to wait for.
        interval: Seconds between polls.
        timeout: Maximum seconds to wait, or None to wait forever.
        sleep / clock: Injected for tests.

    Returns:
        Number of status() calls made (1 if the target was already reached).

    Raises:
        TransportError: status() failed. Not retried here.
        PollTimeoutError: timeout elapsed before the target was observed.
    """
    started = clock()
    attempts = 0

    while True:
        state = await client.status(descriptor)
        attempts += 1
        if state == target:
            logger.info(f"{descriptor.key} reached {target} after {attempts} poll(s)")
            return attempts

        elapsed = clock() - started
        if timeout is not None and elapsed + interval > timeout:
            raise PollTimeoutError(target, state, elapsed)

        logger.debug(f"{descriptor.key} is {state!r}, waiting for {target!r}")
        await sleep(interval)
