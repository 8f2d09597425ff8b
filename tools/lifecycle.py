"""
Lifecycle — start/stop sequences for the game-server instance.

Start: request start → "starting" notice → wait for RUNNING → fetch IP →
       "ready" notice with ip:port
Stop:  request stop  → "stopping" notice → wait for TERMINATED →
       "stopped" notice

Control-plane failures (TransportError) and poll timeouts propagate to the
caller; nothing is rolled back. Chat notices are best-effort through
ChatNotifier and never abort a sequence.

These functions take no locks. Two concurrent calls run two independent
sequences; InstanceLocks in the power cog keeps that from happening.
"""

import logging
from typing import Optional

from tools.models import InstanceDescriptor
from tools.notifier import ChatNotifier
from tools.poller import DEFAULT_POLL_INTERVAL, wait_for_state

logger = logging.getLogger("Lifecycle")

STATE_RUNNING = "RUNNING"
STATE_TERMINATED = "TERMINATED"
DEFAULT_GAME_PORT = 8211

STARTING_TEXT = "\U0001f7e1 Starting the {label} server... this can take a minute."
STARTED_TEXT = "\U0001f7e2 The {label} server is up! Connect to `{address}`"
STOPPING_TEXT = "\U0001f7e0 Stopping the {label} server..."
STOPPED_TEXT = "\U0001f534 The {label} server has been stopped."


def format_address(ip: str, port: int = DEFAULT_GAME_PORT) -> str:
    return f"{ip}:{port}"


async def start_instance(
    client,
    descriptor: InstanceDescriptor,
    notifier: ChatNotifier,
    channel,
    *,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = None,
    port: int = DEFAULT_GAME_PORT,
    label: str = "Palworld",
    **poll_kwargs,
) -> str:
    """Boot the instance and announce its address.

    Returns:
        The "ip:port" address that was announced.

    Raises:
        TransportError: a control-plane call failed.
        PollTimeoutError: the instance never reached RUNNING.
    """
    await client.start(descriptor)
    await notifier.notify(channel, STARTING_TEXT.format(label=label))

    polls = await wait_for_state(
        client, descriptor, STATE_RUNNING,
        interval=interval, timeout=timeout, **poll_kwargs,
    )

    address = format_address(await client.ip(descriptor), port)
    logger.info(f"{descriptor.key} running at {address} ({polls} poll(s))")
    await notifier.notify(channel, STARTED_TEXT.format(label=label, address=address))
    return address


async def stop_instance(
    client,
    descriptor: InstanceDescriptor,
    notifier: ChatNotifier,
    channel,
    *,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = None,
    label: str = "Palworld",
    **poll_kwargs,
) -> None:
    """Shut the instance down and announce it.

    Raises:
        TransportError: a control-plane call failed.
        PollTimeoutError: the instance never reached TERMINATED.
    """
    await client.stop(descriptor)
    await notifier.notify(channel, STOPPING_TEXT.format(label=label))

    polls = await wait_for_state(
        client, descriptor, STATE_TERMINATED,
        interval=interval, timeout=timeout, **poll_kwargs,
    )

    logger.info(f"{descriptor.key} terminated ({polls} poll(s))")
    await notifier.notify(channel, STOPPED_TEXT.format(label=label))
