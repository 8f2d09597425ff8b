"""
ChatNotifier — best-effort delivery of bot messages to Discord channels.

Sending can fail (network error, missing permissions, deleted channel).
Those failures never abort a command: they are logged, counted, and
dropped. The counters let operators see how often delivery fails.

Pure Python — no discord imports. Channels are anything with an async
send(text) method.
"""

import logging
from typing import Callable, Optional

from tools.errors import ChatDeliveryError

logger = logging.getLogger("ChatNotifier")

DISCORD_MESSAGE_LIMIT = 2000


def split_message(text: str, limit: int = DISCORD_MESSAGE_LIMIT) -> list:
    """Split text into chunks Discord will accept."""
    if not text:
        return [text]
    return [text[i : i + limit] for i in range(0, len(text), limit)]


class ChatNotifier:
    """Sends text to channels, swallowing and recording delivery failures.

    Args:
        ops_channel_resolver: Optional callable returning the operator log
            channel (or None). Used by report() for orchestration failures.
    """

    def __init__(self, ops_channel_resolver: Optional[Callable[[], object]] = None):
        self._resolve_ops_channel = ops_channel_resolver
        self.sent = 0
        self.failed = 0

    async def deliver(self, channel, text: str) -> None:
        """Send text, raising ChatDeliveryError on any send failure."""
        try:
            for chunk in split_message(text):
                await channel.send(chunk)
        except Exception as e:
            raise ChatDeliveryError(f"Could not send to channel {getattr(channel, 'id', '?')}: {e}") from e

    async def notify(self, channel, text: str) -> bool:
        """Best-effort send. Returns True if the message went out."""
        try:
            await self.deliver(channel, text)
        except ChatDeliveryError as e:
            self.failed += 1
            logger.warning(f"Error sending message: {e} (failures so far: {self.failed})")
            return False
        self.sent += 1
        return True

    async def report(self, text: str) -> None:
        """Surface an operational failure in the log and the ops channel."""
        logger.error(text)
        channel = self._resolve_ops_channel() if self._resolve_ops_channel else None
        if channel is None:
            return
        await self.notify(channel, f"```\n{text[:1900]}\n```")
