"""
CommandDispatcher — exact-match text command routing.

Maps literal message texts ("!ping", "!pw start", ...) to async handlers.
Matching is verbatim: no prefix matching, no argument parsing, no
whitespace stripping. Anything that is not an exact literal is ignored.

Pure Python — no discord imports. Handlers receive the message object
as-is and do their own I/O.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List

logger = logging.getLogger("CommandDispatcher")

Handler = Callable[[Any], Awaitable[None]]


class CommandDispatcher:
    """Routes a message to at most one handler by exact content match.

    The table is filled at startup (cogs register in cog_load) and only
    read afterwards, so concurrent dispatches need no locking.
    """

    def __init__(self):
        self._handlers: Dict[str, Handler] = {}

    def register(self, command: str, handler: Handler) -> None:
        if command in self._handlers:
            raise ValueError(f"Command already registered: {command!r}")
        self._handlers[command] = handler
        logger.debug(f"Registered {command!r}")

    def unregister(self, command: str) -> None:
        self._handlers.pop(command, None)

    @property
    def commands(self) -> List[str]:
        return sorted(self._handlers)

    async def dispatch(self, message) -> bool:
        """Run the handler for message.content, if there is one.

        Returns:
            True if a handler ran, False if the text is not a command.
        """
        handler = self._handlers.get(message.content)
        if handler is None:
            return False
        logger.info(f"{getattr(message, 'author', '?')}: {message.content}")
        await handler(message)
        return True
