"""
Power Cog — start, stop, and inspect the game-server instance.

Commands:
  !pw start  — boot the server, wait for RUNNING, post its address
  !pw stop   — shut the server down, wait for TERMINATED
  !pw ip     — post the server address
  !pw status — post the current instance state

Only one start/stop sequence may run per instance; a second request
while one is in flight is rejected. Control-plane failures are logged
and sent to the ops log channel. The requesting channel only sees the
progress notices that went out before the failure.
"""

import logging
from discord.ext import commands

from tools.errors import (
    ConfigurationError,
    InstanceBusyError,
    PollTimeoutError,
    TransportError,
)
from tools.lifecycle import format_address, start_instance, stop_instance

logger = logging.getLogger("Power_Cog")

BUSY_TEXT = "⏳ The {label} server is already {holder}. Try again when that finishes."
_HOLDER_LABELS = {"start": "starting", "stop": "stopping"}


class PowerCog(commands.Cog, name="Server Power"):
    """Lifecycle commands for the configured instance."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.settings = bot.settings
        self.descriptor = bot.settings.instance
        self.client = bot.control_client
        self.notifier = bot.notifier
        self.locks = bot.instance_locks
        self.dispatcher = bot.dispatcher
        self._handlers = {
            "!pw start": self.start_cmd,
            "!pw stop": self.stop_cmd,
            "!pw ip": self.ip_cmd,
            "!pw status": self.status_cmd,
        }

    async def cog_load(self):
        for command, handler in self._handlers.items():
            self.dispatcher.register(command, handler)
        logger.info(f"Controlling {self.descriptor.key}")

    async def cog_unload(self):
        for command in self._handlers:
            self.dispatcher.unregister(command)

    # ------------------------------------------------------------------
    # !pw start / !pw stop
    # ------------------------------------------------------------------
    async def start_cmd(self, message):
        """Boot the server and announce its address."""
        await self._run_sequence(message, "start")

    async def stop_cmd(self, message):
        """Shut the server down."""
        await self._run_sequence(message, "stop")

    async def _run_sequence(self, message, operation: str):
        label = self.settings.server_label
        try:
            async with self.locks.claim(self.descriptor, operation):
                if operation == "start":
                    await start_instance(
                        self.client, self.descriptor, self.notifier, message.channel,
                        interval=self.settings.poll_interval,
                        timeout=self.settings.poll_timeout,
                        port=self.settings.game_port,
                        label=label,
                    )
                else:
                    await stop_instance(
                        self.client, self.descriptor, self.notifier, message.channel,
                        interval=self.settings.poll_interval,
                        timeout=self.settings.poll_timeout,
                        label=label,
                    )
        except InstanceBusyError:
            holder = _HOLDER_LABELS.get(self.locks.holder(self.descriptor), "busy")
            await self.notifier.notify(message.channel, BUSY_TEXT.format(label=label, holder=holder))
        except (TransportError, PollTimeoutError, ConfigurationError) as e:
            await self.notifier.report(
                f"!pw {operation} failed for {self.descriptor.key} "
                f"(requested by {message.author}): {type(e).__name__}: {e}"
            )

    # ------------------------------------------------------------------
    # !pw ip / !pw status
    # ------------------------------------------------------------------
    async def ip_cmd(self, message):
        """Post the server address."""
        try:
            ip = await self.client.ip(self.descriptor)
        except (TransportError, ConfigurationError) as e:
            await self.notifier.report(f"!pw ip failed for {self.descriptor.key}: {e}")
            return
        await self.notifier.notify(message.channel, format_address(ip, self.settings.game_port))

    async def status_cmd(self, message):
        """Post the current instance state."""
        try:
            state = await self.client.status(self.descriptor)
        except (TransportError, ConfigurationError) as e:
            await self.notifier.report(f"!pw status failed for {self.descriptor.key}: {e}")
            return
        text = f"{self.settings.server_label} server: `{state}`"
        holder = self.locks.holder(self.descriptor)
        if holder:
            text += f" ({_HOLDER_LABELS.get(holder, holder)} in progress)"
        await self.notifier.notify(message.channel, text)


async def setup(bot: commands.Bot):
    await bot.add_cog(PowerCog(bot))
