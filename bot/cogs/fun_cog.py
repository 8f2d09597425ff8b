"""
Fun Cog — stateless replies.

Commands:
  !ping — replies "Pong!"
  !dice — replies with a number from 1 to 100
"""

import logging
from discord.ext import commands

from tools.dice_roller import roll_d100

logger = logging.getLogger("Fun_Cog")

PING_REPLY = "Pong!"


class FunCog(commands.Cog, name="Fun Commands"):
    """Simple replies that never touch the control plane."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.dispatcher = bot.dispatcher
        self.notifier = bot.notifier
        self._handlers = {
            "!ping": self.ping_cmd,
            "!dice": self.dice_cmd,
        }

    async def cog_load(self):
        for command, handler in self._handlers.items():
            self.dispatcher.register(command, handler)

    async def cog_unload(self):
        for command in self._handlers:
            self.dispatcher.unregister(command)

    async def ping_cmd(self, message):
        await self.notifier.notify(message.channel, PING_REPLY)

    async def dice_cmd(self, message):
        """Roll a d100."""
        result = roll_d100()
        logger.debug(f"{message.author} rolled {result}")
        await self.notifier.notify(message.channel, str(result))


async def setup(bot: commands.Bot):
    await bot.add_cog(FunCog(bot))
