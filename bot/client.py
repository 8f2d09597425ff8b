"""
Palworld Power Bot — Discord Bot Client

Core bot setup, logging, event handling, and message routing.
Commands are exact-match literals registered by Cogs (bot/cogs/) into a
shared CommandDispatcher; on_message hands every message to it.

To run: python orchestration/main.py
   or:  power-bot
"""

import os
import sys
import asyncio
import logging
from collections import deque
from typing import Optional

import discord
from discord.ext import commands

from tools.config import BotSettings, load_settings
from tools.control_client import ControlPlaneClient
from tools.dispatcher import CommandDispatcher
from tools.errors import ConfigurationError
from tools.instance_locks import InstanceLocks
from tools.notifier import ChatNotifier

logger = logging.getLogger("Power_Bot")

LOG_DIR = "logs"
LOG_FILE = os.path.join(LOG_DIR, "power_bot.log")

COGS = (
    "bot.cogs.fun_cog",
    "bot.cogs.power_cog",
)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
def setup_logging(level: str = "INFO", log_file: str = LOG_FILE) -> logging.Logger:
    """Configure root logging: UTF-8 log file plus stderr."""
    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )
    return logger


# ---------------------------------------------------------------------------
# Discord Bot Instance
# ---------------------------------------------------------------------------
def create_bot(settings: BotSettings,
               control_client: Optional[ControlPlaneClient] = None) -> commands.Bot:
    """Build the bot and attach shared services so cogs can reach them via self.bot.

    Routing goes through bot.dispatcher from on_message; the "!" prefix is unused
    and no discord.py prefix commands are registered.
    """
    intents = discord.Intents.default()
    intents.message_content = True
    bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

    def _ops_channel():
        if settings.ops_log_channel_id is None:
            return None
        channel = bot.get_channel(settings.ops_log_channel_id)
        if channel is None:
            logger.warning(f"Could not find ops log channel {settings.ops_log_channel_id}")
        return channel

    bot.settings = settings
    bot.dispatcher = CommandDispatcher()
    bot.notifier = ChatNotifier(ops_channel_resolver=_ops_channel)
    bot.instance_locks = InstanceLocks()
    bot.control_client = control_client or ControlPlaneClient(
        settings.api_base_url, timeout=settings.http_timeout,
    )

    # Discord can re-deliver a message on gateway reconnections
    seen_messages: deque = deque(maxlen=1000)

    @bot.event
    async def on_ready():
        logger.info(f"{bot.user.name} is connected! ({bot.user.id})")
        logger.info(f"Commands: {', '.join(bot.dispatcher.commands)}")

    @bot.event
    async def on_message(message):
        if message.author == bot.user:
            return

        # Ignore other bots
        if message.author.bot:
            return

        if message.id in seen_messages:
            return
        seen_messages.append(message.id)

        await bot.dispatcher.dispatch(message)

    return bot


# ---------------------------------------------------------------------------
# Cog Loading & Entry Point
# ---------------------------------------------------------------------------
async def load_cogs(bot: commands.Bot):
    """Load all Cog extensions."""
    for extension in COGS:
        await bot.load_extension(extension)
    logger.info("All Cogs loaded.")


async def main(settings: BotSettings):
    """Async entry point — load cogs then start the bot."""
    token = settings.require_token()
    bot = create_bot(settings)
    try:
        async with bot:
            await load_cogs(bot)
            await bot.start(token)
    finally:
        await bot.control_client.close()
        logger.info(
            f"Shutdown. Chat delivery: {bot.notifier.sent} sent, {bot.notifier.failed} failed."
        )


def run():
    """Synchronous entry point for scripts."""
    try:
        settings = load_settings()
        setup_logging(settings.log_level)
        settings.require_token()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(
        f"Instance: {settings.instance.key} | "
        f"API: {'set' if settings.api_base_url else 'NOT SET'} | "
        f"Poll: every {settings.poll_interval}s, timeout {settings.poll_timeout or 'none'}"
    )
    if not settings.api_base_url:
        logger.warning("GCP_API not set — !pw commands will fail until it is configured.")
    asyncio.run(main(settings))


if __name__ == "__main__":
    run()
