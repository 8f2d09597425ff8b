"""
Tests for bot/client.py — bot construction, on_message filtering, cog loading.

No gateway connection is made; on_message is called directly.
"""

import asyncio
import logging
import os

import pytest

from fakes import ScriptedControlClient, make_message, sent_texts
from bot.client import create_bot, load_cogs, run, setup_logging
from tools.control_client import ControlPlaneClient


@pytest.fixture
def bot(settings):
    return create_bot(settings, control_client=ScriptedControlClient())


class TestCreateBot:

    def test_services_attached(self, bot, settings):
        assert bot.settings is settings
        assert bot.dispatcher.commands == []
        assert bot.notifier.sent == 0
        assert not bot.instance_locks.is_busy(settings.instance)

    def test_default_control_client(self, settings):
        bot = create_bot(settings)
        assert isinstance(bot.control_client, ControlPlaneClient)
        assert bot.control_client.base_url == "http://control.test"
        assert bot.control_client.timeout == settings.http_timeout

    def test_cogs_register_all_commands(self, bot):
        asyncio.run(load_cogs(bot))
        assert bot.dispatcher.commands == [
            "!dice", "!ping", "!pw ip", "!pw start", "!pw status", "!pw stop",
        ]

    def test_no_prefix_commands_registered(self, bot):
        asyncio.run(load_cogs(bot))
        assert list(bot.commands) == []


class TestOnMessage:

    def test_dispatches_command(self, bot):
        asyncio.run(load_cogs(bot))
        msg = make_message("!ping")

        asyncio.run(bot.on_message(msg))

        assert sent_texts(msg.channel) == ["Pong!"]

    def test_ignores_other_bots(self, bot):
        asyncio.run(load_cogs(bot))
        msg = make_message("!ping", is_bot=True)

        asyncio.run(bot.on_message(msg))

        msg.channel.send.assert_not_awaited()

    def test_redelivered_message_handled_once(self, bot):
        asyncio.run(load_cogs(bot))
        msg = make_message("!ping", message_id=42)

        asyncio.run(bot.on_message(msg))
        asyncio.run(bot.on_message(msg))

        assert sent_texts(msg.channel) == ["Pong!"]

    def test_plain_chat_ignored(self, bot):
        asyncio.run(load_cogs(bot))
        msg = make_message("anyone up for palworld tonight?")

        asyncio.run(bot.on_message(msg))

        msg.channel.send.assert_not_awaited()
        assert bot.control_client.calls == []


class TestEntryPoint:

    def test_setup_logging_creates_log_dir(self, tmp_path):
        log_file = tmp_path / "logs" / "bot.log"
        logger = setup_logging("DEBUG", log_file=str(log_file))
        assert isinstance(logger, logging.Logger)
        assert os.path.isdir(tmp_path / "logs")

    def test_run_without_token_exits(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "")
        monkeypatch.setattr("tools.config.load_dotenv", lambda *a, **k: None)
        monkeypatch.setattr("bot.client.setup_logging", lambda *a, **k: None)

        with pytest.raises(SystemExit) as excinfo:
            run()

        assert excinfo.value.code == 1
