"""
Shared pytest fixtures for the power bot test suite.

Settings, notifier, and a namespace standing in for the Discord bot.
The reusable test doubles live in fakes.py.
"""

from types import SimpleNamespace

import pytest

from tools.config import BotSettings
from tools.dispatcher import CommandDispatcher
from tools.instance_locks import InstanceLocks
from tools.models import InstanceDescriptor
from tools.notifier import ChatNotifier

from fakes import ScriptedControlClient


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def descriptor():
    return InstanceDescriptor(name="palworld1", project="droprealms", zone="asia-northeast1-b")


@pytest.fixture
def settings(descriptor):
    return BotSettings(
        discord_token="token",
        api_base_url="http://control.test",
        instance=descriptor,
        poll_interval=0.01,
        poll_timeout=None,
    )


@pytest.fixture
def notifier():
    return ChatNotifier()


@pytest.fixture
def fake_bot(settings, notifier):
    """Namespace with the services bot/client.py attaches to the real bot."""
    return SimpleNamespace(
        settings=settings,
        dispatcher=CommandDispatcher(),
        notifier=notifier,
        instance_locks=InstanceLocks(),
        control_client=ScriptedControlClient(),
    )
