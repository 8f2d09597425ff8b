"""
Tests for tools/notifier.py — best-effort chat delivery.
"""

import asyncio

import pytest

from fakes import make_channel, sent_texts
from tools.errors import ChatDeliveryError
from tools.notifier import ChatNotifier, split_message


class TestSplitMessage:

    def test_short_message_unchanged(self):
        assert split_message("Pong!") == ["Pong!"]

    def test_long_message_chunked(self):
        chunks = split_message("x" * 4500)
        assert [len(c) for c in chunks] == [2000, 2000, 500]


class TestNotify:

    def test_success_counts(self):
        notifier = ChatNotifier()
        channel = make_channel()

        assert asyncio.run(notifier.notify(channel, "hello")) is True
        assert sent_texts(channel) == ["hello"]
        assert (notifier.sent, notifier.failed) == (1, 0)

    def test_failure_swallowed_and_counted(self, caplog):
        notifier = ChatNotifier()
        channel = make_channel(fail=True)

        assert asyncio.run(notifier.notify(channel, "hello")) is False
        assert (notifier.sent, notifier.failed) == (0, 1)
        assert "Error sending message" in caplog.text

    def test_deliver_raises(self):
        notifier = ChatNotifier()

        with pytest.raises(ChatDeliveryError):
            asyncio.run(notifier.deliver(make_channel(fail=True), "hello"))


class TestReport:

    def test_logs_without_ops_channel(self, caplog):
        notifier = ChatNotifier()

        asyncio.run(notifier.report("start failed"))

        assert "start failed" in caplog.text
        assert notifier.sent == 0

    def test_posts_to_ops_channel(self):
        ops = make_channel(999)
        notifier = ChatNotifier(ops_channel_resolver=lambda: ops)

        asyncio.run(notifier.report("stop failed: HTTP 500"))

        texts = sent_texts(ops)
        assert len(texts) == 1
        assert "stop failed: HTTP 500" in texts[0]

    def test_ops_channel_unresolved(self):
        notifier = ChatNotifier(ops_channel_resolver=lambda: None)

        asyncio.run(notifier.report("ip failed"))

        assert notifier.sent == 0
        assert notifier.failed == 0
