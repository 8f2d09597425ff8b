"""
Tests for tools/poller.py — wait_for_state().

Sleep and clock are injected, so nothing actually waits.
"""

import asyncio

import pytest

from fakes import ScriptedControlClient
from tools.errors import PollTimeoutError, TransportError
from tools.poller import wait_for_state


class FakeClock:
    """Monotonic clock advanced only by fake sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestWaitForState:

    def test_returns_after_target_seen(self, descriptor):
        client = ScriptedControlClient(statuses=["STOPPED", "STOPPED", "RUNNING"])
        clock = FakeClock()

        polls = asyncio.run(wait_for_state(
            client, descriptor, "RUNNING", interval=5, sleep=clock.sleep, clock=clock,
        ))

        assert polls == 3
        assert client.calls == ["status", "status", "status"]
        assert clock.sleeps == [5, 5]

    def test_already_in_target_state(self, descriptor):
        client = ScriptedControlClient(statuses=["TERMINATED"])
        clock = FakeClock()

        polls = asyncio.run(wait_for_state(
            client, descriptor, "TERMINATED", sleep=clock.sleep, clock=clock,
        ))

        assert polls == 1
        assert clock.sleeps == []

    def test_match_is_exact(self, descriptor):
        """Case differences are a different state."""
        client = ScriptedControlClient(statuses=["running", "RUNNING"])
        clock = FakeClock()

        polls = asyncio.run(wait_for_state(
            client, descriptor, "RUNNING", sleep=clock.sleep, clock=clock,
        ))

        assert polls == 2

    def test_transport_error_propagates(self, descriptor):
        client = ScriptedControlClient(statuses=["STOPPED", TransportError("boom")])
        clock = FakeClock()

        with pytest.raises(TransportError):
            asyncio.run(wait_for_state(
                client, descriptor, "RUNNING", sleep=clock.sleep, clock=clock,
            ))
        assert client.calls == ["status", "status"]
        assert len(clock.sleeps) == 1

    def test_timeout_raises_poll_timeout(self, descriptor):
        client = ScriptedControlClient(statuses=["STAGING"])
        clock = FakeClock()

        with pytest.raises(PollTimeoutError) as excinfo:
            asyncio.run(wait_for_state(
                client, descriptor, "RUNNING", interval=5, timeout=12,
                sleep=clock.sleep, clock=clock,
            ))

        assert excinfo.value.target == "RUNNING"
        assert excinfo.value.last_state == "STAGING"
        assert not isinstance(excinfo.value, TransportError)
        # Polls at t=0, 5, 10; another wait would pass the 12s budget
        assert client.calls.count("status") == 3
        assert clock.now <= 12

    def test_unbounded_without_timeout(self, descriptor):
        """timeout=None keeps polling for as long as it takes."""
        client = ScriptedControlClient(statuses=["STAGING"] * 50 + ["RUNNING"])
        clock = FakeClock()

        polls = asyncio.run(wait_for_state(
            client, descriptor, "RUNNING", interval=5, timeout=None,
            sleep=clock.sleep, clock=clock,
        ))

        assert polls == 51
        assert len(clock.sleeps) == 50
