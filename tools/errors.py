"""
Power Bot Error Types — Structured exception hierarchy.

Lets callers tell control-plane failures (network, HTTP, timeout) apart
from configuration mistakes and from a poll that never reached its
target state, so the cogs can log each one appropriately.
"""

from typing import Optional


class PowerBotError(Exception):
    """Base class for all power bot errors."""
    pass


class ConfigurationError(PowerBotError):
    """A required environment value is missing or invalid."""
    pass


class TransportError(PowerBotError):
    """A control-plane request failed at the network or HTTP level."""
    pass


class ControlPlaneHTTPError(TransportError):
    """Control plane answered with a non-2xx status."""

    def __init__(self, status: int, body: str = "", path: str = ""):
        self.status = status
        self.body = body
        self.path = path
        super().__init__(f"HTTP {status} from {path or 'control plane'}: {body[:200]}")


class ControlPlaneTimeoutError(TransportError):
    """Control-plane request exceeded the configured timeout."""
    pass


class PollTimeoutError(PowerBotError):
    """Instance did not reach the target state within the poll budget."""

    def __init__(self, target: str, last_state: Optional[str], elapsed: float):
        self.target = target
        self.last_state = last_state
        self.elapsed = elapsed
        super().__init__(
            f"Instance did not reach {target!r} after {elapsed:.0f}s "
            f"(last state: {last_state!r})"
        )


class InstanceBusyError(PowerBotError):
    """Another start/stop sequence already holds this instance."""
    pass


class ChatDeliveryError(PowerBotError):
    """Sending a message to a channel failed. Logged, never escalated."""
    pass
