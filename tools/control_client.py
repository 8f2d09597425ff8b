"""
Control Plane Client — JSON-over-HTTP instance lifecycle API (Async)

Wraps the four calls the bot needs against the external control plane:

  POST {base}/instance/start   -> any 2xx, body ignored
  POST {base}/instance/stop    -> any 2xx, body ignored
  POST {base}/instance/status  -> body is the raw state string
  POST {base}/instance/ip      -> body is the raw address string

Every request carries the InstanceDescriptor as its JSON body. There are
no retries: a failed call raises TransportError and the caller decides
what to do with it.

All public methods are async. Callers must `await` every call.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from tools.errors import (
    ConfigurationError,
    TransportError,
    ControlPlaneHTTPError,
    ControlPlaneTimeoutError,
)
from tools.models import InstanceDescriptor

logger = logging.getLogger('ControlPlaneClient')


class ControlPlaneClient:
    """Async client for the instance control plane.

    Usage:
        async with ControlPlaneClient(base_url, timeout=30) as client:
            await client.start(descriptor)
            state = await client.status(descriptor)
    """

    def __init__(self, base_url: Optional[str], timeout: Optional[float] = 30.0,
                 session: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url.rstrip('/') if base_url else None
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "ControlPlaneClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal HTTP layer
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        if not self.base_url:
            raise ConfigurationError("Control-plane base URL (GCP_API) is not configured.")
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def _post(self, path: str, descriptor: InstanceDescriptor) -> str:
        """Execute a single POST (no retry) and return the response text."""
        url = self._url(path)
        session = self._get_session()
        client_timeout = aiohttp.ClientTimeout(total=self.timeout)

        logger.debug(f"POST {path} for {descriptor.key}")
        try:
            async with session.post(url, json=descriptor.to_body(),
                                    timeout=client_timeout) as resp:
                body = await resp.text()
                if not 200 <= resp.status < 300:
                    raise ControlPlaneHTTPError(resp.status, body, path)
                return body
        except asyncio.TimeoutError as e:
            raise ControlPlaneTimeoutError(
                f"Request timed out after {self.timeout}s: {path}"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Network error on {path}: {e}") from e

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    async def start(self, descriptor: InstanceDescriptor) -> None:
        """Ask the control plane to boot the instance."""
        await self._post('/instance/start', descriptor)
        logger.info(f"Start requested for {descriptor.key}")

    async def stop(self, descriptor: InstanceDescriptor) -> None:
        """Ask the control plane to shut the instance down."""
        await self._post('/instance/stop', descriptor)
        logger.info(f"Stop requested for {descriptor.key}")

    async def status(self, descriptor: InstanceDescriptor) -> str:
        """Current instance state, e.g. "RUNNING" or "TERMINATED"."""
        return (await self._post('/instance/status', descriptor)).strip()

    async def ip(self, descriptor: InstanceDescriptor) -> str:
        """External address of the instance."""
        return (await self._post('/instance/ip', descriptor)).strip()

    async def close(self) -> None:
        """Shut down the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None
