"""
HTTP client utilities for upstream provider calls.
Each request gets its own httpx client; nothing is pooled across requests.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx


class HTTPClientManager:
    """Creates per-request httpx clients."""

    # Tests swap in an httpx.MockTransport here.
    transport: httpx.AsyncBaseTransport | None = None

    @classmethod
    def create_client(cls, timeout: float) -> httpx.AsyncClient:
        """
        Create a fresh httpx client for one relayed request.

        The caller owns the client and must close it, which for streamed
        responses happens only after the relay finishes.

        Args:
            timeout: Upstream timeout in seconds

        Returns:
            Configured httpx.AsyncClient
        """
        if cls.transport is not None:
            return httpx.AsyncClient(timeout=timeout, transport=cls.transport)

        return httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            http2=True
        )

    @classmethod
    @asynccontextmanager
    async def open_client(cls, timeout: float) -> AsyncIterator[httpx.AsyncClient]:
        """Client scoped to a block, for calls whose body is read in full."""
        client = cls.create_client(timeout)
        try:
            yield client
        finally:
            await client.aclose()
