"""Reachability probe — network-level liveness check for citation URLs.

A completed round trip counts as reachable whatever the HTTP status, so
"live" only means the network stack got *some* response.  It says nothing
about whether the document exists or is valid.  DNS failures, refused
connections, timeouts and malformed URLs all collapse into "unreachable".
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx

from dossier.config import settings

logger = logging.getLogger(__name__)


@runtime_checkable
class Probe(Protocol):
    """Two-outcome reachability capability supplied by the host."""

    async def check(self, url: str) -> bool:
        """Return True if the URL answered at the network level."""
        ...


class HttpxProbe:
    """Probe that issues a HEAD request and ignores the response status."""

    def __init__(
        self, client: httpx.AsyncClient | None = None, timeout: float | None = None
    ) -> None:
        self._client = client
        self.timeout = timeout if timeout is not None else settings.probe_timeout

    async def check(self, url: str) -> bool:
        try:
            if self._client is not None:
                await self._client.head(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    await client.head(url, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Probe failed for %s: %s", url, exc)
            return False
        logger.debug("Probe reached %s", url)
        return True
