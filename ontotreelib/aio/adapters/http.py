"""
HTTP hierarchy source backed by ``httpx``.

Talks to the read-only REST API::

    GET /go/{id}                  -> term object, or 404
    GET /go/children/{id}         -> [{"child_go_id": ...}]
    GET /go/{id}/mmrrc-strains    -> [{"mmrrc_id": ...}]

Path segments are percent-encoded. Timeouts are left to the transport.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ...config import EntityKind
from ..core.adapter import HierarchySource
from ..error_policies import NotFoundError, TransportError

logger = logging.getLogger(__name__)


class HttpHierarchySource(HierarchySource):
    """
    Remote source reading JSON over HTTP.

    Example:
        async with HttpHierarchySource("http://localhost:3000/api") as source:
            payload = await source.read(EntityKind.NODE, "GO:0008150")
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = 10.0,
        max_concurrent: int = 100,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the HTTP source.

        Args:
            base_url: API root, e.g. ``http://localhost:3000/api``
            timeout: Per-request timeout in seconds (None disables it)
            max_concurrent: Maximum concurrent requests
            client: Pre-built client (tests inject one with a MockTransport)
        """
        super().__init__(max_concurrent=max_concurrent)
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def url_for(self, kind: EntityKind, ident: str) -> str:
        return self.base_url + kind.path_for(quote(ident, safe=""))

    async def read(self, kind: EntityKind, ident: str) -> Any:
        url = self.url_for(kind, ident)
        self.read_count += 1
        async with self.semaphore:
            try:
                response = await self._client.get(url)
            except httpx.HTTPError as e:
                raise TransportError(f"GET {url} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(kind, ident)
        if not response.is_success:
            raise TransportError(f"GET {url} returned {response.status_code}",
                                 status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"GET {url} returned invalid JSON: {e}",
                                 status_code=response.status_code) from e

    async def close(self):
        if self._owns_client:
            await self._client.aclose()
