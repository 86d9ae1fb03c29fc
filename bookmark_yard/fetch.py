"""Retrieval of the prebuilt search index over HTTP."""
from typing import Any, Dict, List, Optional, Protocol

import httpx

from bookmark_yard.config import ClientConfig, get_config


class IndexFetcher(Protocol):
    """Protocol for anything that can retrieve the raw index entries."""

    async def fetch(self) -> List[Dict[str, Any]]:
        ...


class HttpIndexFetcher:
    """Fetch the compact index from the static site with httpx."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the fetcher.

        Args:
            config: Client configuration (defaults to the global config)
            transport: Optional httpx transport, used to stub the network in tests
        """
        self.config = config or get_config().client
        self._transport = transport

    async def fetch(self) -> List[Dict[str, Any]]:
        """Fetch and decode the index.

        Returns:
            Raw index entries

        Raises:
            httpx.HTTPError: On transport errors or a non-success status
            ValueError: If the body is not a JSON array
        """
        async with httpx.AsyncClient(
            base_url=self.config.site_url,
            timeout=self.config.request_timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        ) as client:
            response = await client.get(self.config.index_path)
            response.raise_for_status()

            data = response.json()

        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array from {self.config.index_path}, got {type(data).__name__}")

        return data
