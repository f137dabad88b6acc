"""Open Food Facts product search client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_PATH = "/cgi/search.pl"


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts API interactions."""

    async def search_products(
        self, query: str, page_size: int = 25, page: int = 1
    ) -> dict[str, object]:
        """Search products by query and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client; no API key is required."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def search_products(
        self, query: str, page_size: int = 25, page: int = 1
    ) -> dict[str, object]:
        """Search products by free text, most popular first."""
        response = await self.http_client.get(
            f"{self.base_url}{SEARCH_PATH}",
            params={
                "search_terms": query,
                "json": 1,
                "page_size": page_size,
                "page": page,
                "sort_by": "popularity",
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
