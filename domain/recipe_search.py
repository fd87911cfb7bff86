import logging
from typing import Any

import httpx

from domain.aopenai import TIMEOUT
from domain.errors import ConfigurationError, UpstreamError


logger = logging.getLogger(__name__)


BASE_URL = "https://api.spoonacular.com/"


def spoonacular_client_factory(
    base_url: str = BASE_URL,
    *,
    timeout: float = TIMEOUT,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, timeout=timeout)


class RecipeSearchClient:
    def __init__(
        self,
        api_key: str | None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.http_client = (
            spoonacular_client_factory() if http_client is None else http_client
        )

    async def complex_search(self, query: str) -> dict[str, Any]:
        """Run a compiled query string, with or without its leading '?'."""
        if not self.api_key:
            logger.error("Spoonacular API key not configured")
            raise ConfigurationError("Recipe search temporarily unavailable")

        params = httpx.QueryParams(query.removeprefix("?")).set("apiKey", self.api_key)
        try:
            resp = await self.http_client.get("recipes/complexSearch", params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("Recipe search failed with status %s", status)
            raise UpstreamError(
                f"Recipe search error: {status}", status=status, status_code=502
            ) from e
        except httpx.HTTPError as e:
            logger.error("Recipe search failed: %s", type(e).__name__)
            raise UpstreamError(
                "Recipe search unreachable", status=None, status_code=502
            ) from e

        data = resp.json()
        if not isinstance(data, dict):
            raise UpstreamError("Recipe search error: unexpected response", status_code=502)
        return data

    async def close(self) -> None:
        await self.http_client.aclose()
