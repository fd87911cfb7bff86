"""Command line recipe search against the translation service."""

import asyncio
from typing import Any

import httpx
from rich import print

import config
from domain.errors import RateLimitError, TranslationError
from domain.rate_limit import ClientRateLimiter, JsonFileStore


class SearchFailed(TranslationError):
    pass


def _error(resp: httpx.Response, default: str) -> str:
    try:
        data = resp.json()
    except ValueError:
        return default
    return data.get("error", default) if isinstance(data, dict) else default


async def translate(text: str, *, http_client: httpx.AsyncClient) -> dict[str, Any]:
    resp = await http_client.post("api/openai/responses", json={"input": text})
    if resp.status_code == 429:
        raise RateLimitError(_error(resp, "Rate limit exceeded. Please try again later."))
    if resp.is_error:
        raise SearchFailed(_error(resp, "API call failed"), status_code=resp.status_code)
    return resp.json()


async def search_recipes(
    text: str,
    *,
    http_client: httpx.AsyncClient,
    limiter: ClientRateLimiter,
) -> tuple[list[dict[str, Any]], int]:
    """Translate `text` and run the search. Returns the recipes and quota left."""
    if not text.strip():
        raise SearchFailed("Please enter some text to translate", status_code=400)

    # Advisory only, the service checks again
    if not limiter.check_limit():
        raise RateLimitError()

    translation = await translate(text, http_client=http_client)
    remaining = int(translation["remainingRequests"])
    limiter.sync(remaining)

    resp = await http_client.get(
        f"api/proxy/spoonacular/complexSearch{translation['response']}"
    )
    if resp.is_error:
        raise SearchFailed(
            _error(resp, "Spoonacular API call failed"), status_code=resp.status_code
        )
    return resp.json().get("results", []), remaining


def show(recipes: list[dict[str, Any]]) -> None:
    if not recipes:
        print("[yellow]No recipes found.[/yellow]")
    for recipe in recipes:
        print(f"[bold]{recipe.get('title', '')}[/bold] {recipe.get('sourceUrl', '')}")


async def main() -> None:
    cfg = config.Config()
    limiter = ClientRateLimiter(
        JsonFileStore(cfg.client_state_path),
        limit=cfg.rate_limit,
        window=cfg.rate_limit_window,
    )
    async with httpx.AsyncClient(
        base_url=cfg.service_url, timeout=cfg.request_timeout * 2
    ) as http_client:
        while True:
            print(f"You have {limiter.get_remaining_requests()} questions remaining.")
            text = input("Search: ")
            if text.lower() in ("q", "quit", "exit"):
                break
            try:
                recipes, _ = await search_recipes(
                    text, http_client=http_client, limiter=limiter
                )
            except TranslationError as e:
                print(f"[red]Error: {e.message}[/red]")
                continue
            except httpx.HTTPError as e:
                print(f"[red]Error: {e!r}[/red]")
                continue
            show(recipes)
            print()


if __name__ == "__main__":
    asyncio.run(main())
