from typing import Any

import pytest

from domain.errors import (
    ModerationRejection,
    RateLimitError,
    UpstreamError,
    ValidationError,
)
from domain.moderation import ModerationGate
from domain.rate_limit import InMemoryRateLimiter
from domain.services import TranslationRequest, translate_request
from domain.translator import QueryTranslator

from conftest import FakeModerations, FakeOpenAI, FakeResponses


async def run(
    text: Any,
    client: FakeOpenAI,
    limiter: InMemoryRateLimiter | None = None,
    identity: str = "203.0.113.7",
):
    limiter = InMemoryRateLimiter(limit=3, window=60) if limiter is None else limiter
    return await translate_request(
        TranslationRequest(raw_text=text, client_identity=identity),
        rate_limiter=limiter,
        moderation=ModerationGate(client),  # pyright: ignore[reportArgumentType]
        translator=QueryTranslator(client),  # pyright: ignore[reportArgumentType]
    )


@pytest.mark.asyncio
async def test_vegan_pasta_end_to_end(fake_openai: FakeOpenAI) -> None:
    limiter = InMemoryRateLimiter(limit=3, window=60)
    got = await run("vegan pasta under 20 minutes", fake_openai, limiter)
    assert got.response == "?query=pasta&diet=vegan&maxReadyTime=20"
    assert got.original_input == "vegan pasta under 20 minutes"
    assert got.remaining_requests == 2
    assert got.to_dict() == {
        "response": "?query=pasta&diet=vegan&maxReadyTime=20",
        "originalInput": "vegan pasta under 20 minutes",
        "remainingRequests": 2,
    }
    assert fake_openai.moderations.calls == ["vegan pasta under 20 minutes"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ("", "   ", "a" * 2001, None))
async def test_invalid_input_costs_nothing(fake_openai: FakeOpenAI, text: Any) -> None:
    limiter = InMemoryRateLimiter(limit=3, window=60)
    with pytest.raises(ValidationError):
        await run(text, fake_openai, limiter)
    assert limiter.get_remaining("203.0.113.7") == 3
    assert fake_openai.moderations.calls == []
    assert fake_openai.responses.calls == []


@pytest.mark.asyncio
async def test_rate_limited_before_moderation(fake_openai: FakeOpenAI) -> None:
    limiter = InMemoryRateLimiter(limit=1, window=60)
    await run("vegan pasta", fake_openai, limiter)
    with pytest.raises(RateLimitError) as exc:
        await run("vegan pasta", fake_openai, limiter)
    assert exc.value.message == "Rate limit exceeded. Please try again later."
    assert exc.value.status_code == 429
    assert len(fake_openai.moderations.calls) == 1


@pytest.mark.asyncio
async def test_flagged_stops_before_translation(vegan_pasta: dict[str, Any]) -> None:
    client = FakeOpenAI(
        moderations=FakeModerations(flagged=True, violence=True, harassment=False),
        responses=FakeResponses(vegan_pasta),
    )
    with pytest.raises(ModerationRejection) as exc:
        await run("something nasty", client)
    assert exc.value.message == "Content flagged as inappropriate: violence"
    assert client.responses.calls == []


@pytest.mark.asyncio
async def test_failed_generation_has_no_result(vegan_pasta: dict[str, Any]) -> None:
    client = FakeOpenAI(responses=FakeResponses(vegan_pasta, status="failed"))
    with pytest.raises(UpstreamError) as exc:
        await run("vegan pasta", client)
    assert exc.value.status == "failed"
