import httpx
import openai
import pytest

from domain.errors import ConfigurationError, ModerationRejection, UpstreamError
from domain.moderation import Category, ModerationGate

from conftest import FakeModerations, FakeOpenAI


REQUEST = httpx.Request("POST", "https://api.openai.com/v1/moderations")


def gate(moderations: FakeModerations) -> ModerationGate:
    return ModerationGate(FakeOpenAI(moderations=moderations))  # pyright: ignore[reportArgumentType]


@pytest.mark.asyncio
async def test_not_flagged() -> None:
    moderations = FakeModerations(flagged=False)
    verdict = await gate(moderations).check("vegan pasta")
    assert not verdict.flagged
    assert verdict.flagged_categories == []
    assert moderations.calls == ["vegan pasta"]


@pytest.mark.asyncio
async def test_flagged_names_only_true_categories() -> None:
    moderations = FakeModerations(flagged=True, violence=True, harassment=False)
    with pytest.raises(ModerationRejection) as exc:
        await gate(moderations).check("something nasty")
    assert exc.value.categories == ["violence"]
    assert exc.value.message == "Content flagged as inappropriate: violence"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_flagged_multiple_categories_use_provider_names() -> None:
    moderations = FakeModerations(
        flagged=True, violence=True, harassment=True, self_harm_intent=True
    )
    with pytest.raises(ModerationRejection) as exc:
        await gate(moderations).check("something nasty")
    assert exc.value.message == (
        "Content flagged as inappropriate: harassment, self-harm/intent, violence"
    )


@pytest.mark.asyncio
async def test_moderate_does_not_reject() -> None:
    moderations = FakeModerations(flagged=True, hate=True)
    verdict = await gate(moderations).moderate("x")
    assert verdict.flagged
    assert verdict.categories[Category.HATE]
    assert not verdict.categories[Category.VIOLENCE]
    assert set(verdict.categories) == set(Category)


@pytest.mark.asyncio
async def test_missing_client_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        await ModerationGate(None).check("vegan pasta")


@pytest.mark.asyncio
async def test_bad_key_is_configuration_error() -> None:
    error = openai.AuthenticationError(
        "Incorrect API key provided: sk-secret",
        response=httpx.Response(401, request=REQUEST),
        body=None,
    )
    with pytest.raises(ConfigurationError) as exc:
        await gate(FakeModerations(error=error)).check("vegan pasta")
    assert "sk-secret" not in exc.value.message


@pytest.mark.asyncio
async def test_unreachable_is_upstream_error() -> None:
    error = openai.APIConnectionError(request=REQUEST)
    with pytest.raises(UpstreamError) as exc:
        await gate(FakeModerations(error=error)).check("vegan pasta")
    assert exc.value.status == "connection_error"
    assert exc.value.status_code == 500
