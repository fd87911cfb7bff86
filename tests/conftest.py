import json
from types import SimpleNamespace
from typing import Any, Callable

import pytest

from domain.models import TOOL_NAME, RecipeQuerySpec


EMPTY_SPEC: dict[str, Any] = {
    "query": "",
    "cuisine": [],
    "excludeCuisine": [],
    "diet": [],
    "intolerances": [],
    "includeIngredients": [],
    "excludeIngredients": [],
    "type": None,
    "maxReadyTime": None,
}


def spec_args(**fields: Any) -> dict[str, Any]:
    return {**EMPTY_SPEC, **fields}


class FakeModerations:
    def __init__(
        self,
        *,
        flagged: bool = False,
        error: Exception | None = None,
        **categories: bool,
    ) -> None:
        self.flagged = flagged
        self.categories = categories
        self.error = error
        self.calls: list[str] = []

    async def create(self, *, input: str, model: str) -> SimpleNamespace:
        self.calls.append(input)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            results=[
                SimpleNamespace(
                    flagged=self.flagged,
                    categories=SimpleNamespace(**self.categories),
                )
            ]
        )


class FakeResponses:
    def __init__(
        self,
        arguments: dict[str, Any] | str | None = None,
        *,
        status: str = "completed",
        error: Exception | None = None,
    ) -> None:
        self.arguments = arguments
        self.status = status
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        output = []
        if self.arguments is not None:
            arguments = (
                self.arguments
                if isinstance(self.arguments, str)
                else json.dumps(self.arguments)
            )
            output.append(
                SimpleNamespace(type="function_call", name=TOOL_NAME, arguments=arguments)
            )
        return SimpleNamespace(status=self.status, output=output)


class FakeOpenAI:
    def __init__(
        self,
        *,
        moderations: FakeModerations | None = None,
        responses: FakeResponses | None = None,
    ) -> None:
        self.moderations = FakeModerations() if moderations is None else moderations
        self.responses = FakeResponses() if responses is None else responses

    async def close(self) -> None:
        pass


@pytest.fixture
def make_spec() -> Callable[..., RecipeQuerySpec]:
    def _make(**fields: Any) -> RecipeQuerySpec:
        return RecipeQuerySpec.model_validate(spec_args(**fields))

    return _make


@pytest.fixture
def vegan_pasta() -> dict[str, Any]:
    return spec_args(
        query="pasta",
        diet=[{"diet": "vegan", "connector": "OR"}],
        maxReadyTime=20,
    )


@pytest.fixture
def fake_openai(vegan_pasta: dict[str, Any]) -> FakeOpenAI:
    return FakeOpenAI(responses=FakeResponses(vegan_pasta))
