import logging
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping

import openai

from domain.aopenai import require_client, upstream_error
from domain.errors import ModerationRejection


logger = logging.getLogger(__name__)


class Category(StrEnum):
    HARASSMENT = "harassment"
    HARASSMENT_THREATENING = "harassment/threatening"
    HATE = "hate"
    HATE_THREATENING = "hate/threatening"
    ILLICIT = "illicit"
    ILLICIT_VIOLENT = "illicit/violent"
    SELF_HARM = "self-harm"
    SELF_HARM_INTENT = "self-harm/intent"
    SELF_HARM_INSTRUCTIONS = "self-harm/instructions"
    SEXUAL = "sexual"
    SEXUAL_MINORS = "sexual/minors"
    VIOLENCE = "violence"
    VIOLENCE_GRAPHIC = "violence/graphic"

    @property
    def attr(self) -> str:
        return self.value.replace("-", "_").replace("/", "_")


@dataclass(frozen=True)
class ModerationVerdict:
    flagged: bool
    categories: Mapping[Category, bool]

    @classmethod
    def from_result(cls, result: Any) -> "ModerationVerdict":
        categories = {
            c: bool(getattr(result.categories, c.attr, False)) for c in Category
        }
        return cls(flagged=bool(result.flagged), categories=MappingProxyType(categories))

    @property
    def flagged_categories(self) -> list[str]:
        return [c.value for c in Category if self.categories.get(c)]


class ModerationGate:
    def __init__(
        self,
        openai_client: openai.AsyncClient | None,
        *,
        model: str = "omni-moderation-latest",
    ) -> None:
        self.openai_client = openai_client
        self.model = model

    async def moderate(self, text: str) -> ModerationVerdict:
        client = require_client(self.openai_client)
        try:
            resp = await client.moderations.create(input=text, model=self.model)
        except openai.OpenAIError as e:
            raise upstream_error(e, stage="Moderation") from e
        return ModerationVerdict.from_result(resp.results[0])

    async def check(self, text: str) -> ModerationVerdict:
        verdict = await self.moderate(text)
        if verdict.flagged:
            categories = verdict.flagged_categories
            logger.info("Input flagged: %s", ", ".join(categories))
            raise ModerationRejection(categories)
        return verdict
