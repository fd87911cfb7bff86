import logging

import openai
import pydantic

from domain.aopenai import require_client, upstream_error
from domain.errors import UpstreamError
from domain.models import TOOL_NAME, TRANSLATE_TOOL, RecipeQuerySpec
from domain.prompts import TRANSLATE_QUERY_PROMPT


logger = logging.getLogger(__name__)


class QueryTranslator:
    def __init__(
        self,
        openai_client: openai.AsyncClient | None,
        *,
        model: str = "gpt-4.1-mini",
        instructions: str = TRANSLATE_QUERY_PROMPT,
    ) -> None:
        self.openai_client = openai_client
        self.model = model
        self.instructions = instructions

    async def translate(self, text: str) -> RecipeQuerySpec:
        client = require_client(self.openai_client)
        try:
            resp = await client.responses.create(
                model=self.model,
                instructions=self.instructions,
                input=text,
                tools=[TRANSLATE_TOOL],  # pyright: ignore[reportArgumentType]
                tool_choice={"type": "function", "name": TOOL_NAME},
            )
        except openai.OpenAIError as e:
            raise upstream_error(e, stage="Responses API") from e

        if resp.status != "completed":
            logger.error("Responses API returned status %s", resp.status)
            raise UpstreamError(f"Responses API error: {resp.status}", status=resp.status)

        arguments = None
        for item in resp.output:
            if item.type == "function_call" and item.name == TOOL_NAME:
                arguments = item.arguments
                break
        if arguments is None:
            raise UpstreamError(
                "Responses API error: no query parameters returned",
                status=resp.status,
            )

        try:
            return RecipeQuerySpec.model_validate_json(arguments)
        except pydantic.ValidationError as e:
            logger.error("Query parameters did not match the schema: %s", e)
            raise UpstreamError(
                "Responses API error: invalid query parameters",
                status=resp.status,
            ) from e
