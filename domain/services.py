import logging
from dataclasses import dataclass

from domain.compiler import compile_query
from domain.errors import RateLimitError, ValidationError
from domain.models import RecipeQuerySpec
from domain.moderation import ModerationGate
from domain.rate_limit import RateLimiter
from domain.translator import QueryTranslator
from domain.validator import MAX_LENGTH, validate_text


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranslationRequest:
    raw_text: str
    client_identity: str


@dataclass(frozen=True)
class Translation:
    response: str
    original_input: str
    remaining_requests: int
    spec: RecipeQuerySpec

    def to_dict(self) -> dict[str, str | int]:
        return {
            "response": self.response,
            "originalInput": self.original_input,
            "remainingRequests": self.remaining_requests,
        }


async def translate_request(
    request: TranslationRequest,
    *,
    rate_limiter: RateLimiter,
    moderation: ModerationGate,
    translator: QueryTranslator,
    max_length: int = MAX_LENGTH,
) -> Translation:
    """Validate, rate limit, moderate and translate one request.

    Stops at the first failing stage and lets its error through unchanged.
    """
    validation = validate_text(request.raw_text, max_length)
    if not validation.is_valid:
        raise ValidationError(validation.error or "Invalid input.")

    if not rate_limiter.check_limit(request.client_identity):
        raise RateLimitError()

    await moderation.check(request.raw_text)
    spec = await translator.translate(request.raw_text)
    query = compile_query(spec)
    logger.info("Translated request from %s to %s", request.client_identity, query)

    return Translation(
        response=query,
        original_input=request.raw_text,
        remaining_requests=rate_limiter.get_remaining(request.client_identity),
        spec=spec,
    )
