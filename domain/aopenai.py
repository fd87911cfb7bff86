import logging

import openai

from domain.errors import ConfigurationError, TranslationError, UpstreamError


logger = logging.getLogger(__name__)


TIMEOUT = 30.0


def openai_client_factory(
    api_key: str | None,
    *,
    timeout: float = TIMEOUT,
) -> openai.AsyncClient | None:
    """Client for the moderation and generation calls, or None without a key.

    Retries are off, each stage gets exactly one call.
    """
    if not api_key:
        logger.error("OpenAI API key not configured")
        return None
    return openai.AsyncClient(api_key=api_key, timeout=timeout, max_retries=0)


def require_client(client: openai.AsyncClient | None) -> openai.AsyncClient:
    if client is None:
        raise ConfigurationError()
    return client


def upstream_error(e: openai.OpenAIError, *, stage: str) -> TranslationError:
    """Map a provider failure onto the pipeline's errors.

    Provider messages are logged by type only as some of them echo the key.
    """
    logger.error("%s call failed: %s", stage, type(e).__name__)
    match e:
        case (
            openai.AuthenticationError()
            | openai.PermissionDeniedError()
            | openai.NotFoundError()
        ):
            return ConfigurationError()
        case openai.APITimeoutError():
            return UpstreamError(f"{stage} timed out", status="timeout")
        case openai.APIConnectionError():
            return UpstreamError(f"{stage} unreachable", status="connection_error")
        case openai.APIStatusError():
            return UpstreamError(
                f"{stage} error: {e.status_code}", status=e.status_code
            )
        case _:
            return UpstreamError(f"{stage} error", status=None)
