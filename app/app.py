import contextlib
import functools
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from rich.logging import RichHandler
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

import config
from domain.aopenai import openai_client_factory
from domain.errors import ConfigurationError, TranslationError, ValidationError
from domain.moderation import ModerationGate
from domain.rate_limit import InMemoryRateLimiter, client_identity
from domain.recipe_search import RecipeSearchClient, spoonacular_client_factory
from domain.services import TranslationRequest, translate_request
from domain.translator import QueryTranslator


CONFIG = config.Config()


logging.basicConfig(
    level=logging.DEBUG if CONFIG.env == config.Env.local else logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(rich_tracebacks=True)],
)
# Request URLs to the recipe search carry the api key
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


JSON = dict[str, Any]


def aJSONResponse(route: Callable[..., Awaitable[JSON | tuple[JSON, int]]]):
    """Render a route's payload and turn pipeline errors into `{error}` bodies."""

    @functools.wraps(route)
    async def wrapper(*args: Any, **kwargs: Any) -> JSONResponse:
        try:
            resp = await route(*args, **kwargs)
        except TranslationError as e:
            return JSONResponse({"error": e.message}, status_code=e.status_code)
        except Exception:
            logger.exception("Unhandled error")
            return JSONResponse(
                {"error": ConfigurationError().message}, status_code=500
            )
        if not isinstance(resp, tuple):
            data, code = resp, 200
        else:
            data, code = resp
        return JSONResponse(data, status_code=code)

    return wrapper


async def input_text(request: Request) -> Any:
    try:
        body = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be JSON.") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return body.get("input")


@aJSONResponse
async def responses(request: Request) -> JSON:
    text = await input_text(request)
    translation = await translate_request(
        TranslationRequest(raw_text=text, client_identity=client_identity(request.headers)),
        rate_limiter=request.app.state.rate_limiter,
        moderation=request.app.state.moderation,
        translator=request.app.state.translator,
        max_length=CONFIG.max_input_length,
    )
    return translation.to_dict()


@aJSONResponse
async def complex_search(request: Request) -> JSON:
    recipes: RecipeSearchClient = request.app.state.recipes
    return await recipes.complex_search(request.url.query)


@aJSONResponse
async def health(request: Request) -> JSON:
    return {"status": "ok"}


def secret(value: Any) -> str | None:
    return None if value is None else value.get_secret_value()


@contextlib.asynccontextmanager
async def lifespan(app: Starlette) -> AsyncIterator[None]:
    yield
    if app.state.openai is not None:
        await app.state.openai.close()
    await app.state.recipes.close()


app = Starlette(
    debug=True if CONFIG.env == config.Env.local else False,
    routes=[
        Route("/api/openai/responses", responses, methods=["POST"]),
        Route("/api/proxy/spoonacular/complexSearch", complex_search, methods=["GET"]),
        Route("/api/health", health, methods=["GET"]),
    ],
    lifespan=lifespan,
)

app.state.openai = openai_client_factory(
    secret(CONFIG.openai_api_key), timeout=CONFIG.request_timeout
)
app.state.rate_limiter = InMemoryRateLimiter(
    limit=CONFIG.rate_limit, window=CONFIG.rate_limit_window
)
app.state.moderation = ModerationGate(app.state.openai, model=CONFIG.moderation_model)
app.state.translator = QueryTranslator(app.state.openai, model=CONFIG.core_model)
app.state.recipes = RecipeSearchClient(
    secret(CONFIG.spoonacular_api_key),
    http_client=spoonacular_client_factory(
        CONFIG.spoonacular_base_url, timeout=CONFIG.request_timeout
    ),
)
