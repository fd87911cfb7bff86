from enum import Enum
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.aopenai import TIMEOUT


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: Env = Env.local

    openai_api_key: SecretStr | None = None
    core_model: str = "gpt-4.1-mini"
    moderation_model: str = "omni-moderation-latest"
    request_timeout: float = TIMEOUT

    max_input_length: int = 2000
    rate_limit: int = 10
    rate_limit_window: float = 60 * 60

    spoonacular_api_key: SecretStr | None = None
    spoonacular_base_url: str = "https://api.spoonacular.com/"

    service_url: str = "http://localhost:8000/"
    client_state_path: Path = Path.home() / ".recipe-search" / "rate-limit.json"
