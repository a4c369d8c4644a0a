from functools import lru_cache
import json
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import quote

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import URL

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def split_env_list(raw: str) -> list[str]:
    """
    Turn an env value into a list.

    Accepts a JSON array (`["a", "b"]`) or a plain string separated by commas
    or, when no comma is present, by semicolons.
    """
    candidate = raw.strip()
    if candidate[:1] == "[" and candidate[-1:] == "]":
        try:
            decoded = json.loads(candidate)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            return [str(item) for item in decoded]
    separator = "," if "," in raw else ";"
    return [part.strip() for part in raw.split(separator) if part.strip()]


class EnvSection(BaseModel):
    """A slice of the flat environment; unrelated keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class RabbitMQConfig(EnvSection):
    RABBITMQ_HOST: str
    RABBITMQ_PORT: int
    RABBITMQ_USER: str
    RABBITMQ_PASSWORD: str

    @property
    def dsn(self) -> str:
        user = quote(self.RABBITMQ_USER, safe="")
        password = quote(self.RABBITMQ_PASSWORD, safe="")
        return f"amqp://{user}:{password}@{self.RABBITMQ_HOST}:{self.RABBITMQ_PORT}//"


class SentryConfig(EnvSection):
    SENTRY_DSN: str | None = None
    SENTRY_ENV: str = "development"
    SENTRY_ENABLED: bool = False


class JWTConfig(EnvSection):
    """
    Token settings. Loaded once and shared by the codec and the refresh-token store.

    REFRESH_TOKEN_HASH_KEY keys the whitelist HMAC; when empty the signing
    secret is used for both purposes.
    """

    JWT_SECRET_KEY: str = Field(min_length=32)
    REFRESH_TOKEN_HASH_KEY: str | None = None

    ACCESS_TOKEN_EXPIRE_SECONDS: int = Field(30, gt=0)
    REFRESH_TOKEN_EXPIRE_SECONDS: int = Field(432_000, gt=0)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def refresh_token_hash_key(self) -> str:
        return self.REFRESH_TOKEN_HASH_KEY or self.JWT_SECRET_KEY


class PostgresConfig(EnvSection):
    DB_ECHO: bool = False

    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_HOST: str
    POSTGRES_PORT: int
    POSTGRES_DB: str

    @property
    def url(self) -> URL:
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )

    @property
    def dsn_async(self) -> str:
        return self.url.render_as_string(hide_password=False)


class AppConfig(EnvSection):
    VERSION: str
    DEBUG: bool = False
    TESTING: bool = False

    PROJECT_NAME: str = "Task Tracker API"

    LOG_LEVEL: str = "INFO"
    LOG_LEVEL_FILE: str = "WARNING"
    LOG_TO_FILE: bool = True

    CORS_ALLOWED_ORIGINS: list[str] = Field(["*"])
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOWED_METHODS: list[str] = Field(["*"])
    CORS_ALLOWED_HEADERS: list[str] = Field(["*"])
    CORS_EXPOSE_HEADERS: list[str] = Field(["*"])

    @field_validator(
        "CORS_ALLOWED_ORIGINS",
        "CORS_ALLOWED_METHODS",
        "CORS_ALLOWED_HEADERS",
        "CORS_EXPOSE_HEADERS",
        mode="before",
    )
    @classmethod
    def parse_cors_list(cls, v: Any) -> Any:
        return split_env_list(v) if isinstance(v, str) else v


class Config(BaseModel):
    app: AppConfig
    jwt: JWTConfig
    sentry: SentryConfig
    postgres: PostgresConfig
    rabbitmq: RabbitMQConfig

    model_config = ConfigDict(extra="ignore")


def resolve_env_file(testing: bool, root: Path = PROJECT_ROOT) -> Path:
    """Pick `.env.test` for test runs and `.env` otherwise, relative to the project root."""
    return root / (".env.test" if testing else ".env")


def read_environment(env_file: Path) -> dict[str, str]:
    """Env file values overlaid by the process environment; unset keys are dropped."""
    if not env_file.exists():
        logger.warning("Env file %s not found, using process environment only", env_file)
    values: dict[str, str | None] = dict(dotenv_values(env_file))
    values.update(os.environ)
    return {key: value for key, value in values.items() if value is not None}


@lru_cache
def get_settings() -> Config:
    """
    Cached settings factory. Override in tests via monkeypatching or dependency overrides.
    """
    environment = read_environment(resolve_env_file(os.getenv("TESTING") == "true"))
    return Config(
        app=AppConfig(**environment),
        jwt=JWTConfig(**environment),
        sentry=SentryConfig(**environment),
        postgres=PostgresConfig(**environment),
        rabbitmq=RabbitMQConfig(**environment),
    )


config = get_settings()
