import logging
from typing import Literal
import structlog
import pydantic
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_CONTACTS = 10_000

LogLevel = Literal["debug", "info", "warning", "error", "critical"]


class Config(BaseSettings):
    capacity: int = pydantic.Field(
        MAX_CONTACTS,
        gt=0,
        description="Maximum number of contacts a registry holds.",
    )
    log_level: LogLevel = pydantic.Field(
        "info",
        description="Minimum level of emitted log events.",
    )
    log_file: str = pydantic.Field(
        "STDOUT",
        description="Path to append log lines to, or STDOUT.",
    )
    log_format: Literal["text", "json"] = pydantic.Field(
        "text",
        description="Console output or one JSON object per line.",
    )
    model_config = SettingsConfigDict(env_prefix="rolodex_")

    @pydantic.field_validator("log_level", "log_format", mode="before")
    @classmethod
    def lowercase(cls, value):
        # env values arrive as e.g. WARNING
        return value.lower() if isinstance(value, str) else value


def _renderer(config: Config):
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def load_config(**overrides) -> Config:
    """
    Build a Config from ROLODEX_* env vars plus overrides and point
    structlog at the configured output.
    """
    config = Config(**overrides)
    if config.log_file == "STDOUT":
        factory = structlog.PrintLoggerFactory()
    else:
        factory = structlog.PrintLoggerFactory(file=open(config.log_file, "a"))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(),
            _renderer(config),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.log_level.upper())
        ),
        logger_factory=factory,
    )
    return config
