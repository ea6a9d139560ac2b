import logging
import sys
from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
LOGGER_FORMAT = "%(name)s | %(levelname)s | %(asctime)s | %(filename)s | %(funcName)s:%(lineno)d | %(message)s"


class LoggingSettings(BaseSettings):
    ENV: str = "dev"
    LOGGING_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FORESIGHT_", extra="ignore")


@lru_cache
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


class LoggerConfig(BaseModel):
    handlers: list
    format: str
    date_format: str | None = None
    level: str | int = logging.INFO


def get_logger_config(env: str = "dev", logging_level: str | int = logging.INFO) -> LoggerConfig:
    """Uses RichHandler outside production, plain stdout formatting in production."""

    if env != "prod":
        from rich.logging import RichHandler

        return LoggerConfig(
            handlers=[RichHandler(rich_tracebacks=True, show_time=False)],
            format=LOGGER_FORMAT,
            date_format=DATE_FORMAT,
            level=logging_level,
        )

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(LOGGER_FORMAT, datefmt=DATE_FORMAT))

    return LoggerConfig(handlers=[stdout_handler], format=LOGGER_FORMAT, date_format=DATE_FORMAT, level=logging_level)


def setup_logger(settings: LoggingSettings | None = None) -> LoggerConfig:
    """Install the foresight log configuration on the root logger.

    Existing handlers on named loggers are removed so everything propagates to root.
    """
    settings = settings or get_logging_settings()

    for name in logging.root.manager.loggerDict.keys():
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    logger_config = get_logger_config(env=settings.ENV, logging_level=settings.LOGGING_LEVEL)
    logging.basicConfig(
        level=logger_config.level,
        format=logger_config.format,
        datefmt=logger_config.date_format,
        handlers=logger_config.handlers,
        force=True,
    )
    return logger_config
