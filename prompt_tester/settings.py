"""Application configuration."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .catalog import DEFAULT_MODEL_ID

# Load .env file from project root
load_dotenv(Path(__file__).parent.parent / ".env")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1024
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 1.0
MIN_MAX_TOKENS = 1
MAX_MAX_TOKENS = 4096


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment.

    Provider API keys are not part of settings; providers read them at call time.
    """
    default_model: str
    log_level: str = "INFO"
    provider_timeout_seconds: float = 60.0
    client_timeout_seconds: float = 90.0
    api_base_url: str = "http://127.0.0.1:8000/api"
    host: str = "127.0.0.1"
    port: int = 8000


def load_settings() -> Settings:
    """Build settings from the current process environment."""
    return Settings(
        default_model=os.getenv("DEFAULT_MODEL", DEFAULT_MODEL_ID),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        provider_timeout_seconds=float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "60")),
        client_timeout_seconds=float(os.getenv("CLIENT_TIMEOUT_SECONDS", "90")),
        api_base_url=os.getenv("API_BASE_URL", "http://127.0.0.1:8000/api"),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging and route uvicorn loggers through the same format."""
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    for uvicorn_logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(uvicorn_logger_name)
        uvicorn_logger.handlers.clear()
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        uvicorn_logger.addHandler(handler)
