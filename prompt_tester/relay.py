"""Validate comparison requests and relay them to the LLM provider."""

import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from .errors import InvalidInput, UpstreamError
from .providers import TextGenerator
from .settings import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    MAX_MAX_TOKENS,
    MAX_TEMPERATURE,
    MIN_MAX_TOKENS,
    MIN_TEMPERATURE,
    load_settings,
)

logger = logging.getLogger(__name__)

EMPTY_PROMPT_MESSAGE = "Prompt cannot be empty"
TEMPERATURE_MESSAGE = "Temperature must be between 0 and 1"
MAX_TOKENS_MESSAGE = "Max tokens must be between 1 and 4096"


@dataclass(frozen=True)
class ComparisonRequest:
    """A validated request, ready to send to the provider."""
    prompt: str
    model: str
    temperature: float
    max_tokens: int


@dataclass(frozen=True)
class ComparisonResult:
    """One provider completion, as returned to the browser."""
    content: str
    model: str
    temperature: float
    max_tokens: int
    timestamp: str

    def to_dict(self) -> dict:
        return asdict(self)


def _parse_temperature(value: Any) -> float:
    if value is None:
        return DEFAULT_TEMPERATURE
    if isinstance(value, bool):
        raise InvalidInput(TEMPERATURE_MESSAGE)
    try:
        temperature = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInput(TEMPERATURE_MESSAGE) from None
    if math.isnan(temperature) or not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
        raise InvalidInput(TEMPERATURE_MESSAGE)
    return temperature


def _parse_max_tokens(value: Any) -> int:
    if value is None:
        return DEFAULT_MAX_TOKENS
    if isinstance(value, bool):
        raise InvalidInput(MAX_TOKENS_MESSAGE)
    try:
        max_tokens = int(value)
    except (TypeError, ValueError):
        # "12.7" style strings truncate like numeric floats do
        try:
            max_tokens = int(float(value))
        except (TypeError, ValueError, OverflowError):
            raise InvalidInput(MAX_TOKENS_MESSAGE) from None
    except OverflowError:
        raise InvalidInput(MAX_TOKENS_MESSAGE) from None
    if not MIN_MAX_TOKENS <= max_tokens <= MAX_MAX_TOKENS:
        raise InvalidInput(MAX_TOKENS_MESSAGE)
    return max_tokens


def validate_request(
    prompt: Any,
    model: str | None = None,
    temperature: Any = None,
    max_tokens: Any = None,
    default_model: str | None = None,
) -> ComparisonRequest:
    """Check and normalize raw request fields.

    The prompt is checked first, so an empty prompt is reported even when the
    numeric fields are also out of range.

    Raises:
        InvalidInput: With a message naming the first invalid field.
    """
    if not isinstance(prompt, str) or not prompt.strip():
        raise InvalidInput(EMPTY_PROMPT_MESSAGE)

    return ComparisonRequest(
        prompt=prompt,
        model=model or default_model or load_settings().default_model,
        temperature=_parse_temperature(temperature),
        max_tokens=_parse_max_tokens(max_tokens),
    )


def compare(
    prompt: Any,
    model: str | None = None,
    temperature: Any = None,
    max_tokens: Any = None,
    *,
    generator: TextGenerator,
    default_model: str | None = None,
) -> ComparisonResult:
    """Validate a request and run it through the provider once.

    Raises:
        InvalidInput: If any field fails validation; the provider is not called.
        UpstreamError: If the provider call fails for any reason.
    """
    request = validate_request(prompt, model, temperature, max_tokens, default_model=default_model)

    logger.info(
        f"Relaying prompt ({len(request.prompt)} chars) | Model: {request.model} | "
        f"Temp: {request.temperature} | Max tokens: {request.max_tokens}"
    )

    try:
        content = generator.generate(
            request.prompt,
            request.model,
            request.temperature,
            request.max_tokens,
        )
    except Exception as e:
        # Malformed provider responses land here too, not only SDK errors
        error_type = getattr(e, "error_type", None) or type(e).__name__
        logger.error(f"Provider error: {error_type} - {e}")
        logger.error(f"Model attempted: {request.model}")
        raise UpstreamError(f"API Error: {e}", error_type=error_type) from e

    return ComparisonResult(
        content=content or "",
        model=request.model,
        temperature=request.temperature,
        max_tokens=request.max_tokens,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
