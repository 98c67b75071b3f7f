"""Provider clients that turn a single user prompt into generated text."""

import logging
import os
from typing import Protocol

import anthropic
import httpx
from google import genai
from google.genai import errors as genai_errors

from .catalog import ANTHROPIC, GOOGLE, provider_for
from .errors import UpstreamError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that can complete a single-turn prompt."""

    def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        ...


class AnthropicGenerator:
    """Anthropic Messages API client."""

    def __init__(self, timeout: float = 60.0, api_key_env: str = "ANTHROPIC_API_KEY"):
        self.timeout = timeout
        self.api_key_env = api_key_env

    def _client(self) -> anthropic.Anthropic:
        api_key = os.getenv(self.api_key_env)
        if not api_key:
            raise UpstreamError(f"{self.api_key_env} is not set", error_type="ConfigurationError")
        # Retries are left to the user pressing Run again
        return anthropic.Anthropic(api_key=api_key, timeout=self.timeout, max_retries=0)

    def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        client = self._client()
        try:
            response = client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AnthropicError as e:
            raise UpstreamError(str(e), error_type=type(e).__name__) from e

        for block in response.content:
            if getattr(block, "type", None) == "text":
                return block.text or ""
        return ""


class GeminiGenerator:
    """Google Gemini client built on google-genai."""

    def __init__(self, timeout: float = 60.0):
        self.timeout = timeout

    def _client(self) -> genai.Client:
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise UpstreamError("GEMINI_API_KEY is not set", error_type="ConfigurationError")
        return genai.Client(
            api_key=api_key,
            http_options={"timeout": int(self.timeout * 1000)},
        )

    def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        client = self._client()
        config = {
            "temperature": temperature,
            "max_output_tokens": max_tokens,
        }
        try:
            response = client.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise UpstreamError(str(e), error_type=type(e).__name__) from e

        if not response.candidates:
            return ""
        content = response.candidates[0].content
        if not content or not content.parts:
            return ""
        for part in content.parts:
            # Skip thinking output, only the answer counts
            if getattr(part, "thought", False):
                continue
            if getattr(part, "text", None):
                return part.text
        return ""


class ProviderRouter:
    """Dispatch each call to the generator that serves the requested model."""

    def __init__(self, generators: dict[str, TextGenerator] | None = None, timeout: float = 60.0):
        if generators is None:
            generators = {
                ANTHROPIC: AnthropicGenerator(timeout=timeout),
                GOOGLE: GeminiGenerator(timeout=timeout),
            }
        self.generators = generators

    def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        provider = provider_for(model)
        generator = self.generators.get(provider)
        if generator is None:
            raise UpstreamError(f"No provider configured for model {model}", error_type="ConfigurationError")
        logger.debug(f"Routing {model} to {provider}")
        return generator.generate(prompt, model, temperature, max_tokens)
