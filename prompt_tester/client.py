"""Async HTTP client for the comparison API."""

import logging

import httpx

from .catalog import list_models as catalog_models
from .errors import ComparisonApiError
from .relay import ComparisonResult
from .settings import Settings, load_settings

logger = logging.getLogger(__name__)

API_ERROR_PREFIX = "API Error: "


def _api_error_message(message: str) -> str:
    if message.startswith(API_ERROR_PREFIX):
        return message
    return f"{API_ERROR_PREFIX}{message}"


class ComparisonApiClient:
    """Client for `/api/prompts/compare` and `/api/models`.

    Args:
        base_url: API root, e.g. ``http://127.0.0.1:8000/api``.
        timeout: Seconds before a request is abandoned.
        transport: Optional httpx transport (tests pass a MockTransport or
            an ASGITransport wrapping the app).
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000/api",
        timeout: float = 90.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ComparisonApiClient":
        settings = settings or load_settings()
        return cls(base_url=settings.api_base_url, timeout=settings.client_timeout_seconds)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ComparisonApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def compare(
        self,
        prompt: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> ComparisonResult:
        """Run one comparison through the backend relay.

        Raises:
            ComparisonApiError: On transport failure, timeout, or an error
                envelope from the relay.
        """
        payload = {
            "prompt": prompt,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        try:
            response = await self._client.post("/prompts/compare", json=payload)
        except httpx.TimeoutException:
            raise ComparisonApiError(_api_error_message("Request timed out")) from None
        except httpx.HTTPError as e:
            raise ComparisonApiError(_api_error_message(str(e) or type(e).__name__)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code != 200:
            message = data.get("error") if isinstance(data, dict) else None
            raise ComparisonApiError(
                _api_error_message(message or response.reason_phrase or "Request failed"),
                status_code=response.status_code,
            )

        try:
            return ComparisonResult(
                content=data.get("content") or "",
                model=data["model"],
                temperature=data["temperature"],
                max_tokens=data["max_tokens"],
                timestamp=data["timestamp"],
            )
        except (AttributeError, KeyError, TypeError):
            raise ComparisonApiError(_api_error_message("Malformed response from server")) from None

    async def list_models(self) -> list[dict]:
        """Fetch the model catalog, falling back to the bundled one."""
        try:
            response = await self._client.get("/models")
            response.raise_for_status()
            return response.json()["models"]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Failed to fetch models, using defaults: {e}")
            return catalog_models()
