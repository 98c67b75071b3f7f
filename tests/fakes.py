"""In-memory stand-ins for the provider and the API client."""

import asyncio

from prompt_tester.relay import ComparisonResult


class FakeGenerator:
    """Provider stand-in that records calls and returns canned text."""

    def __init__(self, text: str = "Recursion is...", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    def generate(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.text


class StaticClient:
    """API client stand-in that answers immediately."""

    def __init__(self, content: str = "Recursion is...", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    async def compare(self, prompt, model, temperature, max_tokens):
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return ComparisonResult(
            content=self.content,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timestamp="2025-01-01T00:00:00+00:00",
        )


class ControlledClient:
    """API client stand-in whose calls stay pending until resolved by the test."""

    def __init__(self, ignore_cancellation: bool = False):
        self.ignore_cancellation = ignore_cancellation
        self.calls: list[dict] = []
        self._pending: list[tuple[asyncio.Event, dict]] = []

    async def compare(self, prompt, model, temperature, max_tokens):
        gate = asyncio.Event()
        outcome: dict = {}
        self.calls.append({"prompt": prompt, "model": model})
        self._pending.append((gate, outcome))
        try:
            await gate.wait()
        except asyncio.CancelledError:
            if not self.ignore_cancellation:
                raise
            # Keep going as if the cancellation never arrived
            await gate.wait()

        if "error" in outcome:
            raise outcome["error"]
        return ComparisonResult(
            content=outcome["content"],
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timestamp="2025-01-01T00:00:00+00:00",
        )

    def resolve(self, index: int, content: str | None = None, error: Exception | None = None) -> None:
        gate, outcome = self._pending[index]
        if error is not None:
            outcome["error"] = error
        else:
            outcome["content"] = content
        gate.set()


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next real suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


