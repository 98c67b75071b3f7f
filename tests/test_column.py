"""Tests for per-column comparison state."""

import asyncio

import pytest

from fakes import ControlledClient, StaticClient, settle
from prompt_tester.catalog import DEFAULT_MODEL_ID
from prompt_tester.column import EMPTY_PROMPT_ERROR, ComparisonColumn
from prompt_tester.errors import ComparisonApiError, MissingPromptStore
from prompt_tester.store import PromptStore


@pytest.fixture
def store():
    return PromptStore("Explain recursion")


class TestExecutePrompt:

    async def test_success_scenario(self, store):
        """Default params, provider returns text: the column shows it."""
        client = StaticClient(content="Recursion is...")
        column = ComparisonColumn(store, client)

        await column.execute_prompt()

        assert column.response == "Recursion is..."
        assert column.executed_at
        assert column.is_loading is False
        assert column.error is None
        assert client.calls == [{
            "prompt": "Explain recursion",
            "model": DEFAULT_MODEL_ID,
            "temperature": 0.7,
            "max_tokens": 1024,
        }]

    async def test_uses_explicit_prompt(self, store):
        client = StaticClient()
        column = ComparisonColumn(store, client)

        await column.execute_prompt("Other prompt")

        assert client.calls[0]["prompt"] == "Other prompt"

    async def test_sends_column_parameters(self, store):
        client = StaticClient()
        column = ComparisonColumn(store, client)
        column.model = "gemini-2.5-pro"
        column.temperature = 0.1
        column.max_tokens = 99

        await column.execute_prompt()

        assert client.calls[0]["model"] == "gemini-2.5-pro"
        assert client.calls[0]["temperature"] == 0.1
        assert client.calls[0]["max_tokens"] == 99

    @pytest.mark.parametrize("prompt", ["", "   \n"])
    async def test_blank_prompt_fails_without_request(self, prompt):
        client = StaticClient()
        column = ComparisonColumn(PromptStore(prompt), client)

        await column.execute_prompt()

        assert column.error == EMPTY_PROMPT_ERROR
        assert column.is_loading is False
        assert client.calls == []

    async def test_failure_sets_error_and_clears_response(self, store):
        client = StaticClient(content="first answer")
        column = ComparisonColumn(store, client)
        await column.execute_prompt()

        client.error = ComparisonApiError("API Error: Overloaded")
        await column.execute_prompt()

        assert column.error == "API Error: Overloaded"
        assert column.response == ""
        assert column.is_loading is False

    async def test_unexpected_error_is_shown(self, store):
        column = ComparisonColumn(store, StaticClient(error=RuntimeError("boom")))

        await column.execute_prompt()

        assert column.error == "boom"
        assert column.is_loading is False

    async def test_running_state_clears_previous_output(self, store):
        client = ControlledClient()
        column = ComparisonColumn(store, client)
        column.response = "old"
        column.error = "old error"

        run = asyncio.create_task(column.execute_prompt())
        await settle()

        assert column.is_loading is True
        assert column.response == ""
        assert column.error is None

        client.resolve(0, content="new")
        await run
        assert column.response == "new"


class TestCancellation:

    async def test_second_run_supersedes_first(self, store):
        """Only the latest run's outcome reaches the column."""
        client = ControlledClient()
        column = ComparisonColumn(store, client)

        first = asyncio.create_task(column.execute_prompt("first"))
        await settle()
        second = asyncio.create_task(column.execute_prompt("second"))
        await settle()

        assert len(client.calls) == 2
        assert first.done()
        assert column.error is None
        assert column.is_loading is True

        client.resolve(1, content="second answer")
        await second
        await first

        assert column.response == "second answer"
        assert column.error is None
        assert column.is_loading is False

    async def test_late_result_from_superseded_run_is_ignored(self, store):
        """A superseded request that completes anyway cannot overwrite newer state."""
        client = ControlledClient(ignore_cancellation=True)
        column = ComparisonColumn(store, client)

        first = asyncio.create_task(column.execute_prompt("first"))
        await settle()
        second = asyncio.create_task(column.execute_prompt("second"))
        await settle()

        client.resolve(1, content="second answer")
        await second
        client.resolve(0, content="stale answer")
        await first

        assert column.response == "second answer"
        assert column.is_loading is False

    async def test_late_error_from_superseded_run_is_ignored(self, store):
        client = ControlledClient(ignore_cancellation=True)
        column = ComparisonColumn(store, client)

        first = asyncio.create_task(column.execute_prompt("first"))
        await settle()
        second = asyncio.create_task(column.execute_prompt("second"))
        await settle()

        client.resolve(1, content="second answer")
        await second
        client.resolve(0, error=ComparisonApiError("API Error: stale"))
        await first

        assert column.response == "second answer"
        assert column.error is None

    async def test_cancel_stops_run_silently(self, store):
        client = ControlledClient()
        column = ComparisonColumn(store, client)

        run = asyncio.create_task(column.execute_prompt())
        await settle()
        column.cancel()
        await run

        assert column.is_loading is False
        assert column.error is None
        assert column.response == ""

    async def test_caller_cancellation_propagates(self, store):
        client = ControlledClient()
        column = ComparisonColumn(store, client)

        run = asyncio.create_task(column.execute_prompt())
        await settle()
        run.cancel()

        with pytest.raises(asyncio.CancelledError):
            await run
        assert column.is_loading is False
        assert column.error is None

    async def test_columns_do_not_cancel_each_other(self, store):
        client = ControlledClient()
        left = ComparisonColumn(store, client, column_id=1)
        right = ComparisonColumn(store, client, column_id=2)

        left_run = asyncio.create_task(left.execute_prompt())
        right_run = asyncio.create_task(right.execute_prompt())
        await settle()

        client.resolve(1, content="right")
        await right_run
        assert left.is_loading is True

        client.resolve(0, content="left")
        await left_run
        assert left.response == "left"
        assert right.response == "right"


class TestClearAndReset:

    async def test_clear_keeps_parameters(self, store):
        column = ComparisonColumn(store, StaticClient())
        column.temperature = 0.2
        await column.execute_prompt()

        column.clear_response()

        assert column.response == ""
        assert column.error is None
        assert column.executed_at is None
        assert column.temperature == 0.2

    async def test_reset_restores_defaults_and_clears(self, store):
        column = ComparisonColumn(store, StaticClient(error=ComparisonApiError("API Error: nope")))
        column.model = "gemini-2.5-flash"
        column.temperature = 0.0
        column.max_tokens = 5
        await column.execute_prompt()

        column.reset_parameters()

        assert (column.model, column.temperature, column.max_tokens) == (DEFAULT_MODEL_ID, 0.7, 1024)
        assert column.error is None
        assert column.response == ""
        assert column.executed_at is None

    def test_reset_uses_column_default_model(self, store):
        column = ComparisonColumn(store, StaticClient(), default_model="gemini-2.5-flash")
        column.model = "claude-3-haiku-20240307"

        column.reset_parameters()

        assert column.model == "gemini-2.5-flash"

    def test_default_model_follows_configured_setting(self, store, monkeypatch):
        monkeypatch.setenv("DEFAULT_MODEL", "gemini-2.5-flash")
        column = ComparisonColumn(store, StaticClient())
        column.model = "claude-3-haiku-20240307"

        column.reset_parameters()

        assert column.default_model == "gemini-2.5-flash"
        assert column.model == "gemini-2.5-flash"


def test_column_requires_store():
    with pytest.raises(MissingPromptStore):
        ComparisonColumn(None, StaticClient())
