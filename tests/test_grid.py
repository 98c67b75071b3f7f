"""Tests for the comparison grid and the top-level tester."""

import asyncio

import pytest

from fakes import ControlledClient, StaticClient, settle
from prompt_tester.grid import MAX_COLUMNS, ComparisonGrid, PromptTester
from prompt_tester.relay import validate_request
from prompt_tester.store import PromptStore


@pytest.fixture
def grid():
    return ComparisonGrid(PromptStore("Hi"), StaticClient())


class TestComparisonGrid:

    def test_starts_with_two_columns(self, grid):
        assert grid.column_count == 2
        assert [column.column_id for column in grid.columns] == [1, 2]

    @pytest.mark.parametrize("initial,expected", [(0, 1), (1, 1), (3, 3), (9, 4)])
    def test_initial_count_is_clamped(self, initial, expected):
        grid = ComparisonGrid(PromptStore(), StaticClient(), initial_columns=initial)

        assert grid.column_count == expected

    def test_add_column_stops_at_four(self, grid):
        grid.add_column()
        grid.add_column()
        assert grid.column_count == MAX_COLUMNS

        assert grid.add_column() is None
        assert grid.column_count == MAX_COLUMNS

    def test_remove_column_stops_at_one(self, grid):
        grid.remove_column()
        assert grid.column_count == 1

        assert grid.remove_column() is None
        assert grid.column_count == 1

    async def test_adding_column_leaves_others_untouched(self, grid):
        first, second = grid.columns
        first.model = "gemini-2.5-pro"
        first.temperature = 0.1
        await first.execute_prompt()
        second.max_tokens = 77

        third = grid.add_column()

        assert grid.columns[:2] == [first, second]
        assert first.model == "gemini-2.5-pro"
        assert first.temperature == 0.1
        assert first.response == "Recursion is..."
        assert second.max_tokens == 77
        assert third.column_id == 3
        assert third.temperature == 0.7
        assert third.response == ""

    def test_removing_column_leaves_others_untouched(self, grid):
        grid.add_column()
        first = grid.columns[0]
        first.temperature = 0.3

        removed = grid.remove_column()

        assert removed.column_id == 3
        assert grid.columns[0] is first
        assert first.temperature == 0.3

    async def test_remove_cancels_in_flight_run(self):
        client = ControlledClient()
        grid = ComparisonGrid(PromptStore("Hi"), client)
        last = grid.columns[-1]

        run = asyncio.create_task(last.execute_prompt())
        await settle()
        grid.remove_column()
        await run

        assert last.is_loading is False
        assert last.error is None

    def test_columns_share_one_store(self, grid):
        grid.store.update("New prompt")

        assert all(column.store.text == "New prompt" for column in grid.columns)


class TestPromptTester:

    async def test_run_column_uses_shared_prompt(self):
        client = StaticClient(content="answer")
        tester = PromptTester(client)
        tester.set_prompt("Explain recursion")

        column = await tester.run_column(1)

        assert column.response == "answer"
        assert tester.grid.columns[0].response == ""
        assert client.calls[0]["prompt"] == "Explain recursion"

    async def test_run_all_runs_each_column_with_its_own_settings(self):
        client = StaticClient()
        tester = PromptTester(client, initial_columns=3)
        tester.set_prompt("Hi")
        for column, temperature in zip(tester.grid.columns, [0.0, 0.5, 1.0]):
            column.temperature = temperature

        await tester.run_all()

        assert sorted(call["temperature"] for call in client.calls) == [0.0, 0.5, 1.0]
        assert all(column.response for column in tester.grid.columns)

    def test_default_model_reaches_columns(self):
        tester = PromptTester(StaticClient(), default_model="gemini-2.5-flash")

        assert all(column.model == "gemini-2.5-flash" for column in tester.grid.columns)
        assert tester.grid.add_column().model == "gemini-2.5-flash"

    async def test_configured_default_model_matches_relay(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_MODEL", "gemini-2.5-flash")
        client = StaticClient()
        tester = PromptTester(client)
        tester.set_prompt("Hi")

        await tester.run_column(0)

        assert [column.model for column in tester.grid.columns] == ["gemini-2.5-flash"] * 2
        assert client.calls[0]["model"] == "gemini-2.5-flash"
        assert validate_request("Hi").model == "gemini-2.5-flash"
