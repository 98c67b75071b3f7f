"""Comparison grid and the top-level prompt tester."""

import asyncio
import logging

from .column import CompareClient, ComparisonColumn
from .settings import load_settings
from .store import PromptStore

logger = logging.getLogger(__name__)

MIN_COLUMNS = 1
MAX_COLUMNS = 4


class ComparisonGrid:
    """The visible columns, between one and four of them.

    Adding or removing only creates or drops the last column; the others are
    left exactly as they were.
    """

    def __init__(
        self,
        store: PromptStore,
        client: CompareClient,
        initial_columns: int = 2,
        default_model: str | None = None,
    ):
        self.store = store
        self.client = client
        self.default_model = default_model or load_settings().default_model
        self.columns: list[ComparisonColumn] = []

        count = max(MIN_COLUMNS, min(MAX_COLUMNS, initial_columns))
        for _ in range(count):
            self.columns.append(self._new_column())

    def _new_column(self) -> ComparisonColumn:
        return ComparisonColumn(
            self.store,
            self.client,
            column_id=len(self.columns) + 1,
            default_model=self.default_model,
        )

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def add_column(self) -> ComparisonColumn | None:
        """Append a column with default settings; no-op at the maximum."""
        if self.column_count >= MAX_COLUMNS:
            return None
        column = self._new_column()
        self.columns.append(column)
        logger.debug(f"Added column {column.column_id}")
        return column

    def remove_column(self) -> ComparisonColumn | None:
        """Drop the last column, cancelling its run; no-op at the minimum."""
        if self.column_count <= MIN_COLUMNS:
            return None
        column = self.columns.pop()
        column.cancel()
        logger.debug(f"Removed column {column.column_id}")
        return column


class PromptTester:
    """Shared prompt plus a grid of columns wired to one API client."""

    def __init__(
        self,
        client: CompareClient,
        initial_columns: int = 2,
        default_model: str | None = None,
    ):
        self.client = client
        self.store = PromptStore()
        self.grid = ComparisonGrid(
            self.store,
            client,
            initial_columns=initial_columns,
            default_model=default_model,
        )

    def set_prompt(self, text: str) -> None:
        self.store.update(text)

    async def run_column(self, index: int) -> ComparisonColumn:
        """Run the shared prompt in the column at `index` (0-based)."""
        column = self.grid.columns[index]
        await column.execute_prompt()
        return column

    async def run_all(self) -> list[ComparisonColumn]:
        """Run every column at once; each settles independently."""
        columns = list(self.grid.columns)
        await asyncio.gather(*(column.execute_prompt() for column in columns))
        return columns
