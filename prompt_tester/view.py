"""Display models for columns and the grid, independent of any UI toolkit."""

from dataclasses import dataclass

from .column import ComparisonColumn
from .grid import MAX_COLUMNS, MIN_COLUMNS, ComparisonGrid

LOADING = "loading"
ERROR = "error"
EMPTY = "empty"
RESPONSE = "response"

LOADING_MESSAGE = "Generating response..."
EMPTY_MESSAGE = "Ready to compare... Click Run to generate a response"


@dataclass(frozen=True)
class ColumnView:
    title: str
    status: str
    message: str
    executed_label: str | None
    temperature_label: str
    run_label: str
    run_enabled: bool
    reset_enabled: bool
    controls_enabled: bool
    can_clear: bool


@dataclass(frozen=True)
class GridView:
    column_count: int
    count_label: str
    can_add: bool
    can_remove: bool


def render_column(column: ComparisonColumn) -> ColumnView:
    """Describe what a column shows, following loading > error > empty > response."""
    if column.is_loading:
        status, message = LOADING, LOADING_MESSAGE
    elif column.error:
        status, message = ERROR, column.error
    elif not column.response:
        status, message = EMPTY, EMPTY_MESSAGE
    else:
        status, message = RESPONSE, column.response

    executed_label = None
    if status == RESPONSE and column.executed_at:
        executed_label = f"Executed: {column.executed_at}"

    prompt_ready = bool(column.store.text.strip())
    return ColumnView(
        title=f"Comparison {column.column_id}",
        status=status,
        message=message,
        executed_label=executed_label,
        temperature_label=f"Temperature ({column.temperature:.2f})",
        run_label="Running..." if column.is_loading else "Run",
        run_enabled=prompt_ready and not column.is_loading,
        reset_enabled=not column.is_loading,
        controls_enabled=not column.is_loading,
        can_clear=executed_label is not None,
    )


def render_grid(grid: ComparisonGrid) -> GridView:
    count = grid.column_count
    return GridView(
        column_count=count,
        count_label=f"{count} column{'s' if count != 1 else ''}",
        can_add=count < MAX_COLUMNS,
        can_remove=count > MIN_COLUMNS,
    )
