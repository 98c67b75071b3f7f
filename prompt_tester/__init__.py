"""Side-by-side comparison of LLM outputs across models and parameters."""

from .client import ComparisonApiClient
from .column import ComparisonColumn
from .grid import ComparisonGrid, PromptTester
from .store import PromptStore
from .view import render_column, render_grid

__all__ = [
    "ComparisonApiClient",
    "ComparisonColumn",
    "ComparisonGrid",
    "PromptStore",
    "PromptTester",
    "render_column",
    "render_grid",
]
