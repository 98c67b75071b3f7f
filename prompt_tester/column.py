"""State for a single comparison column."""

import asyncio
import logging
from datetime import datetime
from typing import Protocol

from .errors import ComparisonApiError, MissingPromptStore
from .relay import ComparisonResult
from .settings import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, load_settings
from .store import PromptStore

logger = logging.getLogger(__name__)

EMPTY_PROMPT_ERROR = "Please enter a prompt"


class CompareClient(Protocol):
    async def compare(
        self, prompt: str, model: str, temperature: float, max_tokens: int
    ) -> ComparisonResult:
        ...


class ComparisonColumn:
    """One model configuration and the latest result of running the shared prompt.

    Each column runs at most one request at a time. Starting a new run cancels
    the previous one, and a superseded run never writes the column's state.

    Args:
        store: Shared prompt store. Required.
        client: Anything with an async ``compare`` (normally ComparisonApiClient).
        column_id: 1-based position, used for display and logging.
        default_model: Model selected on creation and after reset. Defaults
            to the configured `DEFAULT_MODEL`.
    """

    def __init__(
        self,
        store: PromptStore,
        client: CompareClient,
        column_id: int = 1,
        default_model: str | None = None,
    ):
        if store is None:
            raise MissingPromptStore("ComparisonColumn must be created with a PromptStore")
        self.store = store
        self.client = client
        self.column_id = column_id
        self.default_model = default_model or load_settings().default_model

        self.model = self.default_model
        self.temperature = DEFAULT_TEMPERATURE
        self.max_tokens = DEFAULT_MAX_TOKENS

        self.response = ""
        self.result: ComparisonResult | None = None
        self.error: str | None = None
        self.executed_at: str | None = None
        self.is_loading = False

        self._task: asyncio.Task | None = None
        self._run_id = 0

    def _is_current(self, run_id: int) -> bool:
        return run_id == self._run_id

    async def execute_prompt(self, prompt_text: str | None = None) -> None:
        """Run the prompt (the shared one by default) with this column's parameters."""
        prompt = self.store.text if prompt_text is None else prompt_text
        if not prompt.strip():
            self.error = EMPTY_PROMPT_ERROR
            return

        if self._task is not None and not self._task.done():
            self._task.cancel()

        self._run_id += 1
        run_id = self._run_id

        self.is_loading = True
        self.error = None
        self.response = ""
        self.result = None

        task = asyncio.create_task(
            self.client.compare(prompt, self.model, self.temperature, self.max_tokens)
        )
        self._task = task
        logger.debug(f"Column {self.column_id}: run {run_id} started with {self.model}")

        try:
            result = await task
        except asyncio.CancelledError:
            if not self._is_current(run_id):
                logger.debug(f"Column {self.column_id}: run {run_id} superseded")
                return
            # The caller was cancelled, not superseded
            self.is_loading = False
            self._task = None
            raise
        except Exception as e:
            if not self._is_current(run_id):
                return
            if not isinstance(e, ComparisonApiError):
                logger.exception(f"Column {self.column_id}: unexpected error during run {run_id}")
            self.error = str(e) or type(e).__name__
            self.response = ""
            self.is_loading = False
            self._task = None
            return

        if not self._is_current(run_id):
            return

        self.result = result
        self.response = result.content
        self.executed_at = datetime.now().strftime("%I:%M:%S %p")
        self.error = None
        self.is_loading = False
        self._task = None

    def cancel(self) -> None:
        """Abandon any in-flight run without reporting an error."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._run_id += 1
        self._task = None
        self.is_loading = False

    def clear_response(self) -> None:
        """Wipe response, error and timestamp; parameters are kept."""
        self.response = ""
        self.result = None
        self.error = None
        self.executed_at = None

    def reset_parameters(self) -> None:
        """Restore default parameters and clear the response."""
        self.model = self.default_model
        self.temperature = DEFAULT_TEMPERATURE
        self.max_tokens = DEFAULT_MAX_TOKENS
        self.clear_response()
