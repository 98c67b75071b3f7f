"""Command-line comparison against a running Prompt Tester API."""

import argparse
import asyncio
import json
import logging
import sys

from .client import ComparisonApiClient
from .grid import MAX_COLUMNS, PromptTester
from .settings import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, configure_logging, load_settings
from .view import ERROR, ColumnView, render_column

logger = logging.getLogger(__name__)


async def run_comparison(
    client: ComparisonApiClient,
    prompt: str,
    models: list[str],
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> list[ColumnView]:
    """Run `prompt` once per model, side by side, and describe each column."""
    tester = PromptTester(client, initial_columns=len(models))
    tester.set_prompt(prompt)
    for column, model in zip(tester.grid.columns, models):
        column.model = model
        column.temperature = temperature
        column.max_tokens = max_tokens

    columns = await tester.run_all()
    return [render_column(column) for column in columns]


async def _compare(args: argparse.Namespace, models: list[str]) -> list[ColumnView]:
    settings = load_settings()
    client = ComparisonApiClient(
        base_url=args.base_url or settings.api_base_url,
        timeout=settings.client_timeout_seconds,
    )
    async with client:
        return await run_comparison(client, args.prompt, models, args.temperature, args.max_tokens)


def _print_views(views: list[ColumnView], models: list[str]) -> None:
    for view, model in zip(views, models):
        print(f"=== {view.title}: {model} ===")
        if view.executed_label:
            print(view.executed_label)
        print(view.message)
        print()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Exit code (0=all columns answered, 1=CLI error, 2=a column failed)
    """
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description="Compare one prompt across up to four model configurations",
        epilog='Example:\n  prompt-tester-compare "Explain recursion" -m claude-3-haiku-20240307 -m gemini-2.5-flash',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("prompt", help="Prompt text sent to every column")
    parser.add_argument(
        "-m", "--model", action="append", dest="models",
        help=f"Model for one column; repeat for more (default: {settings.default_model})",
    )
    parser.add_argument("--temperature", type=float, default=DEFAULT_TEMPERATURE, help="Temperature for every column")
    parser.add_argument("--max-tokens", type=int, default=DEFAULT_MAX_TOKENS, help="Max tokens for every column")
    parser.add_argument("--base-url", help=f"API root (default: {settings.api_base_url})")
    parser.add_argument("--json", action="store_true", dest="json_output", help="Print column views as JSON")

    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    models = args.models or [settings.default_model]
    if len(models) > MAX_COLUMNS:
        logger.error(f"At most {MAX_COLUMNS} models can be compared at once, got {len(models)}")
        return 1

    try:
        views = asyncio.run(_compare(args, models))
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 2

    if args.json_output:
        print(json.dumps([
            {"model": model, "status": view.status, "message": view.message, "executed": view.executed_label}
            for view, model in zip(views, models)
        ], indent=2))
    else:
        _print_views(views, models)

    return 2 if any(view.status == ERROR for view in views) else 0


if __name__ == "__main__":
    sys.exit(main())
