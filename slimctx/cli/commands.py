"""CLI commands for slimctx."""

import asyncio
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from slimctx import __version__
from slimctx.adapters.openai import to_messages
from slimctx.compaction.service import CompactionService, build_estimator
from slimctx.compaction.estimator import estimate_messages_tokens
from slimctx.config.loader import load_config

app = typer.Typer(
    name="slimctx",
    help="slimctx - Token-budgeted compaction for chat histories",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"slimctx v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """slimctx - Token-budgeted compaction for chat histories."""
    pass


def _read_history(path: Path) -> list[dict[str, Any]]:
    """Read a JSON list of messages or exit with an error."""
    if not path.exists():
        err_console.print(f"[red]Error:[/red] {path} not found")
        raise typer.Exit(1)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        err_console.print(f"[red]Error:[/red] {path} is not valid JSON: {e}")
        raise typer.Exit(1)
    if not isinstance(data, list) or not all(isinstance(m, dict) for m in data):
        err_console.print(f"[red]Error:[/red] {path} must contain a list of message objects")
        raise typer.Exit(1)
    return data


# ============================================================================
# Compression Commands
# ============================================================================


@app.command()
def compress(
    input_path: Path = typer.Argument(..., help="JSON file with a list of messages"),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="trim or summarize"),
    max_model_tokens: Optional[int] = typer.Option(None, "--max-model-tokens", help="Model context window"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", help="Trigger share of the window (0-1)"),
    min_recent: Optional[int] = typer.Option(None, "--min-recent", help="Recent messages always kept"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result here instead of stdout"),
):
    """Compact a chat history to fit the token budget."""
    config = load_config(config_path)
    compaction = config.compaction

    overrides: dict[str, Any] = {}
    if strategy is not None:
        if strategy not in ("trim", "summarize"):
            err_console.print(f"[red]Error:[/red] unknown strategy '{strategy}'")
            raise typer.Exit(1)
        overrides["strategy"] = strategy
    if max_model_tokens is not None:
        overrides["max_model_tokens"] = max_model_tokens
    if threshold is not None:
        overrides["threshold_percent"] = threshold
    if min_recent is not None:
        overrides["min_recent_messages"] = min_recent
    if overrides:
        compaction = compaction.model_copy(update=overrides)

    history = _read_history(input_path)
    service = CompactionService(compaction, provider=config.provider)
    result = asyncio.run(service.compact(history))

    text = json.dumps(result.messages, indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
    else:
        sys.stdout.write(text + "\n")

    table = Table(title="Compaction")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Strategy", result.strategy)
    table.add_row("Compressed", "yes" if result.compressed else "no")
    table.add_row("Messages", f"{len(history)} -> {len(result.messages)}")
    table.add_row("Tokens (est.)", f"{result.tokens_before} -> {result.tokens_after}")
    err_console.print(table)


@app.command()
def estimate(
    input_path: Path = typer.Argument(..., help="JSON file with a list of messages"),
    estimator: str = typer.Option("heuristic", "--estimator", "-e", help="heuristic or tiktoken"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Show estimated token usage of a chat history."""
    if estimator not in ("heuristic", "tiktoken"):
        err_console.print(f"[red]Error:[/red] unknown estimator '{estimator}'")
        raise typer.Exit(1)

    config = load_config(config_path)
    estimate_tokens = build_estimator(config.compaction.model_copy(update={"estimator": estimator}))
    messages = to_messages(_read_history(input_path))

    per_role: Counter[str] = Counter()
    counts: Counter[str] = Counter()
    for msg in messages:
        per_role[msg.role] += estimate_messages_tokens([msg], estimate_tokens)
        counts[msg.role] += 1

    table = Table(title="Token estimate")
    table.add_column("Role", style="cyan")
    table.add_column("Messages", justify="right")
    table.add_column("Tokens", justify="right")
    for role, tokens in per_role.items():
        table.add_row(role, str(counts[role]), str(tokens))
    table.add_row("total", str(len(messages)), str(sum(per_role.values())), style="bold")
    console.print(table)


if __name__ == "__main__":
    app()
