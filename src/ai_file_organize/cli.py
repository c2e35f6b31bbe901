"""Command line interface for ai-file-organize."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ai_file_organize.config import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, ConfigManager
from ai_file_organize.organization import UnmatchedLabelError
from ai_file_organize.pipeline import EntryOutcome, EntryState, PipelineOrchestrator, RunContext

console = Console()
error_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Route library logging through Rich at the requested level."""
    root = logging.getLogger("ai_file_organize")
    root.handlers.clear()
    root.addHandler(RichHandler(console=error_console, show_path=False, rich_tracebacks=False))
    root.setLevel(level.upper())
    root.propagate = False


def _emit_message(message: Any, *, mode: str, quiet: bool) -> None:
    """Print a message unless quiet mode hides it.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, or `error`).
        quiet: Whether quiet mode is active.
    """
    if quiet and mode != "error":
        return
    console.print(message)


def _format_outcome(outcome: EntryOutcome) -> str:
    name = escape(outcome.entry.name)
    if outcome.state is EntryState.RELOCATED:
        target = escape(str(outcome.final_path))
        return f"[green]moved[/green] {name} -> {target} [dim]({escape(outcome.label or '')})[/dim]"
    stage = outcome.failed_at.value if outcome.failed_at else "unknown"
    return f"[red]failed[/red] {name} [dim](after {stage})[/dim]: {escape(outcome.error or '')}"


def _format_summary_line(root: Path, metrics: dict[str, int]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]Organize summary for {escape(str(root))}: {parts}.[/green]"


def _load_config(config_path: Path, cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    config = ConfigManager(config_path).load(cli_overrides=cli_overrides)
    if not config.classifications:
        raise ConfigError("No classifications configured.")
    if not config.classifier.api_key:
        raise ConfigError(
            "No classifier credential configured; set classifier.api_key or AIFO__CLASSIFIER__API_KEY."
        )
    return config


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="ai-file-organize")
@click.option(
    "--temp-dir",
    "temp_dir",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Staging directory whose entries are organized.",
)
@click.option(
    "--config",
    "config_path",
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (JSON or YAML).",
)
@click.option("--model", help="Override classifier.model for this run.")
@click.option("--endpoint", help="Override classifier.endpoint for this run.")
@click.option("--json", "json_output", is_flag=True, help="Emit the run report as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(
    temp_dir: Path,
    config_path: Path,
    model: str | None,
    endpoint: str | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Sort the entries of a staging directory into classified destinations.

    Each file or folder directly under --temp-dir is described, labelled by
    the configured chat-completions endpoint, and moved into the directory of
    the matching classification rule.
    """
    cli_overrides: dict[str, Any] = {}
    if model:
        cli_overrides["classifier.model"] = model
    if endpoint:
        cli_overrides["classifier.endpoint"] = endpoint

    try:
        config = _load_config(config_path, cli_overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if verbose:
        _configure_logging("DEBUG")
    else:
        # the JSON report already carries per-entry errors
        _configure_logging("ERROR" if json_output else config.logging.level)
    context = RunContext.from_config(config)
    orchestrator = PipelineOrchestrator(context)

    def _report(outcome: EntryOutcome) -> None:
        if json_output:
            return
        mode = "error" if outcome.state is EntryState.FAILED else "detail"
        _emit_message(_format_outcome(outcome), mode=mode, quiet=quiet)

    try:
        report = orchestrator.run(temp_dir, on_outcome=_report)
    except UnmatchedLabelError as exc:
        raise click.ClickException(f"Aborting run: {exc}") from exc
    except OSError as exc:
        raise click.ClickException(f"Cannot read staging directory {temp_dir}: {exc}") from exc
    finally:
        context.close()

    if json_output:
        console.print_json(data=report.to_dict())
        return

    _emit_message(_format_summary_line(temp_dir, report.counts()), mode="summary", quiet=quiet)


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
