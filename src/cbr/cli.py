"""Command line interface for cbr."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from cbr.config import (
    CbrConfig,
    ConfigError,
    ConfigManager,
    parse_override_value,
    resolve_with_precedence,
)
from cbr.editing import EditSession
from cbr.environment import resolve_environment
from cbr.errors import CbrError, ExternalProcessError, FilesystemOpError
from cbr.ingestion import DirectoryScanner, collect_inputs
from cbr.plan import OperationExecutor, Outcome, plan_edit
from cbr.trash import TrashInvoker

console = Console()

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, silent: bool) -> None:
    """Print CLI output unless silent mode is active."""
    if silent:
        return
    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands.

    Args:
        command: Command name to include in the summary.
        root: Target root path relevant to the command.
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """

    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(root))}: {parts}.[/green]"


def _format_outcome(outcome: Outcome) -> str:
    source = escape(outcome.source)
    if outcome.operation == "renamed":
        destination = escape(outcome.destination or "")
        return (
            f"[bold green]Renamed[/bold green] '{source}'\n"
            f"[green]     ->[/green] '{destination}'"
        )
    if outcome.operation == "parked":
        temp_name = escape(outcome.destination or "")
        return (
            f"[bold magenta]Parked[/bold magenta] '{source}'\n"
            f"[magenta]     at[/magenta] '{temp_name}'"
        )
    if outcome.operation == "removed":
        return f"[bold red]Removed[/bold red] '{source}'"
    return f"[bold yellow]Trashed[/bold yellow] '{source}'"


def _count_outcomes(outcomes: list[Outcome]) -> dict[str, int]:
    counts = {"renamed": 0, "removed": 0, "trashed": 0}
    for outcome in outcomes:
        counts[outcome.operation] = counts.get(outcome.operation, 0) + 1
    return counts


def _failure_details(exc: FilesystemOpError | ExternalProcessError) -> dict[str, Any]:
    """Describe what a failed run already did, for JSON error payloads."""
    details: dict[str, Any] = {
        "completed": [outcome.model_dump(mode="json") for outcome in exc.completed]
    }
    if isinstance(exc, FilesystemOpError):
        details["source"] = exc.source.as_posix()
        details["destination"] = None if exc.destination is None else exc.destination.as_posix()
        details["staged_as"] = None if exc.staged_as is None else exc.staged_as.as_posix()
    return details


def _configure_logging(level: str) -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("cbr").setLevel(resolved)


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """

    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="cbr")
def cli() -> None:
    """cbr -- bulk rename, delete or trash files by editing their names."""


@cli.command()
@click.argument("files", nargs=-1, type=str)
@click.option("-d", "--delchar", type=str, help="Deletion mark to use. Default '#'.")
@click.option("-e", "--editor", type=str, help="Editor to use.")
@click.option("-f", "--force", is_flag=True, help="Allow overwriting of existing files.")
@click.option("-s", "--silent", is_flag=True, help="Only report errors.")
@click.option("-t", "--trash", is_flag=True, help="Send files to trash instead of deleting them.")
@click.option("--dry-run", is_flag=True, help="Show what would change without touching files.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the outcome.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def rename(
    ctx: click.Context,
    files: tuple[str, ...],
    delchar: str | None,
    editor: str | None,
    force: bool,
    silent: bool,
    trash: bool,
    dry_run: bool,
    json_output: bool,
    verbose: bool,
) -> None:
    """Edit the names of FILES (default: the current directory) and apply the result.

    Lines left unchanged are skipped, edited lines rename the file and lines
    starting with the deletion mark remove (or trash) it.

    Args:
        ctx: Click context used for parameter source inspection.
        files: Explicit names to edit, relative to the working directory.
        delchar: Deletion mark override.
        editor: Editor override.
        force: Whether renames may overwrite existing files.
        silent: Whether to suppress everything but errors.
        trash: Whether deletions go to the trash.
        dry_run: If True, skip making filesystem mutations.
        json_output: If True, emit JSON describing the outcome.
        verbose: If True, log at DEBUG level.

    Raises:
        click.ClickException: If configuration, validation or execution fails.
    """

    overrides: dict[str, Any] = {}
    if delchar is not None:
        overrides["renaming.delete_char"] = delchar
    if editor is not None:
        overrides["editor.command"] = editor
    if force:
        overrides["renaming.force"] = True
    if trash:
        overrides["renaming.trash"] = True

    root = Path.cwd()
    outcomes: list[Outcome] = []
    silent_enabled = silent
    try:
        config = ConfigManager().load(cli_overrides=overrides)
        _configure_logging("DEBUG" if verbose else config.logging.level)

        explicit_silent = ctx.get_parameter_source("silent") == ParameterSource.COMMANDLINE
        silent_enabled = silent if explicit_silent else config.cli.silent_default
        if json_output:
            if explicit_silent and silent_enabled:
                raise click.ClickException("--json cannot be combined with --silent.")
            silent_enabled = False

        options = config.renaming
        environment = resolve_environment(config, trash=options.trash)

        if files:
            original = collect_inputs(files, root=root, delete_char=options.delete_char)
        else:
            original = DirectoryScanner(delete_char=options.delete_char).scan(root)

        if len(original) == 0:
            _emit_message(
                "[yellow]No files to rename.[/yellow]",
                silent=silent_enabled or json_output,
            )
        else:
            targets = EditSession(environment.editor).run(original)
            plan = plan_edit(
                original,
                targets,
                root=root,
                delete_char=options.delete_char,
                force=options.force,
                trash=options.trash,
            )
            trash_program = None
            if environment.trash_program is not None:
                trash_program = TrashInvoker(
                    environment.trash_program, environment.trash_arguments
                )
            executor = OperationExecutor(
                root=root,
                force=options.force,
                trash=trash_program,
                chunk_size=config.trash.chunk_size,
            )
            outcomes = executor.apply(plan, dry_run=dry_run)
    except (FilesystemOpError, ExternalProcessError) as exc:
        if not json_output:
            for outcome in exc.completed:
                _emit_message(_format_outcome(outcome), silent=silent_enabled)
        _handle_cli_error(
            str(exc),
            code=exc.code,
            json_output=json_output,
            details=_failure_details(exc),
            original=exc,
        )
        return
    except CbrError as exc:
        _handle_cli_error(str(exc), code=exc.code, json_output=json_output, original=exc)
        return

    counts = _count_outcomes(outcomes)
    if json_output:
        console.print_json(
            data={
                "context": {
                    "root": root.as_posix(),
                    "dry_run": dry_run,
                    "force": options.force,
                    "trash": options.trash,
                },
                "counts": counts,
                "outcomes": [outcome.model_dump(mode="json") for outcome in outcomes],
            }
        )
        return

    if dry_run and outcomes:
        _emit_message("[yellow]Dry run; no files were changed.[/yellow]", silent=silent_enabled)
    for outcome in outcomes:
        _emit_message(_format_outcome(outcome), silent=silent_enabled)
    if outcomes:
        _emit_message(_format_summary_line("Rename", root, counts), silent=silent_enabled)


@cli.group()
def config() -> None:
    """Manage cbr configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        config = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(config.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Raises:
        click.ClickException: If assignment or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'renaming.force'.")

    try:
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parse_override_value(value))
        resolve_with_precedence(defaults=CbrConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    # diff[:2] are the file headers; the timestamp line changes on every save.
    changes = [line for line in diff[2:] if line[:1] in "+-" and "Last updated" not in line]
    if not changes:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
