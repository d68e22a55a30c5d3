from __future__ import annotations

import logging
from importlib.metadata import version
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from path_picker.config import ConfigError, PickerConfig, load_config
from path_picker.core.candidates import path_candidates
from path_picker.core.environment import Environment
from path_picker.core.models import CandidateKind, CompletionKind


def _version_callback(value: bool) -> None:
    if value:
        print(f"path-picker {version('path-picker')}")
        raise typer.Exit()


app = typer.Typer(
    name="path-picker",
    help="Pick a file or directory path with incremental, drill-in completion.",
    invoke_without_command=True,
)
console = Console()
err_console = Console(stderr=True)

_KIND_STYLES = {
    CandidateKind.DIRECTORY: "cyan",
    CandidateKind.FILE: "white",
    CandidateKind.CREATE: "green",
}


def _configure_logging(verbose: bool, handler: logging.Handler) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def _load_config_or_exit(config_file: Path | None, **overrides) -> PickerConfig:
    try:
        return load_config(config_file, **overrides)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)


def _launch_picker_impl(config: PickerConfig, start: str, verbose: bool) -> None:
    """Run the Textual picker and print the chosen path."""
    from textual.logging import TextualHandler

    from path_picker.tui.app import PathPickerApp

    # Anything written to stderr while the TUI owns the terminal would garble it.
    _configure_logging(verbose, TextualHandler())

    result = PathPickerApp(config, start=start).run()
    if result is None:
        err_console.print("[yellow]Cancelled.[/yellow]")
        raise typer.Exit(code=1)
    print(result)


@app.command("pick")
def pick(
    start: str = typer.Argument(
        "",
        help="Initial input value (absolute, or relative to the workspace root)",
    ),
    kind: CompletionKind = typer.Option(
        None,
        "--kind",
        "-k",
        help="Candidates to offer: all (default), directory, or file",
    ),
    root: Path = typer.Option(
        None,
        "--root",
        "-r",
        help="Workspace root for relative paths (default: $PATH_PICKER_ROOT or home)",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        help="YAML config file (default: ~/.config/path-picker/config.yaml if present)",
    ),
    title: str = typer.Option(
        None,
        "--title",
        help="Heading shown above the input",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        is_flag=True,
        help="Log debug output (visible in the Textual devtools console)",
    ),
):
    """Launch the interactive picker and print the selected path."""
    config = _load_config_or_exit(
        config_file, kind=kind, workspace_root=root, title=title
    )
    _launch_picker_impl(config, start, verbose)


@app.command("list")
def list_candidates(
    path: str = typer.Argument(
        "",
        help="Partial path to complete (absolute, or relative to the workspace root)",
    ),
    kind: CompletionKind = typer.Option(
        None,
        "--kind",
        "-k",
        help="Candidates to offer: all (default), directory, or file",
    ),
    root: Path = typer.Option(
        None,
        "--root",
        "-r",
        help="Workspace root for relative paths (default: $PATH_PICKER_ROOT or home)",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        help="YAML config file (default: ~/.config/path-picker/config.yaml if present)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as a JSON array",
    ),
    csv: bool = typer.Option(
        False,
        "--csv",
        help="Output in CSV format",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        is_flag=True,
        help="Log skipped entries and probe errors to stderr",
    ),
):
    """Print the completion candidates for PATH without the interactive UI."""
    _configure_logging(
        verbose, RichHandler(console=err_console, show_path=False)
    )
    config = _load_config_or_exit(config_file, kind=kind, workspace_root=root)
    candidates = list(
        path_candidates(path, config.kind, Environment.from_config(config))
    )

    if json_output:
        import orjson

        payload = [
            {"label": c.label, "detail": c.detail, "kind": c.kind.value}
            for c in candidates
        ]
        print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        return

    if csv:
        import csv as csv_mod
        import sys

        writer = csv_mod.writer(sys.stdout)
        writer.writerow(["kind", "label", "detail"])
        for c in candidates:
            writer.writerow([c.kind.value, c.label, c.detail])
        return

    table = Table(title=f"Candidates ({len(candidates)}, {config.kind.value})")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Path", style="white")
    table.add_column("Detail", style="dim")
    for c in candidates:
        style = _KIND_STYLES[c.kind]
        table.add_row(f"[{style}]{c.kind.value}[/{style}]", c.label, c.detail)
    console.print(table)


@app.callback(invoke_without_command=True)
def default(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        is_eager=True,
        callback=_version_callback,
        is_flag=True,
    ),
    kind: CompletionKind = typer.Option(
        None,
        "--kind",
        "-k",
        help="Candidates to offer: all (default), directory, or file",
    ),
    root: Path = typer.Option(
        None,
        "--root",
        "-r",
        help="Workspace root for relative paths (default: $PATH_PICKER_ROOT or home)",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        help="YAML config file (default: ~/.config/path-picker/config.yaml if present)",
    ),
    title: str = typer.Option(
        None,
        "--title",
        help="Heading shown above the input",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        is_flag=True,
        help="Log debug output (visible in the Textual devtools console)",
    ),
):
    """Launch the interactive picker when no command is given."""
    if ctx.invoked_subcommand is None:
        config = _load_config_or_exit(
            config_file, kind=kind, workspace_root=root, title=title
        )
        _launch_picker_impl(config, "", verbose)
