"""Trifonius CLI - Main entrypoint."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from trifonius import __version__
from trifonius.cli.commands import processor_cmd, resource_cmd
from trifonius.kernel.logging import configure_logging

app = typer.Typer(
    name="trifonius",
    help="Trifonius - deploy processors and bind them to platform resources.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.add_typer(processor_cmd.app, name="processor", help="Inspect and deploy processors")
app.add_typer(resource_cmd.app, name="resource", help="Inspect resources")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]Trifonius[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a kind: Config YAML or pyproject.toml"),
    ] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Log level: debug|info|warning|error")
    ] = None,
    json_out: Annotated[bool, typer.Option("--json", help="Output machine-readable JSON")] = False,
    yaml_out: Annotated[bool, typer.Option("--yaml", help="Output machine-readable YAML")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Trifonius CLI.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    output_format = "pretty"
    if json_out:
        output_format = "json"
    elif yaml_out:
        output_format = "yaml"

    level = log_level.upper() if log_level is not None else None
    ctx.obj.update({"output_format": output_format, "config_path": config, "log_level": level})

    if level is not None:
        configure_logging(level=level, format="rich", force_reconfigure=True)


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
