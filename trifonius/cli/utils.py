"""CLI helper utilities for trifonius commands."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

import typer
import yaml
from rich.console import Console

from trifonius.compiler.config_loader import load_config
from trifonius.engine import Engine, default_engine
from trifonius.kernel.exceptions import ResourceNotFoundError, TrifoniusError
from trifonius.kernel.logging import configure_logging

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)

EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def output_format(ctx: typer.Context) -> str:
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    return obj.get("output_format", "pretty")


def print_output(data: Any, ctx: typer.Context) -> None:
    """Print ``data`` as JSON or YAML according to ``ctx.obj['output_format']``."""
    text = json.dumps(data, default=str, indent=2)
    if output_format(ctx) == "yaml":
        # safe_dump rejects str subclasses (enums, identifiers)
        text = yaml.safe_dump(json.loads(text), sort_keys=False)
    typer.echo(text)


def get_engine(ctx: typer.Context) -> Engine:
    """Return the engine for this invocation.

    An engine placed in ``ctx.obj['engine']`` wins. With ``--config`` a fresh
    engine is built from that file; otherwise the default engine is used.
    ``--log-level`` overrides the logging section of the configuration.
    """
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    engine = obj.get("engine")
    if engine is not None:
        return engine
    config_path: Path | None = obj.get("config_path")
    if config_path is not None:
        engine = Engine.from_config(load_config(config_path))
    else:
        engine = default_engine()
    if (level := obj.get("log_level")) is not None:
        configure_logging(level=level, format="rich", force_reconfigure=True)
    obj["engine"] = engine
    return engine


def run(engine: Engine, coro: Coroutine[Any, Any, T]) -> T:
    """Run ``coro`` to completion, then close the engine's platform connections."""

    async def _run() -> T:
        try:
            return await coro
        finally:
            await engine.aclose()

    return asyncio.run(_run())


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn engine errors into a red message and a non-zero exit code."""
    try:
        yield
    except ResourceNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_NOT_FOUND) from e
    except TrifoniusError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR) from e
    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR) from e
