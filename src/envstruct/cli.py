"""Command-line interface for inspecting and checking envstruct schemas."""

import importlib
from pathlib import Path
from typing import Annotated, Any, ClassVar

import typer
from pydantic import BaseModel, ConfigDict
from rich.console import Console
from rich.table import Table

from envstruct.errors import BindError, SchemaError
from envstruct.loader import describe, load, load_env_file
from envstruct.utils.logging import configure_logging

app = typer.Typer(
    name="envstruct",
    help="Bind environment variables into typed configuration records.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

MASK = "******"


class CliSettings(BaseModel):
    """Settings for the envstruct command itself, read from the environment."""

    model_config = ConfigDict(frozen=True)

    log_level: str = "WARNING"
    log_json: bool = False

    env: ClassVar[dict[str, str]] = {
        "log_level": "ENVSTRUCT_LOG_LEVEL",
        "log_json": "ENVSTRUCT_LOG_JSON",
    }


TargetArg = Annotated[
    str,
    typer.Argument(help="Record type to bind, as 'package.module:ClassName'."),
]


@app.callback()
def main() -> None:
    """Configure logging from ENVSTRUCT_LOG_LEVEL and ENVSTRUCT_LOG_JSON."""
    settings = load(CliSettings)
    configure_logging(level=settings.log_level, json_output=settings.log_json)


@app.command()
def schema(target: TargetArg) -> None:
    """Show the environment keys a record type reads, without reading them."""
    model = _import_target(target)
    try:
        reports = describe(model)
    except SchemaError as e:
        err_console.print(f"[red]Schema error: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"{model.__name__} environment keys")
    table.add_column("Field", style="cyan")
    table.add_column("Key", style="green")
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Default", style="dim")

    for report in reports:
        table.add_row(
            report.path,
            report.env_key if report.env_key is not None else "[dim](skipped)[/dim]",
            report.type_name,
            "yes" if report.required else "no",
            report.default if report.default is not None else "",
        )
    console.print(table)


@app.command()
def check(
    target: TargetArg,
    env_file: Annotated[
        Path | None,
        typer.Option(
            "--env-file",
            "-e",
            help="Dotenv file layered over the process environment.",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    show_values: Annotated[
        bool,
        typer.Option("--show-values", help="Print bound values instead of masking them."),
    ] = False,
) -> None:
    """Bind a record type and report whether the environment satisfies it."""
    model = _import_target(target)
    try:
        if env_file is not None:
            bound = load_env_file(model, env_file, override_environ=True)
        else:
            bound = load(model)
        reports = describe(model)
    except SchemaError as e:
        err_console.print(f"[red]Schema error: {e}[/red]")
        raise typer.Exit(code=1) from e
    except BindError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"{model.__name__} (bound)")
    table.add_column("Field", style="cyan")
    table.add_column("Key", style="green")
    table.add_column("Value")

    for report in reports:
        value = _lookup_path(bound, report.path)
        if value is None:
            shown = "[dim]None[/dim]"
        elif show_values:
            shown = repr(value)
        else:
            shown = MASK
        table.add_row(report.path, report.env_key or "", shown)
    console.print(table)
    console.print("[green]Configuration OK[/green]")


def _import_target(target: str) -> type:
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        err_console.print(f"[red]Error: target must look like 'module:Class', got {target!r}[/red]")
        raise typer.Exit(code=2)
    try:
        module = importlib.import_module(module_name)
        model = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        err_console.print(f"[red]Error: cannot import {target}: {e}[/red]")
        raise typer.Exit(code=2) from e
    if not isinstance(model, type):
        err_console.print(f"[red]Error: {target} is not a class[/red]")
        raise typer.Exit(code=2)
    return model


def _lookup_path(bound: Any, path: str) -> Any:
    value = bound
    for part in path.split("."):
        if value is None:
            return None
        value = getattr(value, part)
    return value
