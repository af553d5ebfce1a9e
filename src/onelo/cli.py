"""Command line entry point for onelo."""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from onelo.build import run_build
from onelo.config import Settings, load_settings
from onelo.context import BuildContext
from onelo.errors import OneloError
from onelo.files import read_content
from onelo.logging_config import setup_logging
from onelo.source import Source, SourceId

app = typer.Typer(
    name="onelo",
    help="Content-addressed cache for markdown notes.",
    add_completion=False,
    no_args_is_help=True,
)


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _settings() -> Settings:
    try:
        return load_settings()
    except ValidationError as e:
        raise _fail(f"Invalid settings: {e}") from e


@app.callback()
def main_callback(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", "-l", help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
    ] = None,
) -> None:
    """Set up logging before any command runs."""
    setup_logging(log_level or _settings().log_level)


@app.command()
def build(
    input_path: Annotated[
        Path | None,
        typer.Option("--input-path", "-i", help="Directory of markdown notes.", metavar="PATH"),
    ] = None,
    cache_path: Annotated[
        Path | None,
        typer.Option("--cache-path", "-c", help="Cache database file.", metavar="PATH"),
    ] = None,
    source_id: Annotated[
        str | None,
        typer.Option("--source", "-s", help="Identifier of the source being indexed."),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail on the first invalid entry instead of skipping it."),
    ] = False,
) -> None:
    """Build the onelo cache from a directory of notes."""
    settings = _settings()
    route = input_path or settings.input_path
    cache = cache_path or settings.cache_path

    try:
        source = Source(SourceId.parse(source_id if source_id is not None else settings.source_id), route)
        report = run_build(BuildContext.create(), source, cache, strict=strict)
    except (OneloError, OSError) as e:
        raise _fail(str(e)) from e

    typer.echo(report.summary())
    for qualified_id in report.skipped:
        typer.secho(f"  skipped {qualified_id}", fg=typer.colors.YELLOW)


@app.command()
def checksum(
    paths: Annotated[list[Path], typer.Argument(help="Files to hash.", exists=True, dir_okay=False)],
) -> None:
    """Print the checksum of each file."""
    for path in paths:
        try:
            content = read_content(path)
        except OSError as e:
            raise _fail(str(e)) from e
        typer.echo(f"{content.identity}  {path}")


if __name__ == "__main__":
    app()
