"""CLI output and error rendering helpers.

Generated scripts own stdout; every diagnostic goes to stderr.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import GenerationStageError
from .models.datatypes import GeneratedScript


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, GenerationStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_script(script: GeneratedScript) -> None:
    """Write the generated script to stdout exactly as assembled."""

    typer.echo(script.text, nl=False)


def echo_generation_summary(script: GeneratedScript) -> None:
    """Print the generated track range to stderr."""

    if not script.tracks:
        typer.echo("Generated 0 track functions.", err=True)
        return
    first = script.tracks[0].track_id.label
    last = script.tracks[-1].track_id.label
    typer.echo(
        f"Generated {script.track_count} track function(s): track_{first}..track_{last}",
        err=True,
    )
