"""Command-line interface for albumscript.

Responsibilities:
- Select exactly one input mode and collect the ordered input paths.
- Resolve configuration from CLI flags, YAML file and environment.
- Write the generated script to stdout, or nothing at all on failure.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Annotated

import typer

from . import __version__
from .audio.decoder import DecodeChain, missing_tools
from .audio.reference import ManPageReference
from .cli_rendering import echo_generation_summary, echo_script, exit_with_command_error
from .config import ConfigLoader, ScriptConfig
from .errors import GenerationStageError
from .parsing import parse_gain_db
from .script.assembler import ScriptAssembler
from .script.runtime import RuntimeSettings
from .sources.inputs import list_directory, read_nul_separated, read_playlist, single_path
from .telemetry.logger import RunLogger
from .text.slug import slugify
from .text.titles import debrace, title_from_path
from .text.transliteration import SubstitutionTable, load_substitution_table, transliterate

app = typer.Typer(
    name="albumscript",
    no_args_is_help=True,
    help="Generate editable bash scripts that decode, join, encode and tag albums.",
)
text_app = typer.Typer(
    no_args_is_help=True,
    help="Run one text normalization pipeline on a value.",
)
app.add_typer(text_app, name="text")


def _version_callback(value: bool) -> None:
    """Print the version and stop option processing."""

    if value:
        typer.echo(f"albumscript {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """albumscript CLI."""


def _load_config(config_file: Path | None, overrides: dict[str, object]) -> ScriptConfig:
    """Resolve effective config: CLI overrides > YAML file > environment > defaults."""

    try:
        base = ConfigLoader.from_env()
    except ValueError as exc:
        raise GenerationStageError(
            stage="config",
            detail=f"Invalid environment configuration: {exc}",
            hint="Fix or unset the `ALBUMSCRIPT_*` variables and rerun.",
        ) from exc

    if config_file is not None:
        try:
            base = ConfigLoader.from_yaml(config_file, base=base)
        except FileNotFoundError as exc:
            raise GenerationStageError(
                stage="config",
                detail=f"Config file not found: `{config_file}`.",
                hint="Provide an existing path via `--config <path.yaml>`.",
            ) from exc
        except ValueError as exc:
            raise GenerationStageError(
                stage="config",
                detail=f"Invalid config file `{config_file}`: {exc}",
                hint="Fix config keys/values and rerun.",
            ) from exc

    try:
        return base.with_overrides(overrides)
    except ValueError as exc:
        raise GenerationStageError(
            stage="config",
            detail=str(exc),
            hint="Check the command-line options and rerun.",
        ) from exc


def _load_table(config: ScriptConfig) -> SubstitutionTable:
    """Load the transliteration table configured for this run."""

    try:
        return load_substitution_table(config.substitutions_path)
    except FileNotFoundError as exc:
        raise GenerationStageError(
            stage="config",
            detail=f"Substitution file not found: `{config.substitutions_path}`.",
            hint="Provide an existing YAML mapping via `--substitutions <file>`.",
        ) from exc
    except ValueError as exc:
        raise GenerationStageError(
            stage="config",
            detail=str(exc),
            hint="Use a YAML mapping of characters to ASCII replacements.",
        ) from exc


def _collect_paths(
    directory: Path | None,
    file: str | None,
    playlist: Path | None,
) -> tuple[list[str], str | None]:
    """Read input paths for the single active mode and a default album title."""

    active = [name for name, value in (
        ("--directory", directory),
        ("--file", file),
        ("--playlist", playlist),
    ) if value is not None]
    if len(active) > 1:
        raise GenerationStageError(
            stage="input",
            detail=f"Options {', '.join(active)} cannot be used together.",
            hint="Choose one input mode: directory, single file, playlist, or stdin.",
        )

    if directory is not None:
        album = title_from_path(str(directory.resolve()), strip_extension=False)
        return list_directory(directory), album
    if playlist is not None:
        return read_playlist(playlist), title_from_path(str(playlist))
    if file is not None:
        return single_path(file), None

    if sys.stdin.isatty():
        raise GenerationStageError(
            stage="input",
            detail="No input mode selected and stdin is a terminal.",
            hint=(
                "Pipe NUL-separated paths (e.g. `find . -type f -print0 | sort -z`) "
                "or use `--directory`, `--file` or `--playlist`."
            ),
        )
    return read_nul_separated(typer.get_binary_stream("stdin")), None


@app.command("generate")
def generate_command(
    directory: Annotated[
        Path | None,
        typer.Option(
            "--directory",
            "-d",
            help="Read file names from a directory, sorted by name.",
        ),
    ] = None,
    file: Annotated[
        str | None,
        typer.Option("--file", "-f", help="Use one given path."),
    ] = None,
    playlist: Annotated[
        Path | None,
        typer.Option(
            "--playlist",
            "-p",
            help="Read file names from an m3u-style playlist.",
        ),
    ] = None,
    start: Annotated[
        int | None,
        typer.Option("--start", "-s", help="Track number of the first file (default 1)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with defaults."),
    ] = None,
    genre: Annotated[str | None, typer.Option("--genre", help="Initial GENRE tag.")] = None,
    artist: Annotated[str | None, typer.Option("--artist", help="Initial ARTIST tag.")] = None,
    album: Annotated[str | None, typer.Option("--album", help="Initial ALBUM tag.")] = None,
    year: Annotated[str | None, typer.Option("--year", help="Initial YEAR tag.")] = None,
    comment: Annotated[
        str | None, typer.Option("--comment", help="Initial COMMENT tag.")
    ] = None,
    image: Annotated[
        str | None, typer.Option("--image", help="Initial IMAGE cover path.")
    ] = None,
    substitutions: Annotated[
        Path | None,
        typer.Option(
            "--substitutions",
            help="YAML mapping extending the transliteration substitution table.",
        ),
    ] = None,
    reference: Annotated[
        bool | None,
        typer.Option(
            "--reference/--no-reference",
            help="Append man-page excerpts of the used tools as comments.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log generation stages to stderr."),
    ] = False,
) -> None:
    """Generate the album script from NUL-separated stdin paths or one input mode."""

    try:
        run_logger = RunLogger(verbose=verbose)
        paths, default_album = _collect_paths(directory, file, playlist)
        if not paths:
            raise GenerationStageError(
                stage="input",
                detail="No input files were provided.",
                hint="Check the directory, playlist or piped path list.",
            )
        config = _load_config(
            config_file,
            {
                "start_number": start,
                "genre": genre,
                "artist": artist,
                "album": album,
                "year": year,
                "comment": comment,
                "image": image,
                "substitutions_path": substitutions,
                "include_reference": reference,
            },
        )
        if not config.album and default_album:
            config = config.with_overrides({"album": default_album})
        table = _load_table(config)
        assembler = ScriptAssembler(
            settings=RuntimeSettings(
                version=__version__,
                gain_db=config.gain_db,
                vbr_quality=config.vbr_quality,
            ),
            table=table,
            reference=ManPageReference() if config.include_reference else None,
            reference_tools=config.reference_tools,
            run_logger=run_logger,
        )
        script = assembler.assemble(paths, config.start_number, config.tag_defaults())
    except Exception as exc:
        exit_with_command_error("generate", exc)

    echo_script(script)
    if verbose:
        echo_generation_summary(script)


@app.command("decode")
def decode_command(
    source: Annotated[str, typer.Argument(help="Audio file to decode.")],
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write canonical PCM here instead of stdout."),
    ] = None,
    gain: Annotated[
        str,
        typer.Option("--gain", help="Fixed gain in dB applied after decoding (<= 0)."),
    ] = "-3",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log decode stages to stderr."),
    ] = False,
) -> None:
    """Decode one file to 2ch/44.1kHz/24-bit raw PCM with the two-tier fallback."""

    try:
        run_logger = RunLogger(verbose=verbose)
        try:
            gain_db = parse_gain_db(gain, "--gain")
        except ValueError as exc:
            raise GenerationStageError(stage="config", detail=str(exc)) from exc
        chain = DecodeChain()
        unavailable = missing_tools(chain.tiers)
        if unavailable:
            run_logger.log_stage_warning(
                "decode", "tools_unavailable", tools=",".join(unavailable)
            )
        run_logger.log_stage_start("decode", source=source)
        if out is None:
            result = chain.stream(source, typer.get_binary_stream("stdout"), gain_db)
        else:
            with out.open("wb") as sink:
                result = chain.stream(source, sink, gain_db)
            if not result.ok:
                out.unlink(missing_ok=True)
        if not result.ok:
            raise GenerationStageError(
                stage="decode",
                detail=f"No decoder could read `{source}`.",
                hint="Check that the file is audio and that sox or ffmpeg is installed.",
            )
        run_logger.log_stage_complete("decode", tier=result.tier)
    except Exception as exc:
        exit_with_command_error("decode", exc)


def _text_values(values: list[str]) -> str:
    """Join CLI words into one text value."""

    return " ".join(values)


@text_app.command("ascii")
def text_ascii_command(
    values: Annotated[list[str], typer.Argument(help="Text to transliterate.")],
    substitutions: Annotated[
        Path | None,
        typer.Option("--substitutions", help="YAML mapping extending the table."),
    ] = None,
) -> None:
    """Transliterate text to ASCII."""

    try:
        table = load_substitution_table(substitutions)
    except (FileNotFoundError, ValueError) as exc:
        exit_with_command_error("text ascii", exc)
    typer.echo(transliterate(_text_values(values), table))


@text_app.command("basename")
def text_basename_command(
    values: Annotated[list[str], typer.Argument(help="Text to slugify.")],
) -> None:
    """Transliterate and reduce text to a filesystem-safe basename."""

    typer.echo(slugify(transliterate(_text_values(values))))


@text_app.command("title")
def text_title_command(
    path: Annotated[str, typer.Argument(help="Path to derive a title from.")],
) -> None:
    """Derive an ASCII track title from a file path."""

    typer.echo(transliterate(title_from_path(path)))


@text_app.command("debrace")
def text_debrace_command(
    values: Annotated[list[str], typer.Argument(help="Text to clean.")],
) -> None:
    """Remove empty bracket pairs and squeeze whitespace."""

    typer.echo(debrace(_text_values(values)))


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
