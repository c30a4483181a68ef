"""Integration tests for the `generate`, `decode` and `text` CLI commands."""

from __future__ import annotations

from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from albumscript import __version__
from albumscript.audio.decoder import DecodeResult
from albumscript.cli import app


def test_generate_reads_nul_separated_stdin() -> None:
    """Piped NUL-separated paths become numbered track functions on stdout."""

    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "--no-reference", "--artist", "The Band"],
        input=b"/m/one.flac\0/m/two words.wav\0",
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("#!/usr/bin/env bash\n")
    assert "track_001() (" in result.stdout
    assert "track_002() (" in result.stdout
    assert "'/m/two words.wav'" in result.stdout
    assert "ARTIST='The Band'" in result.stdout


def test_generate_directory_mode_defaults_album_to_directory_title(tmp_path: Path) -> None:
    """Directory mode sorts files and derives the initial album title."""

    album_dir = tmp_path / "best_of_things"
    album_dir.mkdir()
    for name in ("02_b.flac", "01_a.flac"):
        (album_dir / name).write_bytes(b"")
    runner = CliRunner()

    result = runner.invoke(
        app, ["generate", "--no-reference", "--directory", str(album_dir), "--start", "10"]
    )

    assert result.exit_code == 0, result.output
    assert "ALBUM='Best Of Things'" in result.stdout
    first = result.stdout.index("track_010() (")
    assert result.stdout.index(str(album_dir / "01_a.flac"), first) < result.stdout.index(
        "track_011() ("
    )


def test_generate_explicit_album_wins_over_directory_title(tmp_path: Path) -> None:
    """An explicit `--album` is not replaced by the derived default."""

    (tmp_path / "a.flac").write_bytes(b"")
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "--no-reference", "-d", str(tmp_path), "--album", "Chosen"],
    )

    assert result.exit_code == 0, result.output
    assert "ALBUM=Chosen" in result.stdout


def test_generate_playlist_mode(tmp_path: Path) -> None:
    """Playlist entries keep their order and relative entries are resolved."""

    playlist = tmp_path / "road_trip.m3u"
    playlist.write_text("#EXTM3U\nz.mp3\na.mp3\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["generate", "--no-reference", "--playlist", str(playlist)])

    assert result.exit_code == 0, result.output
    assert result.stdout.index(str(tmp_path / "z.mp3")) < result.stdout.index(
        str(tmp_path / "a.mp3")
    )
    assert "ALBUM='Road Trip'" in result.stdout


def test_generate_capacity_error_emits_no_script() -> None:
    """Overflowing track numbers fails with diagnostics and no partial script."""

    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "--no-reference", "--start", "998"],
        input=b"/m/a.flac\0/m/b.flac\0/m/c.flac\0",
    )

    assert result.exit_code == 1
    assert "generate failed at stage `numbering`" in result.output
    assert "#!/usr/bin/env bash" not in result.output
    assert "track_" not in result.output


def test_generate_rejects_empty_input() -> None:
    """An empty path list is an input error."""

    runner = CliRunner()

    result = runner.invoke(app, ["generate", "--no-reference"], input=b"")

    assert result.exit_code == 1
    assert "No input files were provided." in result.output


def test_generate_rejects_multiple_input_modes(tmp_path: Path) -> None:
    """Only one input mode may be selected."""

    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "--directory", str(tmp_path), "--file", "/m/a.flac"],
    )

    assert result.exit_code == 1
    assert "cannot be used together" in result.output


def test_generate_rejects_unknown_options_and_positional_arguments() -> None:
    """Usage errors are reported by the CLI parser with exit code 2."""

    runner = CliRunner()

    assert runner.invoke(app, ["generate", "--bogus"]).exit_code == 2
    assert runner.invoke(app, ["generate", "extra.flac"]).exit_code == 2


def test_generate_reports_missing_config_file(tmp_path: Path) -> None:
    """A missing `--config` path fails at the config stage."""

    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "--file", "/m/a.flac", "--config", str(tmp_path / "missing.yaml")],
    )

    assert result.exit_code == 1
    assert "generate failed at stage `config`" in result.output
    assert "Config file not found" in result.output


def test_generate_uses_config_file_values(tmp_path: Path) -> None:
    """YAML values feed the tag defaults and CLI flags override them."""

    config_path = tmp_path / "album.yaml"
    config_path.write_text(
        "genre: Jazz\nartist: YAML Artist\ninclude_reference: false\n", encoding="utf-8"
    )
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "-f", "/m/a.flac", "--config", str(config_path), "--artist", "CLI"],
    )

    assert result.exit_code == 0, result.output
    assert "GENRE=Jazz" in result.stdout
    assert "ARTIST=CLI" in result.stdout
    assert "# Reference:" not in result.stdout


def test_version_option_prints_version() -> None:
    """`--version` prints the package version."""

    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == f"albumscript {__version__}"


def test_text_commands_run_individual_pipelines() -> None:
    """Each text subcommand exposes one normalization pipeline."""

    runner = CliRunner()

    assert runner.invoke(app, ["text", "ascii", "Ærø", "“x”"]).output == 'AEroe "x"\n'
    assert runner.invoke(app, ["text", "basename", "  Über-Löw!! (Remix) "]).output == (
        "uber_low_remix\n"
    )
    assert runner.invoke(app, ["text", "title", "/a/b/my_song_title.flac"]).output == (
        "My Song Title\n"
    )
    assert runner.invoke(app, ["text", "debrace", "Live ( ) Set"]).output == "Live Set\n"


def test_decode_command_reports_failure_and_removes_output(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """A failed decode exits with code 1 and leaves no output file."""

    def _failed_stream(*_: object, **__: object) -> DecodeResult:
        """Emulate a source no tier can read."""

        return DecodeResult.failed()

    monkeypatch.setattr("albumscript.cli.DecodeChain.stream", _failed_stream)
    output_path = tmp_path / "out.raw"

    result = CliRunner().invoke(app, ["decode", "/m/notes.txt", "--out", str(output_path)])

    assert result.exit_code == 1
    assert "decode failed at stage `decode`" in result.output
    assert not output_path.exists()


def test_decode_command_rejects_positive_gain() -> None:
    """Gain must never amplify."""

    result = CliRunner().invoke(app, ["decode", "/m/a.flac", "--gain", "3"])

    assert result.exit_code == 1
    assert "`--gain` must be a number less than or equal to 0." in result.output
