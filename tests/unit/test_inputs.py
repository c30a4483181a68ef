"""Unit tests for ordered input path sources."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from albumscript.errors import GenerationStageError
from albumscript.sources.inputs import (
    list_directory,
    read_nul_separated,
    read_playlist,
    single_path,
)


def test_read_nul_separated_keeps_order_and_unusual_characters() -> None:
    """NUL framing preserves spaces and newlines inside paths."""

    stream = io.BytesIO(b"/m/b two.flac\0/m/a\nline.wav\0")

    assert read_nul_separated(stream) == ["/m/b two.flac", "/m/a\nline.wav"]


def test_read_nul_separated_handles_missing_terminator_and_empty_input() -> None:
    """A trailing NUL is optional and empty input yields no paths."""

    assert read_nul_separated(io.BytesIO(b"/m/a.flac\0/m/b.flac")) == ["/m/a.flac", "/m/b.flac"]
    assert read_nul_separated(io.BytesIO(b"")) == []
    assert read_nul_separated(io.BytesIO(b"\0\0")) == []


def test_list_directory_sorts_regular_visible_files(tmp_path: Path) -> None:
    """Hidden files and subdirectories are skipped and names are sorted."""

    for name in ("b.flac", "a.wav", ".hidden.mp3"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "nested").mkdir()

    assert list_directory(tmp_path) == [str(tmp_path / "a.wav"), str(tmp_path / "b.flac")]


def test_list_directory_reports_missing_directory(tmp_path: Path) -> None:
    """A missing directory is an input-stage error."""

    with pytest.raises(GenerationStageError) as error_info:
        list_directory(tmp_path / "missing")

    assert error_info.value.stage == "input"


def test_read_playlist_skips_comments_and_resolves_relative_entries(tmp_path: Path) -> None:
    """Relative entries resolve against the playlist folder; absolute ones are kept."""

    playlist = tmp_path / "album.m3u"
    playlist.write_text(
        "\ufeff#EXTM3U\n#EXTINF:123,Artist - One\nsongs/one.mp3\n\n"
        "/abs/two.flac\nhttp://example.com/three.mp3\n",
        encoding="utf-8",
    )

    assert read_playlist(playlist) == [
        str(tmp_path / "songs" / "one.mp3"),
        "/abs/two.flac",
        "http://example.com/three.mp3",
    ]


def test_read_playlist_reports_missing_file(tmp_path: Path) -> None:
    """A missing playlist is an input-stage error with a hint."""

    with pytest.raises(GenerationStageError) as error_info:
        read_playlist(tmp_path / "missing.m3u")

    assert error_info.value.stage == "input"
    assert error_info.value.hint is not None


def test_single_path_returns_one_item() -> None:
    """Single-file mode passes the path through unchanged."""

    assert single_path("relative/song.ogg") == ["relative/song.ogg"]
