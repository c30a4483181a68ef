"""Ordered input path sources.

Responsibilities:
- Read NUL-separated path streams.
- Enumerate directories in lexicographic order.
- Parse m3u-style playlists, skipping blank and comment lines.

Paths are returned as strings exactly as they will be embedded in the
generated script; no source is checked for being real media.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

from ..errors import GenerationStageError


def read_nul_separated(stream: BinaryIO) -> list[str]:
    """Split a byte stream on NUL terminators into decoded path strings."""

    payload = stream.read()
    if not payload:
        return []
    parts = payload.split(b"\0")
    if parts and parts[-1] == b"":
        parts.pop()
    return [os.fsdecode(part) for part in parts if part]


def list_directory(directory: Path) -> list[str]:
    """Return regular, non-hidden files directly inside `directory`, sorted by name."""

    if not directory.is_dir():
        raise GenerationStageError(
            stage="input",
            detail=f"Directory not found: `{directory}`.",
            hint="Pass an existing directory via `--directory <dir>`.",
        )
    names = sorted(
        entry.name
        for entry in os.scandir(directory)
        if not entry.name.startswith(".") and entry.is_file()
    )
    return [str(directory / name) for name in names]


def read_playlist(playlist: Path) -> list[str]:
    """Return playlist entries in order, resolving relative entries to the playlist folder."""

    try:
        raw_text = playlist.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise GenerationStageError(
            stage="input",
            detail=f"Playlist not found: `{playlist}`.",
            hint="Pass an existing m3u file via `--playlist <file.m3u>`.",
        ) from exc
    except UnicodeDecodeError as exc:
        raise GenerationStageError(
            stage="input",
            detail=f"Playlist `{playlist}` is not valid UTF-8 text.",
            hint="Re-save the playlist as UTF-8 (m3u8).",
        ) from exc

    entries: list[str] = []
    for line in raw_text.splitlines():
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        if os.path.isabs(entry) or "://" in entry:
            entries.append(entry)
        else:
            entries.append(str(playlist.parent / entry))
    return entries


def single_path(path: str) -> list[str]:
    """Return a one-element input sequence."""

    return [path]
