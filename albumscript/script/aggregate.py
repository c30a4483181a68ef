"""Aggregate functions composing the per-track functions.

- `concat_all` streams every track back-to-back in ascending track order.
- `itemize_all` encodes every track into its own tagged MP3 file.
"""

from __future__ import annotations

from typing import Sequence

from ..models.datatypes import TrackEntry
from .shell import indent

CONCAT_FUNCTION = "concat_all"
ITEMIZE_FUNCTION = "itemize_all"

# (local variable, accessor flag) in `encode_mp3` argument order.
ITEMIZE_FIELDS = (
    ("genre", "-g"),
    ("artist", "-a"),
    ("album", "-b"),
    ("year", "-y"),
    ("track", "-n"),
    ("title", "-t"),
    ("comment", "-c"),
    ("image", "-i"),
)


def _ordered(entries: Sequence[TrackEntry]) -> list[TrackEntry]:
    """Return entries in ascending track order."""

    return sorted(entries, key=lambda entry: entry.track_id)


def render_concat_function(entries: Sequence[TrackEntry]) -> str:
    """Render `concat_all`, invoking every track function once."""

    body = [entry.function_name for entry in _ordered(entries)] or [":"]
    return "\n".join([f"{CONCAT_FUNCTION}() {{", *indent(body), "}"])


def render_itemize_function(entries: Sequence[TrackEntry]) -> str:
    """Render `itemize_all`, one independent tagged encode per track.

    A track whose pipeline fails has its output file removed; the function
    keeps going and returns the last non-zero status.
    """

    variables = " ".join(variable for variable, _ in ITEMIZE_FIELDS)
    arguments = " ".join(f'"${variable}"' for variable, _ in ITEMIZE_FIELDS)
    body: list[str] = [f"local {variables} output rc status=0"]
    for entry in _ordered(entries):
        name = entry.function_name
        body.append(f"# {entry.track_id.label}")
        body.extend(f"{variable}=$({name} {flag})" for variable, flag in ITEMIZE_FIELDS)
        body.extend(
            [
                'output="$(str2basename "$(str2ascii "$track $artist $title")").mp3"',
                f'{name} | encode_mp3 {arguments} "$output"',
                "rc=$?",
                'if [ "$rc" -ne 0 ]; then',
                '  rm -f -- "$output"',
                "  status=$rc",
                "fi",
            ]
        )
    body.append('return "$status"')
    return "\n".join([f"{ITEMIZE_FUNCTION}() {{", *indent(body), "}"])
