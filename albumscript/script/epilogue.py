"""Script epilogue: tag defaults, example invocations and tool reference."""

from __future__ import annotations

from typing import Sequence

from ..models.datatypes import TagDefaults, TrackEntry
from .aggregate import CONCAT_FUNCTION, ITEMIZE_FUNCTION
from .shell import comment, quote


def render_tag_defaults(defaults: TagDefaults) -> str:
    """Render the run-time tag variables read by track functions."""

    lines = ["# Tag variables, read by the track functions when they run."]
    lines.extend(f"{variable}={quote(value)}" for variable, value in defaults.as_shell_variables())
    return "\n".join(lines)


def render_examples(entries: Sequence[TrackEntry]) -> str:
    """Render commented-out example invocations."""

    lines = [
        "# Uncomment the operations to run.",
        "#",
        "# Play all tracks as one stream:",
        f'# {CONCAT_FUNCTION} | play -q "${{AS_RAW[@]}}" -',
        "#",
        "# Signal statistics over all tracks:",
        f'# {CONCAT_FUNCTION} | sox "${{AS_RAW[@]}}" - -n stats',
        "#",
        "# One tagged MP3 for the whole album:",
        f'# {CONCAT_FUNCTION} | encode_mp3 "$GENRE" "$ARTIST" "$ALBUM" "$YEAR" "" "$ALBUM" '
        '"$COMMENT" "$IMAGE" "$(str2basename "$(str2ascii "$ARTIST $ALBUM")").mp3"',
        "#",
        "# One tagged MP3 per track:",
        f"# {ITEMIZE_FUNCTION}",
    ]
    if entries:
        first = min(entries, key=lambda entry: entry.track_id).function_name
        lines.extend(
            [
                "#",
                "# Inspect or override tags for a single track:",
                f"# {first} -t",
                f"# ARTIST='Guest Artist' {first} -a",
            ]
        )
    return "\n".join(lines)


def render_reference(excerpts: Sequence[tuple[str, str]]) -> str:
    """Render `(tool, excerpt)` pairs as comment blocks."""

    blocks: list[str] = []
    for tool, excerpt in excerpts:
        lines = [f"# Reference: {tool}", "#", *comment(excerpt)]
        blocks.append("\n".join(lines))
    return "\n#\n".join(blocks)


def render_epilogue(
    defaults: TagDefaults,
    entries: Sequence[TrackEntry],
    excerpts: Sequence[tuple[str, str]] = (),
) -> str:
    """Render the complete epilogue."""

    blocks = [render_tag_defaults(defaults), render_examples(entries)]
    if excerpts:
        blocks.append(render_reference(excerpts))
    return "\n\n".join(blocks)
