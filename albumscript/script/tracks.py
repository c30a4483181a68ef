"""Per-track function emission.

Each generated `track_NNN` function has two modes:

- no arguments: decode the source through `decode_canonical` into a scoped
  temporary file, apply the fixed gain and stream canonical PCM to stdout;
- one accessor flag: print one metadata field and skip audio entirely.

The body runs in a subshell so the temporary file and its `EXIT` trap are
scoped to one invocation.
"""

from __future__ import annotations

from ..models.datatypes import InputItem, TrackEntry, TrackID
from ..text.titles import title_from_path
from ..text.transliteration import SubstitutionTable, transliterate
from .runtime import USAGE_STATUS
from .shell import indent, quote

# Accessor flags in the order they are emitted. Values are either literal
# fields fixed at generation time or shell variables read at run time.
ACCESSOR_FLAGS = ("-f", "-g", "-a", "-b", "-y", "-n", "-t", "-c", "-i")
RUNTIME_TAG_VARIABLES = {
    "-g": "GENRE",
    "-a": "ARTIST",
    "-b": "ALBUM",
    "-y": "YEAR",
    "-c": "COMMENT",
    "-i": "IMAGE",
}


def build_track_entry(
    track_id: TrackID, item: InputItem, table: SubstitutionTable | None = None
) -> TrackEntry:
    """Attach the derived ASCII title to one numbered input item."""

    return TrackEntry(
        track_id=track_id,
        source=item.path,
        title=transliterate(title_from_path(item.path), table),
    )


def _accessor_value(entry: TrackEntry, flag: str) -> str:
    """Return the shell word printed for one accessor flag."""

    if flag == "-f":
        return quote(entry.source)
    if flag == "-n":
        return quote(entry.track_id.label)
    if flag == "-t":
        return quote(entry.title)
    return f'"${RUNTIME_TAG_VARIABLES[flag]}"'


def render_track_function(entry: TrackEntry) -> str:
    """Render the complete `track_NNN` function for one entry."""

    name = entry.function_name
    cases = [
        f"{flag}) printf '%s\\n' {_accessor_value(entry, flag)} ;;" for flag in ACCESSOR_FLAGS
    ]
    cases.append(f'*) as_fail "{name}: unknown option: $1"; exit {USAGE_STATUS} ;;')

    body = [
        f"# {entry.track_id.label}: {' '.join(entry.title.split())}",
        'if [ "$#" -gt 1 ]; then',
        f'  as_fail "{name}: expected at most one option"',
        f"  exit {USAGE_STATUS}",
        "fi",
        'if [ "$#" -eq 1 ]; then',
        '  case "$1" in',
        *indent(cases, 2),
        "  esac",
        "  exit 0",
        "fi",
        'tmp=$(mktemp "${TMPDIR:-/tmp}/albumscript.XXXXXX") || {',
        f'  as_fail "{name}: cannot create temporary file"',
        "  exit 1",
        "}",
        "trap 'rm -f -- \"$tmp\"' EXIT",
        "trap 'exit 130' INT TERM HUP",
        f'if decode_canonical {quote(entry.source)} "$tmp"; then',
        '  sox -q "${AS_RAW[@]}" "$tmp" "${AS_RAW[@]}" - gain "$AS_GAIN"',
        "  status=$?",
        "else",
        "  status=$?",
        "fi",
        'rm -f -- "$tmp"',
        "trap - EXIT",
        'exit "$status"',
    ]
    return "\n".join([f"{name}() (", *indent(body), ")"])
