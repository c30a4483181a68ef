"""Runtime preamble of generated scripts.

Responsibilities:
- Emit the shared shell helpers every track and aggregate function relies on.
- Render the text pipelines and the decode fallback from the same data the
  Python side uses (substitution table, decode tiers, slug length).

Key public functions:
- `render_preamble`: full preamble text for one generation run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..audio.decoder import (
    DEFAULT_TIERS,
    SOURCE_PLACEHOLDER,
    SOX_RAW_FORMAT,
    TARGET_PLACEHOLDER,
    DecodeTier,
    format_gain,
)
from ..text.slug import DEFAULT_SLUG_LENGTH
from ..text.transliteration import SubstitutionTable
from .shell import indent, quote, render_command, sed_substitution

COLON_TOKEN = "__AS_COLON__"
QUESTION_TOKEN = "__AS_QMARK__"

DECODE_FAILED_STATUS = 2
MISSING_IMAGE_STATUS = 3
ENCODE_FAILED_STATUS = 4
USAGE_STATUS = 64

# Locales tried, in order, for `iconv` transliteration. The first one that
# renders a sample accented letter as plain ASCII wins.
UTF8_LOCALE_CANDIDATES = ("C.UTF-8", "C.utf8", "en_US.UTF-8", "en_US.utf8")


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Values baked into the runtime preamble.

    Attributes:
        version: Generator version written into the header comment.
        gain_db: Fixed gain applied after decoding.
        vbr_quality: LAME VBR quality (`-V`).
        tiers: Ordered decode tiers.
        slug_length: Maximum basename length used by `str2basename`.
    """

    version: str
    gain_db: float = -3.0
    vbr_quality: int = 2
    tiers: tuple[DecodeTier, ...] = DEFAULT_TIERS
    slug_length: int = DEFAULT_SLUG_LENGTH


def render_preamble(settings: RuntimeSettings, table: SubstitutionTable) -> str:
    """Render the runtime preamble as one text block without trailing newline."""

    blocks = [
        _render_header(settings),
        _render_diagnostics(),
        render_locale_probe(),
        render_str2ascii(table),
        render_str2basename(settings.slug_length),
        render_debrace(),
        render_decode_function(settings.tiers),
        render_encode_function(settings.vbr_quality),
    ]
    return "\n\n".join(blocks)


def _render_header(settings: RuntimeSettings) -> str:
    """Render shebang, usage notes and canonical format settings."""

    raw_format = " ".join(quote(token) for token in SOX_RAW_FORMAT)
    lines = [
        "#!/usr/bin/env bash",
        f"# Generated by albumscript {settings.version}.",
        "# Edit the tag variables and uncomment the operations at the end of",
        "# this file, then run it with bash.",
        "",
        "set -o pipefail",
        "",
        "# Canonical intermediate format: 2 channels, 44100 Hz, 24-bit signed",
        "# little-endian raw PCM.",
        f"AS_RAW=({raw_format})",
        f"AS_GAIN={quote(format_gain(settings.gain_db))}",
    ]
    return "\n".join(lines)


def _render_diagnostics() -> str:
    """Render diagnostic helpers writing to stderr."""

    return "\n".join(
        [
            "as_warn() {",
            "  printf 'albumscript: %s\\n' \"$*\" >&2",
            "}",
            "",
            "as_fail() {",
            '  as_warn "error: $*"',
            "  return 1",
            "}",
        ]
    )


def render_locale_probe() -> str:
    """Render the selection of a UTF-8 locale for `iconv`.

    In the C/POSIX locale `iconv //TRANSLIT` turns every accented letter
    into `?`, so `str2ascii` runs it under the first candidate locale that
    transliterates `é` to `e`. Without a working candidate it falls back to
    the first one.
    """

    candidates = " ".join(quote(locale) for locale in UTF8_LOCALE_CANDIDATES)
    return "\n".join(
        [
            f"AS_UTF8_LOCALE={quote(UTF8_LOCALE_CANDIDATES[0])}",
            f"for as_locale in {candidates}; do",
            "  if [ \"$(printf '\\303\\251' | LC_ALL=\"$as_locale\" iconv -f UTF-8 -t ASCII//TRANSLIT"
            ' 2>/dev/null)" = e ]; then',
            '    AS_UTF8_LOCALE=$as_locale',
            "    break",
            "  fi",
            "done",
            "unset as_locale",
        ]
    )


def render_str2ascii(table: SubstitutionTable) -> str:
    """Render the shell transliteration pipeline for `table`."""

    substitutions = [f"-e {quote(sed_substitution(source, target))}" for source, target in table]
    lines = [
        "str2ascii() {",
        "  printf '%s' \"$*\" \\",
        "    | LC_ALL=C sed"
        f" -e {quote(sed_substitution(':', COLON_TOKEN))}"
        f" -e {quote(sed_substitution('?', QUESTION_TOKEN))} \\",
    ]
    if substitutions:
        lines.append("    | LC_ALL=C sed \\")
        lines.extend(f"        {expression} \\" for expression in substitutions)
    lines.extend(
        [
            "    | LC_ALL=\"$AS_UTF8_LOCALE\" iconv -c -f UTF-8 -t ASCII//TRANSLIT 2>/dev/null \\",
            "    | LC_ALL=C sed -e 's/\\[?\\]//g' -e 's/?//g' \\",
            "    | LC_ALL=C sed"
            f" -e {quote(sed_substitution(COLON_TOKEN, ':'))}"
            f" -e {quote(sed_substitution(QUESTION_TOKEN, '?'))}",
            "}",
        ]
    )
    return "\n".join(lines)


def render_str2basename(max_length: int) -> str:
    """Render the shell slug pipeline."""

    return "\n".join(
        [
            "str2basename() {",
            "  printf '%s' \"$*\" \\",
            "    | tr '\\n' ' ' \\",
            "    | LC_ALL=C tr '[:upper:]' '[:lower:]' \\",
            "    | LC_ALL=C sed -e 's/[^a-z0-9][^a-z0-9]*/_/g' -e 's/^_*//' -e 's/_*$//' \\",
            f"    | cut -c1-{max_length} \\",
            "    | LC_ALL=C sed -e 's/_$//'",
            "}",
        ]
    )


def render_debrace() -> str:
    """Render the shell empty-bracket cleanup."""

    return "\n".join(
        [
            "debrace() {",
            "  printf '%s' \"$*\" \\",
            "    | tr '\\n' ' ' \\",
            "    | sed -E -e ':a' \\",
            "        -e 's/\\([[:space:]]*\\)|\\[[[:space:]]*\\]|\\{[[:space:]]*\\}//g' \\",
            "        -e 'ta' \\",
            "        -e 's/[[:space:]]+/ /g' -e 's/^ //' -e 's/ $//'",
            "}",
        ]
    )


def render_decode_function(tiers: Sequence[DecodeTier]) -> str:
    """Render `decode_canonical SOURCE TARGET` from ordered decode tiers."""

    variables = {SOURCE_PLACEHOLDER: '"$source"', TARGET_PLACEHOLDER: '"$target"'}
    body: list[str] = ['local source=$1 target=$2 found']
    for tier in tiers:
        body.extend(
            [
                f"# {tier.state.value}: {tier.name}",
                f"found=$({render_command(tier.probe, variables)} 2>/dev/null)",
                'if [ -n "$found" ]; then',
                f"  {render_command(tier.decode, variables)} 2>/dev/null",
                '  if [ -s "$target" ]; then',
                "    return 0",
                "  fi",
                "fi",
            ]
        )
    body.extend(
        [
            "# failed",
            ': > "$target"',
            'as_warn "cannot decode: $source"',
            f"return {DECODE_FAILED_STATUS}",
        ]
    )
    return "\n".join(["decode_canonical() {", *indent(body), "}"])


def render_encode_function(vbr_quality: int) -> str:
    """Render `encode_mp3` taking 8 tag fields and an output path."""

    body = [
        'if [ "$#" -ne 9 ]; then',
        '  as_fail "encode_mp3: expected 9 arguments, got $#"',
        f"  return {USAGE_STATUS}",
        "fi",
        "local genre artist album year track title comment image=$8 output=$9",
        'genre=$(debrace "$(str2ascii "$1")")',
        'artist=$(debrace "$(str2ascii "$2")")',
        'album=$(debrace "$(str2ascii "$3")")',
        'year=$(debrace "$(str2ascii "$4")")',
        'track=$(debrace "$(str2ascii "$5")")',
        'title=$(debrace "$(str2ascii "$6")")',
        'comment=$(debrace "$(str2ascii "$7")")',
        'if [ -n "$image" ] && [ ! -s "$image" ]; then',
        '  as_fail "cover image missing or empty: $image"',
        f"  return {MISSING_IMAGE_STATUS}",
        "fi",
        "local cover=()",
        'if [ -n "$image" ]; then',
        '  cover=(--ti "$image")',
        "fi",
        "if ! lame --quiet -r -s 44.1 --bitwidth 24 --signed --little-endian \\",
        f"    -m j -V {vbr_quality} --add-id3v2 \\",
        '    --tg "$genre" --ta "$artist" --tl "$album" --ty "$year" \\',
        '    --tn "$track" --tt "$title" --tc "$comment" "${cover[@]}" \\',
        '    - "$output"; then',
        '  rm -f -- "$output"',
        '  as_fail "encoding failed: $output"',
        f"  return {ENCODE_FAILED_STATUS}",
        "fi",
    ]
    return "\n".join(["encode_mp3() {", *indent(body), "}"])
