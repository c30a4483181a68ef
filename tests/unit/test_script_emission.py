"""Unit tests for generated script structure, ordering and quoting."""

from __future__ import annotations

import io
import re
import shlex

import pytest

from albumscript.errors import TrackCapacityError
from albumscript.models.datatypes import TagDefaults
from albumscript.script.assembler import ScriptAssembler
from albumscript.script.runtime import RuntimeSettings
from albumscript.telemetry.logger import RunLogger


def _function_body(text: str, header: str, closer: str) -> list[str]:
    """Return the lines between one function header and its closing line."""

    lines = text.splitlines()
    start = lines.index(header)
    end = lines.index(closer, start)
    return lines[start + 1 : end]


class _StubReference:
    """Reference provider returning fixed excerpts for known tools."""

    def excerpt(self, tool: str) -> str | None:
        """Return a fixed excerpt for `sox` only."""

        if tool == "sox":
            return "NAME\n       sox - Sound eXchange\n\nSYNOPSIS\n       sox infile outfile"
        return None


def test_assemble_emits_one_track_function_per_input(
    assembler: ScriptAssembler, album_paths: list[str]
) -> None:
    """Every input item gets exactly one `track_NNN` function."""

    script = assembler.assemble(album_paths)

    headers = re.findall(r"^(track_\d{3})\(\) \($", script.text, flags=re.MULTILINE)
    assert headers == ["track_001", "track_002", "track_003"]
    assert script.track_count == 3


def test_concat_all_calls_every_track_once_in_order(
    assembler: ScriptAssembler, album_paths: list[str]
) -> None:
    """`concat_all` invokes track functions without accessor flags."""

    script = assembler.assemble(album_paths, start=7)

    body = _function_body(script.text, "concat_all() {", "}")
    assert body == ["  track_007", "  track_008", "  track_009"]


def test_itemize_all_encodes_every_track_once(
    assembler: ScriptAssembler, album_paths: list[str]
) -> None:
    """`itemize_all` pipes each track into exactly one `encode_mp3` call."""

    script = assembler.assemble(album_paths)

    body = "\n".join(_function_body(script.text, "itemize_all() {", "}"))
    assert body.count("| encode_mp3 ") == 3
    assert "  track_002 | encode_mp3 " in body
    assert "  title=$(track_002 -t)" in body
    assert 'str2basename "$(str2ascii "$track $artist $title")").mp3' in body
    assert '  rm -f -- "$output"' in body
    assert body.endswith('  return "$status"')


def test_script_sections_follow_fixed_order(
    assembler: ScriptAssembler, album_paths: list[str]
) -> None:
    """Preamble, track functions, aggregates and epilogue appear in order."""

    text = assembler.assemble(album_paths).text

    assert text.startswith("#!/usr/bin/env bash\n")
    assert text.endswith("\n")
    markers = [
        "str2ascii() {",
        "decode_canonical() {",
        "encode_mp3() {",
        "track_001() (",
        "track_003() (",
        "concat_all() {",
        "itemize_all() {",
        "GENRE=",
        "# Uncomment the operations to run.",
    ]
    positions = [text.index(marker) for marker in markers]
    assert positions == sorted(positions)


def test_assemble_is_deterministic(album_paths: list[str]) -> None:
    """Same input and settings should produce byte-identical scripts."""

    first = ScriptAssembler(settings=RuntimeSettings(version="1")).assemble(album_paths)
    second = ScriptAssembler(settings=RuntimeSettings(version="1")).assemble(album_paths)

    assert first.text == second.text


def test_track_function_embeds_quoted_source_and_derived_title(
    assembler: ScriptAssembler, album_paths: list[str]
) -> None:
    """Sources are quoted verbatim and `-t` returns the ASCII title."""

    text = assembler.assemble(album_paths).text

    assert "-t) printf '%s\\n' '02 Uber Alles' ;;" in text
    assert f"-f) printf '%s\\n' {shlex.quote(album_paths[2])} ;;" in text
    assert f"if decode_canonical {shlex.quote(album_paths[1])} \"$tmp\"; then" in text
    assert "-n) printf '%s\\n' 003 ;;" in text
    assert "-a) printf '%s\\n' \"$ARTIST\" ;;" in text


def test_track_function_installs_cleanup_before_decoding(
    assembler: ScriptAssembler,
) -> None:
    """The temporary file trap must be active before decoding starts."""

    body = _function_body(assembler.assemble(["/a.flac"]).text, "track_001() (", ")")
    trap_index = body.index("  trap 'rm -f -- \"$tmp\"' EXIT")
    decode_index = body.index("  if decode_canonical /a.flac \"$tmp\"; then")
    cleanup_index = body.index('  rm -f -- "$tmp"')

    assert trap_index < decode_index < cleanup_index
    assert body[-1] == '  exit "$status"'


def test_tag_defaults_are_quoted_in_epilogue(
    assembler: ScriptAssembler, album_paths: list[str]
) -> None:
    """Tag values containing quotes must be emitted as single shell words."""

    defaults = TagDefaults(artist="O'Brien", album="Live $HOME", year="1999")

    text = assembler.assemble(album_paths, defaults=defaults).text

    assert f"ARTIST={shlex.quote(defaults.artist)}" in text
    assert "ALBUM='Live $HOME'" in text
    assert "YEAR=1999" in text
    assert "GENRE=''" in text
    assert "# track_001 -t" in text


def test_assemble_accepts_empty_input(assembler: ScriptAssembler) -> None:
    """An empty input sequence yields a runnable script with no-op aggregates."""

    script = assembler.assemble([])

    assert script.track_count == 0
    assert _function_body(script.text, "concat_all() {", "}") == ["  :"]
    assert "track_001" not in script.text


def test_reference_excerpts_are_appended_and_missing_pages_logged(
    album_paths: list[str],
) -> None:
    """Available excerpts become comments and unavailable ones are logged as warnings."""

    sink = io.StringIO()
    assembler = ScriptAssembler(
        settings=RuntimeSettings(version="test"),
        reference=_StubReference(),
        reference_tools=("sox", "lame"),
        run_logger=RunLogger(sink=sink, verbose=True),
    )

    text = assembler.assemble(album_paths).text

    assert "# Reference: sox" in text
    assert "#        sox - Sound eXchange" in text
    assert "# Reference: lame" not in text
    log_output = sink.getvalue()
    assert "stage=reference event=warning reason=man_page_unavailable tool=lame" in log_output
    assert "stage=epilogue event=complete" in log_output


def test_capacity_failure_is_logged_and_produces_no_script() -> None:
    """Numbering failures propagate after a failure event is logged."""

    sink = io.StringIO()
    assembler = ScriptAssembler(
        settings=RuntimeSettings(version="test"),
        run_logger=RunLogger(sink=sink),
    )

    with pytest.raises(TrackCapacityError):
        assembler.assemble(["/a.flac", "/b.flac"], start=999)

    assert "stage=numbering event=failure error_type=TrackCapacityError" in sink.getvalue()
