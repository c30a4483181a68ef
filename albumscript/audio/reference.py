"""Man-page excerpts appended to generated scripts as reference comments.

Responsibilities:
- Look up man pages for the external tools a generated script calls.
- Reduce each page to its NAME and SYNOPSIS sections as plain text.
"""

from __future__ import annotations

import os
import re
import subprocess
from typing import Protocol

from ..runtime_tools import resolve_executable

_OVERSTRIKE = re.compile(r".\x08")
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")
_SECTION_HEADER = re.compile(r"^[A-Z][A-Z0-9 ]*$")
_KEPT_SECTIONS = frozenset({"NAME", "SYNOPSIS"})


class ReferenceProvider(Protocol):
    """Protocol for reference documentation sources."""

    def excerpt(self, tool: str) -> str | None:
        """Return plain-text reference for `tool`, or `None` when unavailable."""


class ManPageReference:
    """Excerpt NAME and SYNOPSIS sections from installed man pages."""

    def __init__(self, max_lines: int = 40, timeout_seconds: float = 10.0) -> None:
        """Initialize excerpt bounds."""

        self._max_lines = max_lines
        self._timeout_seconds = timeout_seconds

    def excerpt(self, tool: str) -> str | None:
        """Return the excerpt for one tool, or `None` when no page is installed."""

        page = self._render_page(tool)
        if page is None:
            return None
        lines = extract_sections(page, _KEPT_SECTIONS)
        if not lines:
            return None
        return "\n".join(lines[: self._max_lines])

    def _render_page(self, tool: str) -> str | None:
        """Render one man page as plain text."""

        env = dict(os.environ)
        env.update({"MANPAGER": "cat", "PAGER": "cat", "MANWIDTH": "78", "LC_ALL": "C"})
        try:
            completed = subprocess.run(
                [resolve_executable("man"), tool],
                check=False,
                capture_output=True,
                text=True,
                env=env,
                timeout=self._timeout_seconds,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return None
        if completed.returncode != 0 or not completed.stdout.strip():
            return None
        return _ANSI_ESCAPE.sub("", _OVERSTRIKE.sub("", completed.stdout))


def extract_sections(page: str, sections: frozenset[str]) -> list[str]:
    """Return the lines of the named top-level sections, trailing blanks removed."""

    kept: list[str] = []
    keeping = False
    for raw_line in page.splitlines():
        line = raw_line.rstrip()
        if _SECTION_HEADER.match(line):
            keeping = line.strip() in sections
        if keeping:
            kept.append(line)
    while kept and not kept[-1]:
        kept.pop()
    return kept
