"""Shell text helpers for generated scripts.

Responsibilities:
- Quote literals for POSIX shells.
- Escape literal text for `sed` substitution expressions.
- Render command templates with shell variables in place of placeholders.
"""

from __future__ import annotations

import shlex
from typing import Mapping, Sequence

_SED_PATTERN_SPECIALS = frozenset("\\/.*[]^$")
_SED_REPLACEMENT_SPECIALS = frozenset("\\/&")


def quote(value: str) -> str:
    """Return `value` as one shell word, always single-quoted when non-trivial."""

    return shlex.quote(value)


def sed_escape_pattern(text: str) -> str:
    """Escape literal text for the pattern side of `s/.../.../`."""

    return "".join(f"\\{char}" if char in _SED_PATTERN_SPECIALS else char for char in text)


def sed_escape_replacement(text: str) -> str:
    """Escape literal text for the replacement side of `s/.../.../`."""

    return "".join(
        f"\\{char}" if char in _SED_REPLACEMENT_SPECIALS else char for char in text
    )


def sed_substitution(pattern: str, replacement: str) -> str:
    """Return a global literal `sed` substitution expression."""

    return f"s/{sed_escape_pattern(pattern)}/{sed_escape_replacement(replacement)}/g"


def render_command(template: Sequence[str], variables: Mapping[str, str]) -> str:
    """Render a command template, mapping placeholder tokens to shell expansions.

    Tokens found in `variables` are replaced by their (unquoted) shell
    expansion, e.g. `{"{source}": '"$1"'}`; every other token is quoted.
    """

    words: list[str] = []
    for token in template:
        if token in variables:
            words.append(variables[token])
        else:
            words.append(quote(token))
    return " ".join(words)


def indent(lines: Sequence[str], level: int = 1) -> list[str]:
    """Indent non-empty lines with two spaces per level."""

    prefix = "  " * level
    return [f"{prefix}{line}" if line else line for line in lines]


def comment(text: str) -> list[str]:
    """Render text as shell comment lines."""

    return [f"# {line}".rstrip() for line in text.splitlines()] or ["#"]
