"""Title derivation and tag cleanup helpers."""

from __future__ import annotations

import posixpath
import re

from .transliteration import SubstitutionTable, transliterate

_WORD_START = re.compile(r"(^|\s)(\S)")
_EMPTY_BRACKETS = re.compile(r"\(\s*\)|\[\s*\]|\{\s*\}")
_WHITESPACE_RUN = re.compile(r"\s+")


def title_from_path(path: str, strip_extension: bool = True) -> str:
    """Derive a capitalized title from the filename part of `path`.

    Directory components and (unless disabled) the final extension are
    dropped, underscores become spaces and the first letter of every word is
    upper-cased. The filesystem is never consulted.
    """

    name = posixpath.basename(path.rstrip("/"))
    stem = posixpath.splitext(name)[0] if strip_extension else name
    spaced = stem.replace("_", " ")
    return _WORD_START.sub(lambda match: match.group(1) + match.group(2).upper(), spaced)


def debrace(text: str) -> str:
    """Remove empty `()`, `[]` and `{}` pairs, then squeeze and trim whitespace."""

    previous = None
    cleaned = text
    while cleaned != previous:
        previous = cleaned
        cleaned = _EMPTY_BRACKETS.sub("", cleaned)
    return _WHITESPACE_RUN.sub(" ", cleaned).strip()


def tag_text(text: str, table: SubstitutionTable | None = None) -> str:
    """Apply the tag-field normalization: transliterate, then debrace."""

    return debrace(transliterate(text, table))
