"""Text normalization pipelines.

This package turns arbitrary Unicode into ASCII tag text, filesystem-safe
basenames and human-readable track titles.
"""

from .slug import DEFAULT_SLUG_LENGTH, slugify
from .titles import debrace, tag_text, title_from_path
from .transliteration import SubstitutionTable, load_substitution_table, transliterate

__all__ = [
    "DEFAULT_SLUG_LENGTH",
    "SubstitutionTable",
    "debrace",
    "load_substitution_table",
    "slugify",
    "tag_text",
    "title_from_path",
    "transliterate",
]
