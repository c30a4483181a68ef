"""Unicode to ASCII transliteration with curated substitutions.

Responsibilities:
- Load the curated substitution table as configuration data.
- Convert arbitrary Unicode text to ASCII without ever failing, dropping
  characters that have no ASCII rendering.

The pipeline protects literal `:` and `?` behind placeholder tokens while the
generic transliteration runs, because `?` is also what the generic step
leaves behind for characters it cannot map.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from unidecode import unidecode

_COLON_TOKEN = "\x1ac\x1a"
_QUESTION_TOKEN = "\x1aq\x1a"
_STRAY_ARTIFACTS = ("[?]", "?")


@dataclass(frozen=True, slots=True)
class SubstitutionTable:
    """Ordered literal substitutions applied before generic transliteration.

    Longer keys are applied first so multi-character sequences win over
    their single-character prefixes. Literal `:` and `?` are protected
    before substitution runs, so keys cannot contain them, and values
    cannot contain `?` because it is stripped as an artifact afterwards.
    """

    entries: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any], source_label: str) -> "SubstitutionTable":
        """Build a validated table from a raw mapping."""

        entries: dict[str, str] = {}
        for raw_key, raw_value in mapping.items():
            if not isinstance(raw_key, str) or not raw_key:
                raise ValueError(f"{source_label} contains a blank or non-string key.")
            if ":" in raw_key or "?" in raw_key:
                raise ValueError(
                    f"{source_label} key `{raw_key}` must not contain `:` or `?`."
                )
            if not isinstance(raw_value, str):
                raise ValueError(
                    f"{source_label} value for `{raw_key}` must be a string."
                )
            if not raw_value.isascii():
                raise ValueError(
                    f"{source_label} value for `{raw_key}` must be ASCII text."
                )
            if "?" in raw_value:
                raise ValueError(
                    f"{source_label} value for `{raw_key}` must not contain `?`."
                )
            entries[raw_key] = raw_value
        ordered = sorted(entries.items(), key=lambda item: (-len(item[0]), item[0]))
        return cls(entries=tuple(ordered))

    def merged_with(self, other: "SubstitutionTable") -> "SubstitutionTable":
        """Return a table where entries of `other` extend or override this one."""

        combined = dict(self.entries)
        combined.update(other.entries)
        return SubstitutionTable.from_mapping(combined, "substitution table")

    def apply(self, text: str) -> str:
        """Replace every table key occurring in `text`."""

        for source, replacement in self.entries:
            if source in text:
                text = text.replace(source, replacement)
        return text

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def _read_yaml_mapping(raw_text: str, source_label: str) -> Mapping[Any, Any]:
    """Parse YAML text and enforce a mapping root payload."""

    try:
        payload = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise ValueError(f"{source_label} is not valid YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"{source_label} must contain a top-level mapping.")
    return payload


def _packaged_table() -> SubstitutionTable:
    """Load the substitution table shipped with the package."""

    resource = resources.files("albumscript") / "data" / "substitutions.yaml"
    raw_text = resource.read_text(encoding="utf-8")
    return SubstitutionTable.from_mapping(
        _read_yaml_mapping(raw_text, "packaged substitution table"),
        "packaged substitution table",
    )


_DEFAULT_TABLE: SubstitutionTable | None = None


def default_substitution_table() -> SubstitutionTable:
    """Return the packaged table, loading it on first use."""

    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = _packaged_table()
    return _DEFAULT_TABLE


def load_substitution_table(path: Path | None = None) -> SubstitutionTable:
    """Load the packaged table, extended by an optional user YAML file.

    Raises:
        FileNotFoundError: If `path` does not exist.
        ValueError: If the user file is not a valid string-to-ASCII mapping.
    """

    table = default_substitution_table()
    if path is None:
        return table
    source_label = f"Substitution file `{path}`"
    user_mapping = _read_yaml_mapping(path.read_text(encoding="utf-8"), source_label)
    return table.merged_with(SubstitutionTable.from_mapping(user_mapping, source_label))


def transliterate(text: str, table: SubstitutionTable | None = None) -> str:
    """Convert `text` to ASCII, preserving literal colons and question marks."""

    resolved_table = table if table is not None else default_substitution_table()
    escaped = text.replace(":", _COLON_TOKEN).replace("?", _QUESTION_TOKEN)
    substituted = resolved_table.apply(escaped)
    converted = unidecode(substituted, errors="ignore")
    for artifact in _STRAY_ARTIFACTS:
        converted = converted.replace(artifact, "")
    return converted.replace(_COLON_TOKEN, ":").replace(_QUESTION_TOKEN, "?")
