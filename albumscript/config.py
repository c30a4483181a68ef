"""Configuration model and loaders for albumscript.

Responsibilities:
- Define generation settings as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Resolve deterministic precedence between CLI, YAML, environment and defaults.

Key types:
- `ScriptConfig`: normalized settings for one generation run.
- `ConfigLoader`: static construction helpers for `ScriptConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .models.datatypes import MAX_TRACK_NUMBER, TagDefaults
from .parsing import (
    normalize_optional_string,
    parse_gain_db,
    parse_int_in_range,
    parse_permissive_boolean,
)


_DEFAULT_REFERENCE_TOOLS = ("sox", "lame")


@dataclass(frozen=True, slots=True)
class ScriptConfig:
    """Settings for one script generation run.

    Attributes:
        start_number: Track number assigned to the first input item.
        genre: Initial `GENRE` tag value written to the script epilogue.
        artist: Initial `ARTIST` tag value.
        album: Initial `ALBUM` tag value.
        year: Initial `YEAR` tag value.
        comment: Initial `COMMENT` tag value.
        image: Initial `IMAGE` cover path.
        gain_db: Fixed gain applied to each decoded track (never positive).
        vbr_quality: LAME VBR quality, 0 (best) to 9.
        include_reference: Whether man-page excerpts are appended as comments.
        reference_tools: Tools whose man pages are excerpted.
        substitutions_path: Optional YAML file extending the transliteration table.
    """

    start_number: int = 1
    genre: str = ""
    artist: str = ""
    album: str = ""
    year: str = ""
    comment: str = ""
    image: str = ""
    gain_db: float = -3.0
    vbr_quality: int = 2
    include_reference: bool = True
    reference_tools: tuple[str, ...] = _DEFAULT_REFERENCE_TOOLS
    substitutions_path: Path | None = None

    def validate(self) -> None:
        """Validate configuration values before generation."""

        parse_int_in_range(self.start_number, "start_number", 1, MAX_TRACK_NUMBER)
        parse_int_in_range(self.vbr_quality, "vbr_quality", 0, 9)
        parse_gain_db(self.gain_db)
        for tool in self.reference_tools:
            if not isinstance(tool, str) or not tool.strip():
                raise ValueError("`reference_tools` entries must be non-empty strings.")

    def tag_defaults(self) -> TagDefaults:
        """Return the initial tag variables for the script epilogue."""

        return TagDefaults(
            genre=self.genre,
            artist=self.artist,
            album=self.album,
            year=self.year,
            comment=self.comment,
            image=self.image,
        )

    def with_overrides(self, overrides: Mapping[str, object]) -> "ScriptConfig":
        """Return a validated copy with non-`None` overrides applied."""

        known = {item.name for item in fields(self)}
        unknown = sorted(set(overrides).difference(known))
        if unknown:
            raise ValueError(f"Unknown configuration override(s): {', '.join(unknown)}.")
        applied = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, **applied)
        updated.validate()
        return updated


class ConfigLoader:
    """Factory methods for creating `ScriptConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "start_number",
            "genre",
            "artist",
            "album",
            "year",
            "comment",
            "image",
            "gain_db",
            "vbr_quality",
            "include_reference",
            "reference_tools",
            "substitutions",
        }
    )
    _TAG_KEYS = ("genre", "artist", "album", "year", "comment", "image")
    _ENV_PREFIX = "ALBUMSCRIPT_"

    @staticmethod
    def from_yaml(path: Path, base: ScriptConfig | None = None) -> ScriptConfig:
        """Create a validated config from a YAML file layered over `base`."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        return ConfigLoader._build_config_from_mapping(
            payload,
            source_label=f"YAML `{path}`",
            base=base if base is not None else ScriptConfig(),
            relative_to=path.parent,
        )

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ScriptConfig:
        """Create a validated config from `ALBUMSCRIPT_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        prefix = ConfigLoader._ENV_PREFIX
        payload: dict[str, Any] = {}
        for key in sorted(ConfigLoader._SUPPORTED_YAML_KEYS):
            env_key = f"{prefix}{key.upper()}"
            if env_key not in env_map:
                continue
            raw_value = env_map[env_key]
            if key == "reference_tools":
                payload[key] = [token for token in raw_value.split(",") if token.strip()]
            else:
                payload[key] = raw_value
        return ConfigLoader._build_config_from_mapping(
            payload,
            source_label="Environment",
            base=ScriptConfig(),
            relative_to=None,
        )

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any],
        source_label: str,
        base: ScriptConfig,
        relative_to: Path | None,
    ) -> ScriptConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_keys(payload, source_label)

        overrides: dict[str, object] = {}
        if "start_number" in payload:
            overrides["start_number"] = ConfigLoader._ranged_int(
                payload, "start_number", source_label, 1, MAX_TRACK_NUMBER
            )
        if "vbr_quality" in payload:
            overrides["vbr_quality"] = ConfigLoader._ranged_int(
                payload, "vbr_quality", source_label, 0, 9
            )
        if "gain_db" in payload:
            try:
                overrides["gain_db"] = parse_gain_db(payload["gain_db"])
            except ValueError as exc:
                raise ValueError(f"{source_label} field {exc}") from exc
        if "include_reference" in payload:
            overrides["include_reference"] = ConfigLoader._boolean(
                payload, "include_reference", source_label
            )
        if "reference_tools" in payload:
            overrides["reference_tools"] = ConfigLoader._string_tuple(
                payload, "reference_tools", source_label
            )
        if "substitutions" in payload:
            substitutions = ConfigLoader._tag_string(payload, "substitutions", source_label)
            if substitutions:
                substitutions_path = Path(substitutions)
                if relative_to is not None and not substitutions_path.is_absolute():
                    substitutions_path = relative_to / substitutions_path
                overrides["substitutions_path"] = substitutions_path
        for key in ConfigLoader._TAG_KEYS:
            if key in payload:
                overrides[key] = ConfigLoader._tag_string(payload, key, source_label)

        return base.with_overrides(overrides)

    @staticmethod
    def _validate_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Validate supported configuration keys."""

        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS)
        )
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _ranged_int(
        payload: Mapping[str, Any], key: str, source_label: str, minimum: int, maximum: int
    ) -> int:
        """Read and validate a bounded integer field."""

        try:
            return parse_int_in_range(payload[key], key, minimum, maximum)
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

    @staticmethod
    def _boolean(payload: Mapping[str, Any], key: str, source_label: str) -> bool:
        """Read and validate a boolean field."""

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _tag_string(payload: Mapping[str, Any], key: str, source_label: str) -> str:
        """Read a free-form scalar as text, keeping blank values as empty strings."""

        raw_value = payload[key]
        if isinstance(raw_value, (Mapping, list, tuple)):
            raise ValueError(f"{source_label} field `{key}` must be a scalar value.")
        return normalize_optional_string(raw_value) or ""

    @staticmethod
    def _string_tuple(payload: Mapping[str, Any], key: str, source_label: str) -> tuple[str, ...]:
        """Read a list of non-empty strings."""

        raw_value = payload[key]
        if raw_value is None:
            return tuple()
        if not isinstance(raw_value, (list, tuple)):
            raise ValueError(f"{source_label} field `{key}` must be a list of strings.")
        values: list[str] = []
        for item in raw_value:
            normalized = normalize_optional_string(item)
            if normalized is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank entry.")
            values.append(normalized)
        return tuple(values)
