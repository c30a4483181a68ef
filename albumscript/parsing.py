"""Shared parsing helpers for configuration value normalization."""

from __future__ import annotations


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_int_in_range(value: object, field_name: str, minimum: int, maximum: int) -> int:
    """Parse an integer value and validate inclusive bounds.

    Raises:
        ValueError: If the value is not an integer or lies outside the bounds.
    """

    message = f"`{field_name}` must be an integer between {minimum} and {maximum}."
    if isinstance(value, bool):
        raise ValueError(message)
    if isinstance(value, int):
        parsed = value
    else:
        normalized = normalize_optional_string(value)
        if normalized is None:
            raise ValueError(message)
        try:
            parsed = int(normalized)
        except ValueError as exc:
            raise ValueError(message) from exc

    if parsed < minimum or parsed > maximum:
        raise ValueError(message)
    return parsed


def parse_gain_db(value: object, field_name: str = "gain_db") -> float:
    """Parse a non-positive decibel gain value.

    Raises:
        ValueError: If the value is not a number or would amplify the signal.
    """

    message = f"`{field_name}` must be a number less than or equal to 0."
    if isinstance(value, bool):
        raise ValueError(message)
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        normalized = normalize_optional_string(value)
        if normalized is None:
            raise ValueError(message)
        try:
            parsed = float(normalized)
        except ValueError as exc:
            raise ValueError(message) from exc

    if parsed != parsed or parsed > 0:
        raise ValueError(message)
    return parsed
