"""Typed records shared across generation modules."""

from .datatypes import (
    MAX_TRACK_NUMBER,
    GeneratedScript,
    InputItem,
    TagDefaults,
    TrackEntry,
    TrackID,
)

__all__ = [
    "MAX_TRACK_NUMBER",
    "GeneratedScript",
    "InputItem",
    "TagDefaults",
    "TrackEntry",
    "TrackID",
]
