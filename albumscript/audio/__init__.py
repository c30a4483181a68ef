"""Audio collaborators: decode tiers and tool reference documentation."""

from .decoder import (
    DEFAULT_TIERS,
    DecodeChain,
    DecodeResult,
    DecodeState,
    DecodeTier,
)
from .reference import ManPageReference, ReferenceProvider

__all__ = [
    "DEFAULT_TIERS",
    "DecodeChain",
    "DecodeResult",
    "DecodeState",
    "DecodeTier",
    "ManPageReference",
    "ReferenceProvider",
]
