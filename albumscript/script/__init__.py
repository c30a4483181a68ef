"""Shell script emission: runtime preamble, track and aggregate functions."""

from .assembler import ScriptAssembler
from .numbering import assign_track_ids
from .runtime import RuntimeSettings

__all__ = ["RuntimeSettings", "ScriptAssembler", "assign_track_ids"]
