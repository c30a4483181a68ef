"""Top-level package for albumscript.

albumscript turns an ordered list of audio files into an editable bash script
that decodes, normalizes, concatenates, encodes and tags them. The main
entry point is `ScriptAssembler`.
"""

__version__ = "0.1.0"

from .script.assembler import ScriptAssembler

__all__ = ["ScriptAssembler", "__version__"]
