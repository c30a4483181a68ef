"""Input collaborators producing ordered source path sequences."""

from .inputs import list_directory, read_nul_separated, read_playlist, single_path

__all__ = ["list_directory", "read_nul_separated", "read_playlist", "single_path"]
