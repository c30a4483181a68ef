"""External tool resolution helpers.

Responsibilities:
- Resolve executables for in-process decode and man-page lookups.
- Prefer tools bundled next to the application over the system `PATH`.
"""

from __future__ import annotations

from pathlib import Path
import shutil
import sys


def resolve_executable(command_name: str) -> str:
    """Resolve an executable with bundled-first precedence, then PATH.

    Unresolvable names are returned unchanged so that `subprocess` raises its
    native missing-binary error.
    """

    normalized = command_name.strip()
    if not normalized:
        return command_name

    bundled = _app_root() / "bin" / normalized
    if bundled.is_file():
        return str(bundled)

    resolved_path = shutil.which(normalized)
    if resolved_path is not None:
        return resolved_path

    return normalized


def is_available(command_name: str) -> bool:
    """Return whether `command_name` resolves to an existing executable."""

    resolved = resolve_executable(command_name)
    return Path(resolved).is_file()


def _app_root() -> Path:
    """Resolve the application root for frozen and source layouts."""

    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]
