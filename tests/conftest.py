"""Shared pytest fixtures for the albumscript test suite."""

from __future__ import annotations

from pathlib import Path
import shutil

import pytest

from albumscript.script.assembler import ScriptAssembler
from albumscript.script.runtime import RuntimeSettings
from tests.stub_tools import StubBin


@pytest.fixture
def album_paths() -> list[str]:
    """Provide a small ordered album input sequence."""

    return [
        "/music/Album/01_intro.flac",
        "/music/Album/02_über_alles.wav",
        "/music/Album/03 - Don't Stop (Live).mp3",
    ]


@pytest.fixture
def assembler() -> ScriptAssembler:
    """Provide an assembler without reference lookups."""

    return ScriptAssembler(settings=RuntimeSettings(version="test"))


@pytest.fixture
def bash_path() -> str:
    """Return the bash executable or skip the test when bash is unavailable."""

    resolved = shutil.which("bash")
    if resolved is None:
        pytest.skip("bash is not available")
    for tool in ("sed", "tr", "cut", "mktemp", "rm", "cat"):
        if shutil.which(tool) is None:
            pytest.skip(f"`{tool}` is not available")
    return resolved


@pytest.fixture
def stub_bin(tmp_path: Path) -> StubBin:
    """Provide an empty stub tool directory under `tmp_path`."""

    return StubBin(tmp_path / "bin")
