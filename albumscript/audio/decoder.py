"""Two-tier decode fallback to the canonical raw PCM format.

Responsibilities:
- Describe each decode tier as probe and decode command templates.
- Run the `TRY_PRIMARY -> TRY_SECONDARY -> FAILED` state machine in-process.
- Stream one decoded, gain-normalized track through a scoped temporary file.

The same tier descriptions are rendered into the generated shell script, so
the embedded decode logic and this in-process runner follow one definition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os
from pathlib import Path
import subprocess
import tempfile
from typing import BinaryIO, Callable, Sequence

from ..errors import GenerationStageError
from ..runtime_tools import is_available, resolve_executable

SOURCE_PLACEHOLDER = "{source}"
TARGET_PLACEHOLDER = "{target}"

CANONICAL_CHANNELS = 2
CANONICAL_RATE = 44100
CANONICAL_BITS = 24

SOX_RAW_FORMAT: tuple[str, ...] = (
    "-t",
    "raw",
    "-e",
    "signed-integer",
    "-b",
    str(CANONICAL_BITS),
    "-L",
    "-c",
    str(CANONICAL_CHANNELS),
    "-r",
    str(CANONICAL_RATE),
)


class DecodeState(Enum):
    """States of the decode fallback state machine."""

    TRY_PRIMARY = "try_primary"
    TRY_SECONDARY = "try_secondary"
    DECODED = "decoded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DecodeTier:
    """One decode attempt: a cheap probe followed by the actual decode.

    Attributes:
        name: Short tier label used in diagnostics.
        state: State of the machine while this tier is attempted.
        probe: Command template whose non-empty stdout means "usable source".
        decode: Command template writing canonical raw PCM to `{target}`.
    """

    name: str
    state: DecodeState
    probe: tuple[str, ...]
    decode: tuple[str, ...]

    def probe_command(self, source: str) -> list[str]:
        """Return the probe command for one source."""

        return _fill(self.probe, source=source, target="")

    def decode_command(self, source: str, target: str) -> list[str]:
        """Return the decode command for one source and target."""

        return _fill(self.decode, source=source, target=target)


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Outcome of the decode state machine: `Decoded{path}` or `Failed`."""

    state: DecodeState
    path: Path | None = None
    tier: str | None = None

    @classmethod
    def decoded(cls, path: Path, tier: str) -> "DecodeResult":
        """Build an accepting result."""

        return cls(state=DecodeState.DECODED, path=path, tier=tier)

    @classmethod
    def failed(cls) -> "DecodeResult":
        """Build a failure result."""

        return cls(state=DecodeState.FAILED)

    @property
    def ok(self) -> bool:
        """Return whether decoding reached the accepting state."""

        return self.state is DecodeState.DECODED


PRIMARY_TIER = DecodeTier(
    name="sox",
    state=DecodeState.TRY_PRIMARY,
    probe=("soxi", "-e", SOURCE_PLACEHOLDER),
    decode=("sox", "-q", SOURCE_PLACEHOLDER, *SOX_RAW_FORMAT, TARGET_PLACEHOLDER),
)

SECONDARY_TIER = DecodeTier(
    name="ffmpeg",
    state=DecodeState.TRY_SECONDARY,
    probe=(
        "ffprobe",
        "-v",
        "error",
        "-select_streams",
        "a:0",
        "-show_entries",
        "stream=codec_name",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
        SOURCE_PLACEHOLDER,
    ),
    decode=(
        "ffmpeg",
        "-nostdin",
        "-v",
        "error",
        "-y",
        "-i",
        SOURCE_PLACEHOLDER,
        "-vn",
        "-ac",
        str(CANONICAL_CHANNELS),
        "-ar",
        str(CANONICAL_RATE),
        "-f",
        "s24le",
        "-acodec",
        "pcm_s24le",
        TARGET_PLACEHOLDER,
    ),
)

DEFAULT_TIERS: tuple[DecodeTier, ...] = (PRIMARY_TIER, SECONDARY_TIER)


def format_gain(gain_db: float) -> str:
    """Render a gain value the way it is passed to `sox gain`."""

    return f"{gain_db:g}"


def gain_command(source: str, gain_db: float) -> list[str]:
    """Return the `sox` command streaming `source` to stdout with a fixed gain."""

    return [
        "sox",
        "-q",
        *SOX_RAW_FORMAT,
        source,
        *SOX_RAW_FORMAT,
        "-",
        "gain",
        format_gain(gain_db),
    ]


def _fill(template: Sequence[str], *, source: str, target: str) -> list[str]:
    """Substitute placeholders in a command template."""

    filled: list[str] = []
    for token in template:
        if token == SOURCE_PLACEHOLDER:
            filled.append(source)
        elif token == TARGET_PLACEHOLDER:
            filled.append(target)
        else:
            filled.append(token)
    return filled


Runner = Callable[..., subprocess.CompletedProcess]


class DecodeChain:
    """Run decode tiers in order until one yields a non-empty canonical file."""

    def __init__(
        self,
        tiers: Sequence[DecodeTier] = DEFAULT_TIERS,
        runner: Runner = subprocess.run,
    ) -> None:
        """Initialize the chain with ordered tiers and a subprocess runner."""

        if not tiers:
            raise ValueError("Decode chain requires at least one tier.")
        self._tiers = tuple(tiers)
        self._runner = runner

    @property
    def tiers(self) -> tuple[DecodeTier, ...]:
        """Return ordered decode tiers."""

        return self._tiers

    def decode(self, source: str, target: Path) -> DecodeResult:
        """Decode `source` into `target`, truncating `target` on failure."""

        for tier in self._tiers:
            if not self._probe(tier, source):
                continue
            self._run(self._resolved(tier.decode_command(source, str(target))))
            if target.exists() and target.stat().st_size > 0:
                return DecodeResult.decoded(target, tier.name)

        if target.exists():
            target.write_bytes(b"")
        return DecodeResult.failed()

    def stream(self, source: str, sink: BinaryIO, gain_db: float = -3.0) -> DecodeResult:
        """Decode one source and stream gain-normalized canonical PCM into `sink`.

        The temporary decode target is removed on every exit path.
        """

        handle, temp_name = tempfile.mkstemp(prefix="albumscript.", suffix=".raw")
        os.close(handle)
        temp_path = Path(temp_name)
        try:
            result = self.decode(source, temp_path)
            if not result.ok:
                return result
            completed = self._run(
                self._resolved(gain_command(str(temp_path), gain_db)),
                capture=True,
            )
            if completed.returncode != 0:
                raise GenerationStageError(
                    stage="decode",
                    detail=f"Gain normalization failed for `{source}`.",
                    hint="Verify that `sox` is installed and supports raw PCM.",
                )
            sink.write(completed.stdout)
            sink.flush()
            return result
        finally:
            temp_path.unlink(missing_ok=True)

    def _probe(self, tier: DecodeTier, source: str) -> bool:
        """Return whether the tier's probe reports a usable encoding."""

        completed = self._run(self._resolved(tier.probe_command(source)), capture=True)
        if completed.returncode != 0:
            return False
        output = completed.stdout or b""
        if isinstance(output, bytes):
            output = output.decode("utf-8", "replace")
        return bool(output.strip())

    def _run(self, command: list[str], capture: bool = False) -> subprocess.CompletedProcess:
        """Run one command, mapping a missing tool to a failed completion."""

        try:
            return self._runner(
                command,
                check=False,
                stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except FileNotFoundError:
            return subprocess.CompletedProcess(command, returncode=127, stdout=b"")

    @staticmethod
    def _resolved(command: list[str]) -> list[str]:
        """Resolve the executable of a command."""

        return [resolve_executable(command[0]), *command[1:]]


def missing_tools(tiers: Sequence[DecodeTier] = DEFAULT_TIERS) -> list[str]:
    """Return tool names used by `tiers` that cannot be resolved."""

    names: list[str] = []
    for tier in tiers:
        for command in (tier.probe, tier.decode):
            if command[0] not in names:
                names.append(command[0])
    return [name for name in names if not is_available(name)]
