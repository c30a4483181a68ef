"""Core datatypes shared across albumscript modules.

Responsibilities:
- Represent immutable records exchanged between generation stages.
- Keep track addressing explicit and validated at construction time.

Key types:
- `InputItem`, `TrackID`, `TrackEntry`, `TagDefaults`, and `GeneratedScript`.
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_TRACK_NUMBER = 999


@dataclass(frozen=True, slots=True)
class InputItem:
    """One input path with its position in the input sequence.

    Attributes:
        position: 0-based position in input order.
        path: Source path or identifier exactly as received.
    """

    position: int
    path: str


@dataclass(frozen=True, slots=True, order=True)
class TrackID:
    """Three-digit track number addressing one input item."""

    value: int

    def __post_init__(self) -> None:
        """Validate the track number range."""

        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("Track number must be an integer.")
        if not 1 <= self.value <= MAX_TRACK_NUMBER:
            raise ValueError(
                f"Track number {self.value} is outside 1..{MAX_TRACK_NUMBER}."
            )

    @property
    def label(self) -> str:
        """Return the zero-padded three-digit rendering."""

        return f"{self.value:03d}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True)
class TrackEntry:
    """A numbered input item ready for emission.

    Attributes:
        track_id: Assigned track number.
        source: Source path embedded into the generated function.
        title: Derived ASCII title returned by the `-t` accessor.
    """

    track_id: TrackID
    source: str
    title: str

    @property
    def function_name(self) -> str:
        """Return the generated shell function name for this track."""

        return f"track_{self.track_id.label}"


@dataclass(frozen=True, slots=True)
class TagDefaults:
    """Initial values of the run-time tag variables written to the epilogue.

    The generated script reads these variables when a track function is
    invoked, so operators can edit or override them per call.
    """

    genre: str = ""
    artist: str = ""
    album: str = ""
    year: str = ""
    comment: str = ""
    image: str = ""

    def as_shell_variables(self) -> tuple[tuple[str, str], ...]:
        """Return `(variable, value)` pairs in epilogue order."""

        return (
            ("GENRE", self.genre),
            ("ARTIST", self.artist),
            ("ALBUM", self.album),
            ("YEAR", self.year),
            ("COMMENT", self.comment),
            ("IMAGE", self.image),
        )


@dataclass(frozen=True, slots=True)
class GeneratedScript:
    """Final generated script text with a summary of its track range."""

    text: str
    tracks: tuple[TrackEntry, ...]

    @property
    def track_count(self) -> int:
        """Return number of emitted track functions."""

        return len(self.tracks)
