"""Track number assignment for ordered input sequences."""

from __future__ import annotations

from typing import Sequence

from ..errors import GenerationStageError, TrackCapacityError
from ..models.datatypes import MAX_TRACK_NUMBER, InputItem, TrackID


def assign_track_ids(
    paths: Sequence[str], start: int = 1
) -> list[tuple[TrackID, InputItem]]:
    """Number input paths in order, starting at `start`.

    The whole sequence is validated before any number is handed out, so a
    sequence that would overflow the three-digit range yields nothing.

    Raises:
        GenerationStageError: If `start` lies outside the valid track range.
        TrackCapacityError: If the last item would need a number above 999.
    """

    if isinstance(start, bool) or not isinstance(start, int) or not (
        1 <= start <= MAX_TRACK_NUMBER
    ):
        raise GenerationStageError(
            stage="numbering",
            detail=f"Start track number must be between 1 and {MAX_TRACK_NUMBER}, got {start!r}.",
            hint="Pass `--start <n>` with 1 <= n <= 999.",
        )

    count = len(paths)
    if count and start + count - 1 > MAX_TRACK_NUMBER:
        raise TrackCapacityError(start=start, count=count, limit=MAX_TRACK_NUMBER)

    return [
        (TrackID(start + position), InputItem(position=position, path=path))
        for position, path in enumerate(paths)
    ]
