"""Domain exceptions for script generation and CLI diagnostics."""

from __future__ import annotations


class GenerationStageError(RuntimeError):
    """Raised when a specific generation stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped generation error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class TrackCapacityError(GenerationStageError):
    """Raised when track numbering would exceed the three-digit track range."""

    def __init__(self, *, start: int, count: int, limit: int) -> None:
        """Initialize a capacity error for one numbering request."""

        last = start + count - 1
        super().__init__(
            stage="numbering",
            detail=(
                f"{count} input file(s) starting at track {start} would need track "
                f"number {last}; the maximum is {limit}."
            ),
            hint="Split the input into smaller batches or lower `--start`.",
        )
        self.start = start
        self.count = count
        self.limit = limit
