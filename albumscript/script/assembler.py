"""Script assembly for albumscript.

Responsibilities:
- Define the section order of a generated script.
- Run numbering and emission stages with start/complete/failure telemetry.
- Build the whole text in memory so that any failure emits nothing.

Key types:
- `ScriptAssembler`: generation facade.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Sequence, TypeVar

from .. import __version__
from ..audio.reference import ReferenceProvider
from ..models.datatypes import GeneratedScript, TagDefaults
from ..telemetry.logger import RunLogger
from ..text.transliteration import SubstitutionTable, default_substitution_table
from .aggregate import render_concat_function, render_itemize_function
from .epilogue import render_epilogue
from .numbering import assign_track_ids
from .runtime import RuntimeSettings, render_preamble
from .tracks import build_track_entry, render_track_function

_StageResult = TypeVar("_StageResult")


class ScriptAssembler:
    """Turn an ordered path sequence into one self-contained shell script."""

    def __init__(
        self,
        settings: RuntimeSettings | None = None,
        table: SubstitutionTable | None = None,
        reference: ReferenceProvider | None = None,
        reference_tools: Sequence[str] = (),
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize emission settings and optional collaborators."""

        self._settings = settings if settings is not None else RuntimeSettings(version=__version__)
        self._table = table if table is not None else default_substitution_table()
        self._reference = reference
        self._reference_tools = tuple(reference_tools)
        self._run_logger = run_logger

    def assemble(
        self,
        paths: Sequence[str],
        start: int = 1,
        defaults: TagDefaults | None = None,
    ) -> GeneratedScript:
        """Generate the script for `paths`, numbering from `start`."""

        resolved_defaults = defaults if defaults is not None else TagDefaults()
        numbered = self._run_stage("numbering", lambda: assign_track_ids(paths, start))
        entries = self._run_stage(
            "tracks",
            lambda: [build_track_entry(track_id, item, self._table) for track_id, item in numbered],
        )
        track_sections = [render_track_function(entry) for entry in entries]
        concat_section, itemize_section = self._run_stage(
            "aggregate",
            lambda: (render_concat_function(entries), render_itemize_function(entries)),
        )
        excerpts = self._run_stage("reference", self._collect_reference)
        epilogue = self._run_stage(
            "epilogue",
            lambda: render_epilogue(resolved_defaults, entries, excerpts),
        )

        sections = [
            render_preamble(self._settings, self._table),
            "\n\n".join(track_sections),
            concat_section,
            itemize_section,
            epilogue,
        ]
        text = "\n\n".join(section for section in sections if section) + "\n"
        return GeneratedScript(text=text, tracks=tuple(entries))

    def _collect_reference(self) -> list[tuple[str, str]]:
        """Collect reference excerpts, skipping tools without documentation."""

        if self._reference is None:
            return []
        excerpts: list[tuple[str, str]] = []
        for tool in self._reference_tools:
            excerpt = self._reference.excerpt(tool)
            if excerpt is None:
                if self._run_logger is not None:
                    self._run_logger.log_stage_warning(
                        "reference", "man_page_unavailable", tool=tool
                    )
                continue
            excerpts.append((tool, excerpt))
        return excerpts

    def _run_stage(
        self,
        stage_name: str,
        action: Callable[[], _StageResult],
    ) -> _StageResult:
        """Run one named stage and emit start/complete/failure telemetry events."""

        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage_name)
        try:
            result = action()
        except Exception as exc:
            if self._run_logger is not None:
                self._run_logger.log_stage_failure(stage_name, type(exc).__name__)
            raise
        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage_name)
        return result

