"""Section-level snapshot diff and the side-by-side rendering contract."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from character_vault.history.lines import (
    DiffSegment,
    count_changed_lines,
    diff_lines,
    diff_segments,
)
from character_vault.history.normalize import normalize_section
from character_vault.models.sections import SECTIONS, Section, SectionKind, read_section

if TYPE_CHECKING:
    from collections.abc import Iterable

    from character_vault.config import HistoryConfig
    from character_vault.models.character import Character
    from character_vault.models.snapshot import Snapshot

_DEFAULT_LONG_CHARS = 900
_DEFAULT_LONG_LINES = 18


class DiffEntry(BaseModel):
    """Comparison of one section between a snapshot and the live card."""

    model_config = ConfigDict(frozen=True)

    section: Section
    label: str
    snapshot_value: Any = None
    current_value: Any = None
    changed: bool
    is_image: bool = False

    def snapshot_text(self) -> str:
        return normalize_section(self.section, self.snapshot_value)

    def current_text(self) -> str:
        return normalize_section(self.section, self.current_value)

    def changed_lines(self) -> int:
        """Count of changed line pairs, shown as a summary badge."""
        if self.is_image:
            return 0
        return count_changed_lines(self.snapshot_text(), self.current_text())


def compute_diff(snapshot: Snapshot, character: Character) -> list[DiffEntry]:
    """Produce one entry per section, in declared order, unfiltered.

    Line and segment diffs are not computed here; they run only for the
    entries a caller actually renders.
    """
    entries: list[DiffEntry] = []
    for meta in SECTIONS:
        snapshot_value = read_section(snapshot.payload, meta.section)
        current_value = read_section(character, meta.section)
        entries.append(
            DiffEntry(
                section=meta.section,
                label=meta.label,
                snapshot_value=snapshot_value,
                current_value=current_value,
                changed=normalize_section(meta.section, snapshot_value)
                != normalize_section(meta.section, current_value),
                is_image=meta.kind == SectionKind.IMAGE,
            )
        )
    return entries


def changed_entries(entries: Iterable[DiffEntry]) -> list[DiffEntry]:
    return [entry for entry in entries if entry.changed]


class PanelSide(StrEnum):
    SNAPSHOT = "snapshot"
    CURRENT = "current"


class RenderedLine(BaseModel):
    number: str
    changed: bool
    segments: list[DiffSegment]


class DiffPanel(BaseModel):
    """One side of a section diff, ready for display."""

    title: str
    side: PanelSide
    lines: list[RenderedLine]
    changed_line_count: int
    is_long: bool
    expanded: bool
    empty: bool


def _is_long(content: str, *, max_chars: int, max_lines: int) -> bool:
    return len(content) > max_chars or len(content.split("\n")) > max_lines


def _head(content: str, max_lines: int) -> str:
    return "\n".join(content.split("\n")[:max_lines])


def render_panel(
    entry: DiffEntry,
    side: PanelSide,
    *,
    expanded: bool = False,
    config: HistoryConfig | None = None,
) -> DiffPanel:
    """Render one side of a text entry against the other side.

    The snapshot panel diffs snapshot against current and the current panel
    diffs current against snapshot, so changed regions mirror each other.
    Long content is cut to its first lines until ``expanded``; expanding
    re-diffs the full normalized text rather than the truncated copy.
    """
    if entry.is_image:
        raise ValueError(f"Section {entry.section} is an image and has no text diff")

    max_chars = config.long_content_chars if config else _DEFAULT_LONG_CHARS
    max_lines = config.long_content_lines if config else _DEFAULT_LONG_LINES

    snapshot_text = entry.snapshot_text()
    current_text = entry.current_text()
    if side == PanelSide.SNAPSHOT:
        content, compare = snapshot_text, current_text
    else:
        content, compare = current_text, snapshot_text

    is_long = _is_long(content, max_chars=max_chars, max_lines=max_lines)
    if is_long and not expanded:
        shown, shown_compare = _head(content, max_lines), _head(compare, max_lines)
    else:
        shown, shown_compare = content, compare

    lines = [
        RenderedLine(
            number=f"{index + 1:02d}",
            changed=line.changed,
            segments=diff_segments(line.value, line.compare_value),
        )
        for index, line in enumerate(diff_lines(shown, shown_compare))
    ]
    return DiffPanel(
        title="Snapshot" if side == PanelSide.SNAPSHOT else "Current",
        side=side,
        lines=lines,
        changed_line_count=count_changed_lines(content, compare),
        is_long=is_long,
        expanded=expanded and is_long,
        empty=not lines,
    )
