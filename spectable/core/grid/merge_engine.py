# spectable/core/grid/merge_engine.py
"""
Merge Engine - 셀 병합 / 병합 해제

Provides the two span transforms of the spec-table editor.

================================================================================
MERGE
================================================================================

merge(model, selection)
│
├─ 선택 검증
│   ├─ 비어 있지 않음, 모든 좌표 존재
│   ├─ 직사각형 (SelectionTracker.is_rectangular)
│   ├─ 2개 이상의 셀 (같은 셀 안의 줄끼리는 병합 불가)
│   └─ 모든 좌표가 STANDALONE (COVERED / ANCHOR 포함 시 거부)
│
├─ anchor = 사전순 최소 (row, col, line)
├─ rowspan = maxRow - minRow + 1, colspan = maxCol - minCol + 1
├─ anchor.content = 비어 있지 않은 선택 내용을 (row, col, line) 순서로 줄바꿈 연결
├─ 나머지 선택 좌표 → (0, 0, "")
└─ selection.clear()

================================================================================
UNMERGE
================================================================================

unmerge(model, row, col, line)
│
├─ 대상이 ANCHOR 인지 검증
├─ slots = [anchor] + 범위 내 (0, 0) placeholder (row, col, line 순)
├─ anchor.content 를 줄바꿈으로 분할, slot 순서대로 배분
│   └─ 조각이 slot보다 많으면 마지막 slot에 나머지를 다시 연결
└─ 모든 slot → (1, 1) STANDALONE

================================================================================
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from spectable.core.functions.utils import distribute_fragments, split_content
from spectable.core.grid.coverage_resolver import CoverageResolver
from spectable.core.grid.grid_constants import (
    Coordinate,
    DEFAULT_SPEC_TABLE_CONFIG,
    MergeError,
    SpecTableConfig,
)
from spectable.core.grid.grid_model import GridModel, LineEntry
from spectable.core.grid.selection_tracker import SelectionTracker

logger = logging.getLogger("spec-table")


@dataclass
class MergeResult:
    """Outcome of a merge.

    Attributes:
        model: The mutated model (same object that was passed in)
        anchor: Coordinate of the new span anchor
        rowspan: Height of the span in rows
        colspan: Width of the span in columns
        covered: Coordinates turned into covered placeholders
    """
    model: GridModel
    anchor: Coordinate
    rowspan: int
    colspan: int
    covered: List[Coordinate] = field(default_factory=list)


@dataclass
class UnmergeResult:
    """Outcome of an unmerge; ``restored`` lists every slot, anchor first."""
    model: GridModel
    anchor: Coordinate
    restored: List[Coordinate] = field(default_factory=list)


class MergeEngine:
    """Turns a rectangular selection into a single span anchor."""

    def __init__(self, config: Optional[SpecTableConfig] = None):
        self.config = config or DEFAULT_SPEC_TABLE_CONFIG

    def merge(self, model: GridModel, selection: SelectionTracker) -> MergeResult:
        """Merge the selected coordinates.

        Args:
            model: Table to mutate
            selection: Coordinates to merge; cleared on success

        Only selected lines are joined into the anchor. Unselected lines inside
        the rectangle keep their text, are hidden while the span exists and
        reappear unchanged after unmerge.

        Returns:
            MergeResult describing the new span

        Raises:
            MergeError: if the selection is not a mergeable region. The model
                and the selection are left unchanged.
        """
        coordinates = selection.coordinates()
        self._check_selection(model, selection, coordinates)

        min_row, min_col, max_row, max_col = selection.bounds()
        rowspan = max_row - min_row + 1
        colspan = max_col - min_col + 1

        anchor = coordinates[0]
        parts = [model.line_at(*c).content for c in coordinates]
        content = self.config.line_break.join(part for part in parts if part)

        updates = {anchor: LineEntry(content=content, rowspan=rowspan, colspan=colspan)}
        for coordinate in coordinates[1:]:
            updates[coordinate] = LineEntry.covered()
        model.replace_lines(updates, action="merge")
        selection.clear()

        logger.debug(f"Merged {len(coordinates)} coordinates into anchor {anchor} ({rowspan}x{colspan})")
        return MergeResult(
            model=model,
            anchor=anchor,
            rowspan=rowspan,
            colspan=colspan,
            covered=coordinates[1:],
        )

    def _check_selection(
        self,
        model: GridModel,
        selection: SelectionTracker,
        coordinates: List[Coordinate]
    ) -> None:
        if not coordinates:
            raise MergeError("Nothing selected to merge")

        for coordinate in coordinates:
            if not model.has_coordinate(*coordinate):
                raise MergeError(f"Selected coordinate {coordinate} does not exist")

        if not selection.is_rectangular():
            raise MergeError("Selection is not a rectangular region")

        if len(selection.cells()) < 2:
            raise MergeError(
                "Selection lies within a single cell; lines of one cell cannot be merged"
            )

        resolver = CoverageResolver(model)
        for coordinate in coordinates:
            coverage = resolver.classify(*coordinate)
            if coverage.is_covered:
                raise MergeError(
                    f"Coordinate {coordinate} is covered by the span anchored at "
                    f"{coverage.owner}; unmerge first"
                )
            if coverage.is_anchor:
                raise MergeError(f"Coordinate {coordinate} is already a span anchor; unmerge first")


class UnmergeEngine:
    """Splits a span anchor back into standalone entries."""

    def __init__(self, config: Optional[SpecTableConfig] = None):
        self.config = config or DEFAULT_SPEC_TABLE_CONFIG

    def unmerge(self, model: GridModel, row: int, col: int, line: int) -> UnmergeResult:
        """Unmerge the span anchored at (row, col, line).

        Raises:
            StructuralError: if the coordinate does not exist
            MergeError: if the coordinate is not a span anchor
        """
        entry = model.line_at(row, col, line)
        if not entry.is_anchor:
            raise MergeError(f"Coordinate ({row}, {col}, {line}) is not a span anchor")

        anchor = (row, col, line)
        slots = [anchor]
        for r in range(row, min(row + entry.rowspan, model.num_rows)):
            for c in range(col, min(col + entry.colspan, model.num_cols)):
                for line_idx, other in enumerate(model.rows[r].cells[c].lines):
                    if other.is_covered:
                        slots.append((r, c, line_idx))

        fragments = split_content(entry.content, self.config.line_break)
        texts = distribute_fragments(fragments, len(slots), self.config.line_break)

        updates = {
            slot: LineEntry.standalone(text)
            for slot, text in zip(slots, texts)
        }
        model.replace_lines(updates, action="unmerge")

        logger.debug(f"Unmerged anchor {anchor} into {len(slots)} standalone entries")
        return UnmergeResult(model=model, anchor=anchor, restored=slots)


def merge(model: GridModel, selection: SelectionTracker, config: Optional[SpecTableConfig] = None) -> MergeResult:
    """Module-level shortcut for ``MergeEngine(config).merge(model, selection)``."""
    return MergeEngine(config).merge(model, selection)


def unmerge(
    model: GridModel,
    row: int,
    col: int,
    line: int,
    config: Optional[SpecTableConfig] = None
) -> UnmergeResult:
    """Module-level shortcut for ``UnmergeEngine(config).unmerge(...)``."""
    return UnmergeEngine(config).unmerge(model, row, col, line)
