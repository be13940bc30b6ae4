# spectable/core/grid/selection_tracker.py
"""
Selection Tracker - 병합 대상 좌표 선택 관리

사용자가 하나씩 토글한 (row, col, line) 좌표 집합을 보관하고,
현재 선택이 직사각형 병합 영역을 이루는지 판단합니다.
"""
import logging
from typing import Iterable, List, Optional, Set, Tuple

from spectable.core.grid.grid_constants import Coordinate

logger = logging.getLogger("spec-table")


class SelectionTracker:
    """Set of coordinates marked by the user for merging."""

    def __init__(self, coordinates: Optional[Iterable[Coordinate]] = None):
        self._selected: Set[Coordinate] = set()
        for coordinate in coordinates or ():
            self.add(*coordinate)

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._selected

    def __iter__(self):
        return iter(self.coordinates())

    def add(self, row: int, col: int, line: int) -> None:
        self._selected.add((row, col, line))

    def discard(self, row: int, col: int, line: int) -> None:
        self._selected.discard((row, col, line))

    def toggle(self, row: int, col: int, line: int) -> bool:
        """Flip one coordinate; return True if it is now selected."""
        coordinate = (row, col, line)
        if coordinate in self._selected:
            self._selected.remove(coordinate)
            selected = False
        else:
            self._selected.add(coordinate)
            selected = True
        logger.debug(f"Selection toggled {coordinate} -> {selected} ({len(self._selected)} selected)")
        return selected

    def clear(self) -> None:
        self._selected.clear()

    def coordinates(self) -> List[Coordinate]:
        """Selected coordinates in (row, col, line) order."""
        return sorted(self._selected)

    def cells(self) -> Set[Tuple[int, int]]:
        """(row, col) projection of the selection."""
        return {(row, col) for row, col, _ in self._selected}

    def bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """(min_row, min_col, max_row, max_col) of the selection, or None when empty."""
        if not self._selected:
            return None
        rows = [row for row, _, _ in self._selected]
        cols = [col for _, col, _ in self._selected]
        return (min(rows), min(cols), max(rows), max(cols))

    def is_rectangular(self) -> bool:
        """
        True iff the (row, col) projection is exactly a contiguous row range
        times a contiguous column range (no gaps, no L-shapes).
        """
        bounds = self.bounds()
        if bounds is None:
            return False
        min_row, min_col, max_row, max_col = bounds
        expected = (max_row - min_row + 1) * (max_col - min_col + 1)
        # every projected cell lies inside the bounding box, so equal counts
        # mean the box is completely filled
        return len(self.cells()) == expected

    def can_merge(self) -> bool:
        """Whether the merge action should be offered for the current selection."""
        return len(self._selected) >= 2 and self.is_rectangular()
