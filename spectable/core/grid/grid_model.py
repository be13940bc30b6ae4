# spectable/core/grid/grid_model.py
"""
Grid Model - Canonical In-Memory Spec Table

Provides the data classes for a spec table and the structural operations
an editing session may apply to it.

Module Components:
- LineEntry: one content unit inside a cell (content + rowspan/colspan)
- Cell: ordered, non-empty list of LineEntry objects
- Row: ordered list of Cell objects, index-aligned to the headers
- SpanExtent: rectangular (row, col) region owned by a span anchor
- GridModel: headers + rows with guarded mutation methods

Span flags on LineEntry:
    (1, 1)                      standalone
    rowspan > 1 or colspan > 1  span anchor (both >= 1)
    (0, 0)                      covered placeholder (content empty)

Every mutating method runs inside ``_mutation()``: the previous state is
snapshotted, the change is applied, ``validate()`` runs, and any failure
restores the snapshot before the StructuralError reaches the caller.

Usage Example:
    from spectable.core.grid.grid_model import GridModel

    model = GridModel.empty()
    model.add_row()
    model.set_line_content(0, 0, 0, "전원")
    model.add_line(0, 1, 0)
"""
import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from spectable.core.functions.utils import sanitize_text_for_json
from spectable.core.grid.grid_constants import (
    Coordinate,
    DEFAULT_SPEC_TABLE_CONFIG,
    SpecTableConfig,
    StructuralError,
)

logger = logging.getLogger("spec-table")


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class LineEntry:
    """A single line inside a cell.

    Attributes:
        content: Line text
        rowspan: 1 for standalone, > 1 for a row-spanning anchor, 0 when covered
        colspan: 1 for standalone, > 1 for a column-spanning anchor, 0 when covered
    """
    content: str = ""
    rowspan: int = 1
    colspan: int = 1

    @classmethod
    def standalone(cls, content: str = "") -> "LineEntry":
        return cls(content=content, rowspan=1, colspan=1)

    @classmethod
    def covered(cls) -> "LineEntry":
        return cls(content="", rowspan=0, colspan=0)

    @property
    def is_standalone(self) -> bool:
        return self.rowspan == 1 and self.colspan == 1

    @property
    def is_anchor(self) -> bool:
        return (
            self.rowspan >= 1 and self.colspan >= 1
            and (self.rowspan > 1 or self.colspan > 1)
        )

    @property
    def is_covered(self) -> bool:
        return self.rowspan == 0 and self.colspan == 0

    def is_valid(self) -> bool:
        """Check the content type and that the span pair is a legal combination."""
        if not isinstance(self.content, str):
            return False
        for value in (self.rowspan, self.colspan):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                return False
        if self.is_covered:
            return self.content == ""
        return self.is_standalone or self.is_anchor

    def to_dict(self) -> Dict[str, object]:
        return {"content": self.content, "rowspan": self.rowspan, "colspan": self.colspan}


@dataclass
class Cell:
    """A table cell holding one or more independent lines."""
    lines: List[LineEntry] = field(default_factory=lambda: [LineEntry()])

    def to_dict(self) -> Dict[str, object]:
        return {"lines": [line.to_dict() for line in self.lines]}


@dataclass
class Row:
    """A table row; ``cells`` is index-aligned to ``GridModel.headers``."""
    cells: List[Cell] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"cells": [cell.to_dict() for cell in self.cells]}


@dataclass(frozen=True)
class SpanExtent:
    """Rectangular (row, col) region owned by the anchor line at (row, col, line)."""
    row: int
    col: int
    line: int
    rowspan: int
    colspan: int

    @property
    def coordinate(self) -> Coordinate:
        return (self.row, self.col, self.line)

    @property
    def row_range(self) -> range:
        return range(self.row, self.row + self.rowspan)

    @property
    def col_range(self) -> range:
        return range(self.col, self.col + self.colspan)

    def contains(self, row: int, col: int) -> bool:
        return row in self.row_range and col in self.col_range

    def touches_rows(self, start: int, stop: int) -> bool:
        """True when this span covers more than one row and reaches [start, stop]."""
        return self.rowspan > 1 and self.row <= stop and start < self.row + self.rowspan

    def touches_cols(self, start: int, stop: int) -> bool:
        """True when this span covers more than one column and reaches [start, stop]."""
        return self.colspan > 1 and self.col <= stop and start < self.col + self.colspan


def _empty_cell() -> Cell:
    return Cell(lines=[LineEntry.standalone()])


# ============================================================================
# GridModel
# ============================================================================

@dataclass
class GridModel:
    """Canonical spec table: ordered headers and ordered rows of cells.

    Two models are equal when their headers and rows are equal; the
    configuration does not take part in comparison.

    Attributes:
        headers: Column labels (one per column, at least one)
        rows: Rows, each holding exactly ``len(headers)`` cells
        config: Editor configuration (labels, line break)
    """
    headers: List[str] = field(default_factory=lambda: list(DEFAULT_SPEC_TABLE_CONFIG.default_headers))
    rows: List[Row] = field(default_factory=list)
    config: SpecTableConfig = field(
        default_factory=lambda: DEFAULT_SPEC_TABLE_CONFIG, compare=False, repr=False
    )

    @classmethod
    def empty(
        cls,
        headers: Optional[List[str]] = None,
        config: Optional[SpecTableConfig] = None
    ) -> "GridModel":
        """Create a table with the given (or default) headers and zero rows."""
        config = config or DEFAULT_SPEC_TABLE_CONFIG
        return cls(
            headers=list(headers) if headers else list(config.default_headers),
            rows=[],
            config=config,
        )

    # ========================================================================
    # Read Access
    # ========================================================================

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def num_cols(self) -> int:
        return len(self.headers)

    def cell_at(self, row: int, col: int) -> Cell:
        self._check_row(row)
        self._check_col(col)
        return self.rows[row].cells[col]

    def line_at(self, row: int, col: int, line: int) -> LineEntry:
        cell = self.cell_at(row, col)
        if not 0 <= line < len(cell.lines):
            raise StructuralError(
                f"Line index {line} out of range for cell ({row}, {col}) "
                f"with {len(cell.lines)} lines"
            )
        return cell.lines[line]

    def has_coordinate(self, row: int, col: int, line: int) -> bool:
        return (
            0 <= row < self.num_rows
            and 0 <= col < self.num_cols
            and 0 <= line < len(self.rows[row].cells[col].lines)
        )

    def iter_coordinates(self) -> Iterator[Coordinate]:
        """Yield every (row, col, line) in row-major, column, line order."""
        for row_idx, row in enumerate(self.rows):
            for col_idx, cell in enumerate(row.cells):
                for line_idx in range(len(cell.lines)):
                    yield (row_idx, col_idx, line_idx)

    def anchors(self) -> List[SpanExtent]:
        """Scan the grid for span anchors, in row-major order."""
        extents = []
        for row_idx, row in enumerate(self.rows):
            for col_idx, cell in enumerate(row.cells):
                for line_idx, entry in enumerate(cell.lines):
                    if entry.is_anchor:
                        extents.append(SpanExtent(
                            row=row_idx,
                            col=col_idx,
                            line=line_idx,
                            rowspan=entry.rowspan,
                            colspan=entry.colspan,
                        ))
        return extents

    def span_containing(self, row: int, col: int) -> Optional[SpanExtent]:
        """Return the span whose extent includes (row, col), if any."""
        for extent in self.anchors():
            if extent.contains(row, col):
                return extent
        return None

    def copy(self) -> "GridModel":
        return GridModel(
            headers=list(self.headers),
            rows=copy.deepcopy(self.rows),
            config=self.config,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "headers": list(self.headers),
            "rows": [row.to_dict() for row in self.rows],
        }

    # ========================================================================
    # Validation
    # ========================================================================

    def validate(self) -> None:
        """Check every structural invariant; raise StructuralError on the first violation."""
        if not isinstance(self.headers, list) or not self.headers:
            raise StructuralError("Table must have at least one column")
        for idx, header in enumerate(self.headers):
            if not isinstance(header, str):
                raise StructuralError(f"Header {idx} is not a string: {header!r}")

        num_cols = self.num_cols
        for row_idx, row in enumerate(self.rows):
            if len(row.cells) != num_cols:
                raise StructuralError(
                    f"Row {row_idx} has {len(row.cells)} cells, expected {num_cols}"
                )
            for col_idx, cell in enumerate(row.cells):
                if not cell.lines:
                    raise StructuralError(f"Cell ({row_idx}, {col_idx}) has no lines")
                for line_idx, entry in enumerate(cell.lines):
                    if not entry.is_valid():
                        raise StructuralError(
                            f"Invalid line entry at ({row_idx}, {col_idx}, {line_idx}): {entry!r}"
                        )

        self._validate_spans()

    def _validate_spans(self) -> None:
        owner: Dict[tuple, SpanExtent] = {}
        for extent in self.anchors():
            if extent.row + extent.rowspan > self.num_rows or extent.col + extent.colspan > self.num_cols:
                raise StructuralError(
                    f"Span anchored at {extent.coordinate} extends beyond the table"
                )
            for r in extent.row_range:
                for c in extent.col_range:
                    if (r, c) in owner:
                        raise StructuralError(
                            f"Span anchored at {extent.coordinate} overlaps span "
                            f"anchored at {owner[(r, c)].coordinate}"
                        )
                    owner[(r, c)] = extent

        for row_idx, row in enumerate(self.rows):
            for col_idx, cell in enumerate(row.cells):
                for line_idx, entry in enumerate(cell.lines):
                    if entry.is_covered and (row_idx, col_idx) not in owner:
                        raise StructuralError(
                            f"Covered placeholder at ({row_idx}, {col_idx}, {line_idx}) "
                            f"has no owning span"
                        )

    @contextmanager
    def _mutation(self, action: str):
        snapshot_headers = list(self.headers)
        snapshot_rows = copy.deepcopy(self.rows)
        try:
            yield
            self.validate()
        except Exception:
            self.headers = snapshot_headers
            self.rows = snapshot_rows
            raise
        logger.debug(f"Grid mutation '{action}' applied ({self.num_rows}x{self.num_cols})")

    def clean_text(self, text: Optional[str]) -> str:
        """Text as it is stored in the model (JSON-unsafe characters removed when enabled)."""
        if self.config.sanitize_content:
            return sanitize_text_for_json(text)
        return text or ""

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.num_rows:
            raise StructuralError(f"Row index {row} out of range (0..{self.num_rows - 1})")

    def _check_col(self, col: int) -> None:
        if not 0 <= col < self.num_cols:
            raise StructuralError(f"Column index {col} out of range (0..{self.num_cols - 1})")

    def _reject_if_spanned(self, row: int, col: int, action: str) -> None:
        extent = self.span_containing(row, col)
        if extent is not None:
            raise StructuralError(
                f"Cannot {action} in merged region anchored at {extent.coordinate}; unmerge first"
            )

    # ========================================================================
    # Column Operations
    # ========================================================================

    def add_column(self, label: Optional[str] = None) -> int:
        """Append a column (with one empty line in every row); return its index."""
        with self._mutation("add_column"):
            if label is None:
                label = self.config.column_label(self.num_cols + 1)
            self.headers.append(self.clean_text(label))
            for row in self.rows:
                row.cells.append(_empty_cell())
        return self.num_cols - 1

    def remove_column(self, index: int) -> None:
        with self._mutation("remove_column"):
            self._check_col(index)
            if self.num_cols <= 1:
                raise StructuralError("Cannot remove the last column")
            for extent in self.anchors():
                if extent.touches_cols(index, index):
                    raise StructuralError(
                        f"Column {index} is part of the span anchored at "
                        f"{extent.coordinate}; unmerge first"
                    )
            del self.headers[index]
            for row in self.rows:
                del row.cells[index]

    def rename_column(self, index: int, label: str) -> None:
        with self._mutation("rename_column"):
            self._check_col(index)
            self.headers[index] = self.clean_text(label)

    def move_column(self, source: int, target: int) -> None:
        """Move a column, reordering the headers and every row's cells in lockstep."""
        with self._mutation("move_column"):
            self._check_col(source)
            self._check_col(target)
            if source == target:
                return
            low, high = min(source, target), max(source, target)
            for extent in self.anchors():
                if extent.touches_cols(low, high):
                    raise StructuralError(
                        f"Cannot move column across the span anchored at "
                        f"{extent.coordinate}; unmerge first"
                    )
            self.headers.insert(target, self.headers.pop(source))
            for row in self.rows:
                row.cells.insert(target, row.cells.pop(source))

    # ========================================================================
    # Row Operations
    # ========================================================================

    def add_row(self) -> int:
        """Append a row of empty standalone lines; return its index."""
        with self._mutation("add_row"):
            self.rows.append(Row(cells=[_empty_cell() for _ in self.headers]))
        return self.num_rows - 1

    def remove_row(self, index: int) -> None:
        with self._mutation("remove_row"):
            self._check_row(index)
            for extent in self.anchors():
                if extent.touches_rows(index, index):
                    raise StructuralError(
                        f"Row {index} is part of the span anchored at "
                        f"{extent.coordinate}; unmerge first"
                    )
            del self.rows[index]

    def move_row(self, source: int, target: int) -> None:
        with self._mutation("move_row"):
            self._check_row(source)
            self._check_row(target)
            if source == target:
                return
            low, high = min(source, target), max(source, target)
            for extent in self.anchors():
                if extent.touches_rows(low, high):
                    raise StructuralError(
                        f"Cannot move row across the span anchored at "
                        f"{extent.coordinate}; unmerge first"
                    )
            self.rows.insert(target, self.rows.pop(source))

    # ========================================================================
    # Line Operations
    # ========================================================================

    def add_line(self, row: int, col: int, after_line_index: int) -> int:
        """Insert an empty standalone line after ``after_line_index``; return its index.

        ``-1`` inserts at the top; any index at or past the last line appends.
        """
        with self._mutation("add_line"):
            cell = self.cell_at(row, col)
            if after_line_index < -1:
                raise StructuralError(f"Invalid line index {after_line_index}")
            self._reject_if_spanned(row, col, "add a line")
            position = min(after_line_index + 1, len(cell.lines))
            cell.lines.insert(position, LineEntry.standalone())
        return position

    def remove_line(self, row: int, col: int, line_index: int) -> None:
        with self._mutation("remove_line"):
            cell = self.cell_at(row, col)
            self.line_at(row, col, line_index)
            if len(cell.lines) <= 1:
                raise StructuralError(f"Cannot remove the last line of cell ({row}, {col})")
            self._reject_if_spanned(row, col, "remove a line")
            del cell.lines[line_index]

    def set_line_content(self, row: int, col: int, line_index: int, text: str) -> None:
        with self._mutation("set_line_content"):
            entry = self.line_at(row, col, line_index)
            extent = self.span_containing(row, col)
            if extent is not None and extent.coordinate != (row, col, line_index):
                raise StructuralError(
                    f"Line ({row}, {col}, {line_index}) is covered by the span anchored at "
                    f"{extent.coordinate}"
                )
            entry.content = self.clean_text(text)

    def replace_lines(self, updates: Dict[Coordinate, LineEntry], action: str = "replace_lines") -> None:
        """Swap several line entries in one guarded step (used by merge/unmerge)."""
        with self._mutation(action):
            for (row, col, line), entry in sorted(updates.items()):
                self.line_at(row, col, line)
                self.rows[row].cells[col].lines[line] = entry
