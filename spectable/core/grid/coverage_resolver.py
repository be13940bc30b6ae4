# spectable/core/grid/coverage_resolver.py
"""
Coverage Resolver - 좌표별 렌더링 상태 판정

주요 기능:
- (row, col, line) 좌표를 STANDALONE / ANCHOR / COVERED 로 분류
- 병합 영역(rowspan x colspan) 내부 좌표 숨김 판정
- 렌더링용 셀별 표시 줄 수 계산

판정 규칙:
- 좌표의 (row, col)이 어떤 anchor의 범위
  [r, r+rowspan) x [c, c+colspan) 안에 있고, 그 좌표가 anchor 자신의 줄이
  아니면 COVERED
- anchor 셀의 다른 줄, 병합된 셀의 모든 줄은 COVERED
- 그 외에는 STANDALONE

판정 결과는 저장하지 않습니다. 매 질의마다 GridModel의 rowspan/colspan
값을 다시 스캔하므로 모델과 어긋날 수 없습니다.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from spectable.core.grid.grid_constants import Coordinate, CoverageKind
from spectable.core.grid.grid_model import GridModel, SpanExtent

logger = logging.getLogger("spec-table")


@dataclass(frozen=True)
class Coverage:
    """Classification of one coordinate.

    Attributes:
        kind: STANDALONE, ANCHOR or COVERED
        rowspan: Span height for anchors, 1 for standalone, 0 when covered
        colspan: Span width for anchors, 1 for standalone, 0 when covered
        owner: Anchor coordinate hiding this one (COVERED only)
    """
    kind: CoverageKind
    rowspan: int = 1
    colspan: int = 1
    owner: Optional[Coordinate] = None

    @property
    def is_standalone(self) -> bool:
        return self.kind is CoverageKind.STANDALONE

    @property
    def is_anchor(self) -> bool:
        return self.kind is CoverageKind.ANCHOR

    @property
    def is_covered(self) -> bool:
        return self.kind is CoverageKind.COVERED

    @property
    def is_visible(self) -> bool:
        return self.kind is not CoverageKind.COVERED


STANDALONE = Coverage(CoverageKind.STANDALONE)


def _classify_against(extent: Optional[SpanExtent], coordinate: Coordinate) -> Coverage:
    if extent is None:
        return STANDALONE
    if extent.coordinate == coordinate:
        return Coverage(CoverageKind.ANCHOR, extent.rowspan, extent.colspan)
    return Coverage(CoverageKind.COVERED, 0, 0, owner=extent.coordinate)


class CoverageResolver:
    """
    Derived coverage view over a GridModel.

    The resolver holds a reference to the model, never a copy, and keeps no
    per-coordinate state: every call rescans the anchors.
    """

    def __init__(self, model: GridModel):
        self.model = model

    def anchor_for(self, row: int, col: int) -> Optional[SpanExtent]:
        """Return the span whose extent includes (row, col), if any."""
        return self.model.span_containing(row, col)

    def classify(self, row: int, col: int, line: int) -> Coverage:
        """Classify a single coordinate.

        Raises:
            StructuralError: if the coordinate does not exist
        """
        self.model.line_at(row, col, line)
        return _classify_against(self.anchor_for(row, col), (row, col, line))

    def is_covered(self, row: int, col: int, line: int) -> bool:
        return self.classify(row, col, line).is_covered

    def resolve(self) -> Dict[Coordinate, Coverage]:
        """Classify every coordinate of the model in one scan."""
        owner: Dict[tuple, SpanExtent] = {}
        for extent in self.model.anchors():
            for r in extent.row_range:
                for c in extent.col_range:
                    # first anchor wins; validated models never overlap
                    owner.setdefault((r, c), extent)

        view = {
            coordinate: _classify_against(owner.get(coordinate[:2]), coordinate)
            for coordinate in self.model.iter_coordinates()
        }
        logger.debug(f"Resolved coverage for {len(view)} coordinates, {len(set(owner.values()))} spans")
        return view

    def visible_line_count(self, row: int, col: int) -> int:
        """Number of lines rendered for a cell: 1 at an anchor cell, 0 inside a span."""
        extent = self.anchor_for(row, col)
        if extent is None:
            return len(self.model.cell_at(row, col).lines)
        return 1 if (extent.row, extent.col) == (row, col) else 0
