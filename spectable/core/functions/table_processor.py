# spectable/core/functions/table_processor.py
"""
Table Processor - Spec Table Rendering Module

Renders the coverage-resolved view of a GridModel as HTML, Markdown or
plain text, and imports an existing HTML table into a GridModel.

================================================================================
TABLE PROCESSOR ARCHITECTURE
================================================================================

Main Entry Point:
    format_table(model: GridModel) → str

Internal Processing Functions (called from format_table):
    ├─ build_layout()             - 논리 행 → 렌더링 행 배치 (CoverageResolver 기반)
    ├─ format_table_as_html()     - HTML 변환 (rowspan/colspan 지원)
    ├─ format_table_as_markdown() - Markdown 변환 (병합 평탄화)
    └─ format_table_as_text()     - Text 변환 (탭 구분)

Import:
    └─ import_html_table()        - HTML <table> → GridModel (BeautifulSoup)

================================================================================
LAYOUT
================================================================================

각 논리 행은 가장 많은 줄을 가진 (보이는) 셀의 줄 수만큼 렌더링 행으로
펼쳐집니다. 줄이 부족한 셀은 빈 가상 셀로 채워집니다.

    논리 행 0: 셀0 = [A, B], 셀1 = [X]
    ┌───┬───┐
    │ A │ X │   렌더링 행 0
    ├───┼───┤
    │ B │   │   렌더링 행 1 (셀1은 가상 셀)
    └───┴───┘

span anchor는 span이 걸친 논리 행들의 렌더링 행 수 합계를 rowspan으로,
컬럼 수를 colspan으로 출력하고, COVERED 좌표는 출력하지 않습니다.

================================================================================
OUTPUT FORMAT COMPARISON
================================================================================

| Format   | Use Case                    | Merge Support | Lines      |
|----------|-----------------------------|---------------|------------|
| HTML     | 제품 상세 페이지 렌더링      | ✅ 완전 지원   | 렌더링 행  |
| Markdown | 문서 편집기, 미리보기        | ❌ 평탄화      | <br> 연결  |
| Text     | 검색 인덱싱, 로깅            | ❌ 평탄화      | " / " 연결 |

================================================================================
"""
import html
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from spectable.core.functions.utils import clean_cell_text, coerce_span
from spectable.core.grid.coverage_resolver import CoverageResolver
from spectable.core.grid.grid_constants import DEFAULT_SPEC_TABLE_CONFIG, SpecTableConfig
from spectable.core.grid.grid_model import GridModel, SpanExtent
from spectable.core.grid.legacy_adapter import normalize

logger = logging.getLogger("spec-table")


class TableOutputFormat(Enum):
    """Table output format options."""
    HTML = "html"
    MARKDOWN = "markdown"
    TEXT = "text"


@dataclass
class TableProcessorConfig:
    """Configuration for table rendering.

    Attributes:
        output_format: HTML, MARKDOWN or TEXT
        clean_whitespace: Collapse runs of spaces inside each line
        render_virtual_cells: Fill short cells with empty cells; when False the
            last line of a short cell is stretched with rowspan instead
        html_line_break: Markup used for line breaks inside HTML cells
        text_line_separator: Separator between lines in Markdown/Text output
    """
    output_format: TableOutputFormat = TableOutputFormat.HTML
    clean_whitespace: bool = True
    render_virtual_cells: bool = True
    html_line_break: str = "<br>"
    text_line_separator: str = " / "


@dataclass
class RenderedCell:
    """One output cell of the rendered grid.

    Attributes:
        row: Logical row index
        col: Column index
        line: Line index inside the cell (-1 for virtual cells)
        content: Cell text
        rowspan: Rendered rows covered by this output cell
        colspan: Columns covered by this output cell
        is_virtual: True for filler cells that have no line behind them
    """
    row: int
    col: int
    line: int
    content: str
    rowspan: int = 1
    colspan: int = 1
    is_virtual: bool = False


class TableProcessor:
    """
    Main spec table rendering class.

    ============================================================================
    CLASS STRUCTURE
    ============================================================================

    Public Methods:
        format_table()             ← Main Entry Point (config.output_format으로 분기)
        build_layout()             ← 렌더링 행 배치
        format_table_as_html()
        format_table_as_markdown()
        format_table_as_text()

    Private Methods:
        _clean_cell_content()      ← 공통 유틸 (셀 내용 정리)
        _logical_cell_text()       ← Markdown/Text 용 평탄화

    ============================================================================
    """

    def __init__(self, config: Optional[TableProcessorConfig] = None):
        self.config = config or TableProcessorConfig()
        self.logger = logging.getLogger("spec-table")

    def format_table(self, model: GridModel) -> str:
        """
        Main entry point for table formatting.

        Args:
            model: GridModel to render

        Returns:
            Formatted string (HTML/Markdown/Text)
        """
        if self.config.output_format == TableOutputFormat.HTML:
            return self.format_table_as_html(model)
        elif self.config.output_format == TableOutputFormat.MARKDOWN:
            return self.format_table_as_markdown(model)
        else:
            return self.format_table_as_text(model)

    # ==========================================================================
    # build_layout() - 렌더링 행 배치
    # ==========================================================================

    def build_layout(self, model: GridModel) -> List[List[RenderedCell]]:
        """
        Expand logical rows into rendered rows.

        Coverage is resolved freshly from the model on every call.
        """
        resolver = CoverageResolver(model)
        owner: Dict[Tuple[int, int], SpanExtent] = {}
        for extent in model.anchors():
            for r in extent.row_range:
                for c in extent.col_range:
                    owner.setdefault((r, c), extent)

        heights = []
        for row_idx in range(model.num_rows):
            visible = [resolver.visible_line_count(row_idx, col_idx) for col_idx in range(model.num_cols)]
            heights.append(max([1] + visible))

        layout: List[List[RenderedCell]] = []
        for row_idx, row in enumerate(model.rows):
            height = heights[row_idx]
            for sub_idx in range(height):
                rendered_row: List[RenderedCell] = []
                for col_idx, cell in enumerate(row.cells):
                    extent = owner.get((row_idx, col_idx))
                    if extent is not None:
                        if (extent.row, extent.col) != (row_idx, col_idx) or sub_idx > 0:
                            continue
                        entry = cell.lines[extent.line]
                        last_row = min(extent.row + extent.rowspan, model.num_rows)
                        rendered_row.append(RenderedCell(
                            row=row_idx,
                            col=col_idx,
                            line=extent.line,
                            content=entry.content,
                            rowspan=sum(heights[extent.row:last_row]),
                            colspan=min(extent.colspan, model.num_cols - col_idx),
                        ))
                        continue

                    line_count = len(cell.lines)
                    if sub_idx < line_count:
                        rowspan = 1
                        if not self.config.render_virtual_cells and sub_idx == line_count - 1:
                            rowspan = height - sub_idx
                        rendered_row.append(RenderedCell(
                            row=row_idx,
                            col=col_idx,
                            line=sub_idx,
                            content=cell.lines[sub_idx].content,
                            rowspan=rowspan,
                        ))
                    elif self.config.render_virtual_cells:
                        rendered_row.append(RenderedCell(
                            row=row_idx, col=col_idx, line=-1, content="", is_virtual=True
                        ))
                layout.append(rendered_row)

        self.logger.debug(f"Built layout: {model.num_rows} logical rows → {len(layout)} rendered rows")
        return layout

    # ==========================================================================
    # format_table_as_html() - HTML 변환
    # ==========================================================================

    def format_table_as_html(self, model: GridModel) -> str:
        """
        Convert GridModel to HTML string.

        Features:
        - header row as <th>
        - rowspan/colspan for merged spans and stretched lines
        - line breaks inside content as config.html_line_break
        """
        if not model.headers:
            return ""

        html_parts = ["<table>", "  <tr>"]
        for header in model.headers:
            html_parts.append(f"    <th>{html.escape(header)}</th>")
        html_parts.append("  </tr>")

        for rendered_row in self.build_layout(model):
            html_parts.append("  <tr>")
            for cell in rendered_row:
                attrs = []
                if cell.rowspan > 1:
                    attrs.append(f'rowspan="{cell.rowspan}"')
                if cell.colspan > 1:
                    attrs.append(f'colspan="{cell.colspan}"')
                attr_str = " " + " ".join(attrs) if attrs else ""

                content = html.escape(self._clean_cell_content(cell.content))
                content = content.replace("\n", self.config.html_line_break)
                html_parts.append(f"    <td{attr_str}>{content}</td>")
            html_parts.append("  </tr>")

        html_parts.append("</table>")
        return "\n".join(html_parts)

    # ==========================================================================
    # format_table_as_markdown() - Markdown 변환
    # ==========================================================================

    def format_table_as_markdown(self, model: GridModel) -> str:
        """
        Convert GridModel to Markdown string.

        Note: Markdown does NOT support rowspan/colspan. Each logical row is one
        Markdown row; covered cells are left empty.
        """
        if not model.headers:
            return ""

        def escape(text: str) -> str:
            return text.replace("|", "\\|")

        lines = [
            "| " + " | ".join(escape(header) for header in model.headers) + " |",
            "| " + " | ".join(["---"] * model.num_cols) + " |",
        ]
        resolver = CoverageResolver(model)
        for row_idx in range(model.num_rows):
            cells = [
                escape(self._logical_cell_text(model, resolver, row_idx, col_idx, "<br>"))
                for col_idx in range(model.num_cols)
            ]
            lines.append("| " + " | ".join(cells) + " |")

        return "\n".join(lines)

    # ==========================================================================
    # format_table_as_text() - Text 변환
    # ==========================================================================

    def format_table_as_text(self, model: GridModel) -> str:
        """
        Convert GridModel to plain text string (tab separated).

        Note: No table structure preserved. Useful for search indexing.
        """
        if not model.headers:
            return ""

        lines = ["\t".join(model.headers)]
        resolver = CoverageResolver(model)
        for row_idx in range(model.num_rows):
            cells = [
                self._logical_cell_text(model, resolver, row_idx, col_idx, self.config.text_line_separator)
                for col_idx in range(model.num_cols)
            ]
            lines.append("\t".join(cells))

        return "\n".join(lines)

    # ==========================================================================
    # 공통 유틸리티
    # ==========================================================================

    def _logical_cell_text(
        self,
        model: GridModel,
        resolver: CoverageResolver,
        row: int,
        col: int,
        separator: str
    ) -> str:
        parts = []
        for line_idx, entry in enumerate(model.cell_at(row, col).lines):
            if resolver.classify(row, col, line_idx).is_covered:
                continue
            content = self._clean_cell_content(entry.content)
            if content:
                parts.append(content.replace("\n", separator))
        return separator.join(parts)

    def _clean_cell_content(self, content: str) -> str:
        return clean_cell_text(content, self.config.clean_whitespace)


def create_table_processor(config: Optional[TableProcessorConfig] = None) -> TableProcessor:
    """
    Factory function to create a TableProcessor.

    Args:
        config: Table rendering configuration

    Returns:
        Configured TableProcessor instance
    """
    return TableProcessor(config)


# ============================================================================
# HTML Import
# ============================================================================

# HTML span limits (WHATWG table model)
HTML_MAX_COLSPAN = 1000
HTML_MAX_ROWSPAN = 65534


def _span_attr(tag, name: str, limit: int) -> int:
    return min(max(1, coerce_span(tag.get(name), 1)), limit)


def _cell_text(tag) -> str:
    for br in tag.find_all("br"):
        br.replace_with("\n")
    lines = [line.strip() for line in tag.get_text().split("\n")]
    return "\n".join(lines).strip()


def import_html_table(html_content: str, config: Optional[SpecTableConfig] = None) -> Optional[GridModel]:
    """
    HTML 조각의 첫 번째 <table>을 GridModel로 변환합니다.

    첫 행이 <th>로만 구성되어 있으면 헤더로 사용하고, 아니면 컬럼 라벨을
    생성합니다. rowspan/colspan은 span anchor와 COVERED placeholder로
    변환되며 결과는 LegacyAdapter로 정규화됩니다.

    Args:
        html_content: HTML 문자열 (리치 텍스트 본문 등)
        config: 편집기 설정

    Returns:
        GridModel 또는 None (테이블이 없는 경우)
    """
    config = config or DEFAULT_SPEC_TABLE_CONFIG
    soup = BeautifulSoup(html_content or "", "html.parser")
    table = soup.find("table")
    if table is None:
        logger.warning("No <table> found in HTML content")
        return None

    rows = [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]

    headers: Optional[List[str]] = None
    if rows:
        first_cells = rows[0].find_all(["td", "th"], recursive=False)
        if first_cells and all(cell.name == "th" for cell in first_cells):
            headers = []
            for cell in first_cells:
                label = _cell_text(cell)
                headers.extend([label] * _span_attr(cell, "colspan", HTML_MAX_COLSPAN))
            rows = rows[1:]

    occupied: Dict[Tuple[int, int], Dict[str, object]] = {}
    width = len(headers) if headers else 0
    for row_idx, tr in enumerate(rows):
        col_idx = 0
        for cell in tr.find_all(["td", "th"], recursive=False):
            while (row_idx, col_idx) in occupied:
                col_idx += 1
            # rows past the end of the table are never emitted
            rowspan = min(_span_attr(cell, "rowspan", HTML_MAX_ROWSPAN), len(rows) - row_idx)
            colspan = _span_attr(cell, "colspan", HTML_MAX_COLSPAN)
            for dr in range(rowspan):
                for dc in range(colspan):
                    occupied[(row_idx + dr, col_idx + dc)] = {"content": "", "rowspan": 0, "colspan": 0}
            occupied[(row_idx, col_idx)] = {
                "content": _cell_text(cell),
                "rowspan": rowspan,
                "colspan": colspan,
            }
            col_idx += colspan
        width = max(width, col_idx)

    width = max(width, 1)
    if headers is None:
        headers = [config.column_label(idx + 1) for idx in range(width)]

    payload = {
        "headers": headers,
        "rows": [
            {
                "cells": [
                    {"lines": [occupied.get((row_idx, col_idx), {"content": "", "rowspan": 1, "colspan": 1})]}
                    for col_idx in range(width)
                ]
            }
            for row_idx in range(len(rows))
        ],
    }
    model = normalize(payload, config)
    logger.info(f"Imported HTML table: {model.num_rows} rows x {model.num_cols} columns")
    return model


# Default configuration
DEFAULT_PROCESSOR_CONFIG = TableProcessorConfig()
