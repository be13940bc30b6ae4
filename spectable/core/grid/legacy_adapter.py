# spectable/core/grid/legacy_adapter.py
"""
Legacy Adapter - 저장된 스펙 데이터 정규화

저장소에는 여러 세대의 스펙 테이블 형식이 섞여 있습니다.
이 모듈은 어떤 형식이 들어오더라도 정규 GridModel을 돌려주며,
절대 예외를 던지지 않습니다.

지원 형식:
- (a) 정규 형식: {headers, rows: [{cells: [{lines: [{content, rowspan, colspan}]}]}]}
- (b) 셀이 문자열 배열:   {headers, rows: [{cells: [["A", "B"], ["X"]]}]}
- (c) 셀이 문자열 lines:  {headers, rows: [{cells: [{lines: ["A", "B"]}]}]}
- 기타: None (새 표), JSON 문자열, 행 자체가 셀 배열, 셀이 단일 문자열

정규화 규칙:
- headers가 없거나 비어 있으면 기본 헤더 사용
- headers보다 넓은 행이 있으면 헤더를 생성된 라벨로 확장 (내용 보존)
- 짧은 행은 빈 셀로 채움
- 빈 lines 배열은 빈 줄 하나로 대체
- 잘못된 span 값 보정:
    ├─ 정수가 아닌 값 → 1
    ├─ 허용되지 않는 조합 (음수, (1, 0) 등) → (1, 1)
    ├─ 표 밖으로 나가는 anchor → 표 경계로 축소
    ├─ 다른 span과 겹치는 anchor → (1, 1)
    └─ 소유 anchor가 없는 (0, 0) placeholder → (1, 1)
- 알 수 없는 형식 → 원본 헤더(있으면)와 0개의 행
"""
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from spectable.core.functions.utils import coerce_span, coerce_text, sanitize_text_for_json
from spectable.core.grid.grid_constants import (
    DEFAULT_SPEC_TABLE_CONFIG,
    SpecTableConfig,
)
from spectable.core.grid.grid_model import Cell, GridModel, LineEntry, Row

logger = logging.getLogger("spec-table")


def normalize(raw: Any, config: Optional[SpecTableConfig] = None) -> GridModel:
    """
    저장된 페이로드를 정규 GridModel로 변환합니다.

    Args:
        raw: 저장소 또는 호스트가 넘겨준 값 (dict, JSON 문자열, None 등)
        config: 편집기 설정 (기본 헤더, 컬럼 라벨)

    Returns:
        검증을 통과한 GridModel (실패 시 빈 모델)
    """
    config = config or DEFAULT_SPEC_TABLE_CONFIG

    if raw is None:
        return GridModel.empty(config=config)

    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        if not raw.strip():
            return GridModel.empty(config=config)
        try:
            raw = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Spec payload is not valid JSON, opening empty table: {e}")
            return GridModel.empty(config=config)

    if not isinstance(raw, dict):
        logger.warning(f"Unsupported spec payload type {type(raw).__name__}, opening empty table")
        return GridModel.empty(config=config)

    headers = _normalize_headers(raw.get("headers"), config)

    raw_rows = raw.get("rows")
    if not isinstance(raw_rows, list):
        if raw_rows is not None:
            logger.warning(f"Spec payload rows has unsupported type {type(raw_rows).__name__}")
        return GridModel.empty(headers, config)

    try:
        clean = _text_cleaner(config)
        rows = [_normalize_row(raw_row, clean) for raw_row in raw_rows]
        headers = _align_columns(headers, rows, config)
        model = GridModel(headers=headers, rows=rows, config=config)
        _repair_spans(model)
        model.validate()
    except Exception as e:
        logger.warning(f"Failed to normalize spec payload, opening empty table: {e}")
        return GridModel.empty(headers, config)

    logger.debug(f"Normalized spec payload: {model.num_rows} rows x {model.num_cols} columns")
    return model


# ============================================================================
# Shape Normalization
# ============================================================================

def _text_cleaner(config: SpecTableConfig) -> Callable[[str], str]:
    if config.sanitize_content:
        return sanitize_text_for_json
    return lambda text: text


def _normalize_headers(raw_headers: Any, config: SpecTableConfig) -> List[str]:
    if isinstance(raw_headers, list) and raw_headers:
        clean = _text_cleaner(config)
        return [clean(coerce_text(header)) for header in raw_headers]
    return list(config.default_headers)


def _normalize_row(raw_row: Any, clean: Callable[[str], str]) -> Row:
    if isinstance(raw_row, dict):
        raw_cells = raw_row.get("cells")
    else:
        raw_cells = raw_row
    if not isinstance(raw_cells, list):
        return Row(cells=[])
    return Row(cells=[_normalize_cell(raw_cell, clean) for raw_cell in raw_cells])


def _normalize_cell(raw_cell: Any, clean: Callable[[str], str]) -> Cell:
    if isinstance(raw_cell, dict):
        raw_lines = raw_cell.get("lines")
    elif isinstance(raw_cell, list):
        # 형식 (b): 셀이 문자열 배열
        raw_lines = raw_cell
    elif isinstance(raw_cell, (str, int, float)) and not isinstance(raw_cell, bool):
        raw_lines = [raw_cell]
    else:
        raw_lines = None

    if not isinstance(raw_lines, list) or not raw_lines:
        return Cell(lines=[LineEntry.standalone()])
    return Cell(lines=[_normalize_line(raw_line, clean) for raw_line in raw_lines])


def _normalize_line(raw_line: Any, clean: Callable[[str], str]) -> LineEntry:
    if isinstance(raw_line, dict):
        return LineEntry(
            content=clean(coerce_text(raw_line.get("content"))),
            rowspan=coerce_span(raw_line.get("rowspan", 1)),
            colspan=coerce_span(raw_line.get("colspan", 1)),
        )
    return LineEntry.standalone(clean(coerce_text(raw_line)))


def _align_columns(headers: List[str], rows: List[Row], config: SpecTableConfig) -> List[str]:
    width = max([len(headers)] + [len(row.cells) for row in rows])
    if width > len(headers):
        logger.warning(f"Spec rows are wider than headers ({width} > {len(headers)}), adding columns")
        headers = headers + [config.column_label(idx + 1) for idx in range(len(headers), width)]

    padded = 0
    for row in rows:
        while len(row.cells) < width:
            row.cells.append(Cell(lines=[LineEntry.standalone()]))
            padded += 1
    if padded:
        logger.warning(f"Padded {padded} missing cells in spec payload")
    return headers


# ============================================================================
# Span Repair
# ============================================================================

def _repair_spans(model: GridModel) -> None:
    repaired = 0

    for row in model.rows:
        for cell in row.cells:
            for idx, entry in enumerate(cell.lines):
                if entry.is_valid():
                    continue
                if entry.is_covered:
                    cell.lines[idx] = LineEntry.covered()
                else:
                    cell.lines[idx] = LineEntry.standalone(entry.content)
                repaired += 1

    owner: Dict[Tuple[int, int], Tuple[int, int, int]] = {}
    for extent in model.anchors():
        entry = model.rows[extent.row].cells[extent.col].lines[extent.line]
        rowspan = min(extent.rowspan, model.num_rows - extent.row)
        colspan = min(extent.colspan, model.num_cols - extent.col)
        if (rowspan, colspan) != (extent.rowspan, extent.colspan):
            repaired += 1

        region = [
            (r, c)
            for r in range(extent.row, extent.row + rowspan)
            for c in range(extent.col, extent.col + colspan)
        ]
        if (rowspan == 1 and colspan == 1) or any(cell in owner for cell in region):
            model.rows[extent.row].cells[extent.col].lines[extent.line] = LineEntry.standalone(entry.content)
            if rowspan > 1 or colspan > 1:
                repaired += 1
            continue

        entry.rowspan = rowspan
        entry.colspan = colspan
        for cell in region:
            owner[cell] = extent.coordinate

    for row_idx, row in enumerate(model.rows):
        for col_idx, cell in enumerate(row.cells):
            for idx, entry in enumerate(cell.lines):
                if entry.is_covered and (row_idx, col_idx) not in owner:
                    cell.lines[idx] = LineEntry.standalone()
                    repaired += 1

    if repaired:
        logger.warning(f"Repaired {repaired} inconsistent span entries in spec payload")
