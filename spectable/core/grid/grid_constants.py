# spectable/core/grid/grid_constants.py
"""
Grid Constants - 스펙 테이블 공통 상수, Enum, 예외, 설정 정의

이 모듈은 grid 패키지 전반에서 사용되는 상수와 데이터 구조를 정의합니다.

Module Components:
- DEFAULT_HEADERS: 새 스펙 테이블의 기본 컬럼 (구분/사양/세부사양/비고)
- CoverageKind: 좌표 분류 결과 (STANDALONE / ANCHOR / COVERED)
- Coordinate: (row, col, line) 좌표 타입
- SpecTableConfig: 편집기 전역 설정
- SpecTableError 계열 예외
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

logger = logging.getLogger("spec-table")


# ============================================================================
# 기본값
# ============================================================================

DEFAULT_HEADERS = ['구분', '사양', '세부사양', '비고']

# 새 컬럼 라벨 (index는 1부터)
COLUMN_LABEL_TEMPLATE = "컬럼{index}"

# 병합 시 내용 연결 / 해제 시 분할 구분자
LINE_BREAK = "\n"

# (row, col, line)
Coordinate = Tuple[int, int, int]


# ============================================================================
# Enum
# ============================================================================

class CoverageKind(Enum):
    """Classification of a single (row, col, line) coordinate."""
    STANDALONE = "standalone"
    ANCHOR = "anchor"
    COVERED = "covered"


# ============================================================================
# 예외
# ============================================================================

class SpecTableError(Exception):
    """Base class for every error raised by the spec-table core."""


class StructuralError(SpecTableError):
    """
    구조 위반 (마지막 컬럼/줄 삭제, 병합 영역 절단 등).

    Raised before or instead of any state change; the GridModel is
    always left exactly as it was.
    """


class MergeError(StructuralError):
    """Merge/unmerge precondition failure."""


class PersistenceError(SpecTableError):
    """Raised by a spec store when a save or load cannot complete."""


# ============================================================================
# 설정
# ============================================================================

@dataclass
class SpecTableConfig:
    """Configuration for the spec-table editor.

    Attributes:
        default_headers: Headers of a fresh table (and fallback for payloads
            without usable headers)
        column_label_template: Label for added columns, formatted with the
            1-based column number
        line_break: Delimiter used to join merged content and split it on unmerge
        sanitize_content: Strip characters that are unsafe in JSON when text
            enters the model (edits, labels, loaded payloads)
    """
    default_headers: List[str] = field(default_factory=lambda: list(DEFAULT_HEADERS))
    column_label_template: str = COLUMN_LABEL_TEMPLATE
    line_break: str = LINE_BREAK
    sanitize_content: bool = True

    def column_label(self, index: int) -> str:
        """Label for the column that will sit at 1-based position ``index``."""
        return self.column_label_template.format(index=index)


# Default configuration
DEFAULT_SPEC_TABLE_CONFIG = SpecTableConfig()
