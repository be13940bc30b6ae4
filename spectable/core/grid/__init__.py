# spectable/core/grid/__init__.py
"""
Grid 모듈

스펙 테이블의 데이터 구조와 병합 로직을 기능별로 분리한 모듈입니다.

모듈 구성:
- grid_constants: 상수, Enum, 예외, 설정 (DEFAULT_HEADERS, CoverageKind 등)
- grid_model: GridModel / Row / Cell / LineEntry 데이터 구조 및 구조 편집
- legacy_adapter: 과거 저장 형식 정규화
- coverage_resolver: 좌표별 STANDALONE / ANCHOR / COVERED 판정
- selection_tracker: 병합 대상 좌표 선택
- merge_engine: 병합 / 병합 해제
- serializer: 저장 페이로드 변환
"""

# Constants
from spectable.core.grid.grid_constants import (
    DEFAULT_HEADERS,
    LINE_BREAK,
    Coordinate,
    CoverageKind,
    SpecTableConfig,
    DEFAULT_SPEC_TABLE_CONFIG,
    SpecTableError,
    StructuralError,
    MergeError,
    PersistenceError,
)

# Model
from spectable.core.grid.grid_model import (
    LineEntry,
    Cell,
    Row,
    SpanExtent,
    GridModel,
)

# Legacy
from spectable.core.grid.legacy_adapter import normalize

# Coverage
from spectable.core.grid.coverage_resolver import (
    Coverage,
    CoverageResolver,
)

# Selection
from spectable.core.grid.selection_tracker import SelectionTracker

# Merge
from spectable.core.grid.merge_engine import (
    MergeResult,
    UnmergeResult,
    MergeEngine,
    UnmergeEngine,
    merge,
    unmerge,
)

# Serializer
from spectable.core.grid.serializer import (
    to_json,
    from_json,
    dumps,
    loads,
)

__all__ = [
    # Constants
    "DEFAULT_HEADERS",
    "LINE_BREAK",
    "Coordinate",
    "CoverageKind",
    "SpecTableConfig",
    "DEFAULT_SPEC_TABLE_CONFIG",
    "SpecTableError",
    "StructuralError",
    "MergeError",
    "PersistenceError",
    # Model
    "LineEntry",
    "Cell",
    "Row",
    "SpanExtent",
    "GridModel",
    # Legacy
    "normalize",
    # Coverage
    "Coverage",
    "CoverageResolver",
    # Selection
    "SelectionTracker",
    # Merge
    "MergeResult",
    "UnmergeResult",
    "MergeEngine",
    "UnmergeEngine",
    "merge",
    "unmerge",
    # Serializer
    "to_json",
    "from_json",
    "dumps",
    "loads",
]
