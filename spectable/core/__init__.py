# spectable/core/__init__.py
"""
Core - 스펙 테이블 편집 핵심 모듈

이 패키지는 제품 스펙 테이블 편집기의 핵심 기능을 제공합니다.

모듈 구조:
- spec_table_editor: 메인 SpecTableEditor 클래스 (편집 세션)
- grid/: 테이블 데이터 구조와 병합 로직
    - grid_constants: 상수, 예외, 설정
    - grid_model: GridModel / Row / Cell / LineEntry
    - legacy_adapter: 과거 저장 형식 정규화
    - coverage_resolver: 좌표별 표시 상태 판정
    - selection_tracker: 병합 대상 선택
    - merge_engine: 병합 / 병합 해제
    - serializer: 저장 페이로드 변환
- functions/: 유틸리티 함수
    - utils: 텍스트 정리, 값 변환 등 공통 유틸리티
    - spec_store: 저장소 인터페이스
    - table_processor: HTML / Markdown / Text 렌더링, HTML 테이블 가져오기

사용 예시:
    from spectable.core import SpecTableEditor
    from spectable.core.grid import GridModel, SelectionTracker, merge, unmerge
    from spectable.core.functions import InMemorySpecStore
"""

# === 메인 클래스 ===
from spectable.core.spec_table_editor import SpecTableEditor

# === 렌더링 ===
from spectable.core.functions.table_processor import (
    TableOutputFormat,
    TableProcessorConfig,
    TableProcessor,
    create_table_processor,
    import_html_table,
)

# === 서브패키지 명시적 import ===
from spectable.core import grid
from spectable.core import functions

__all__ = [
    # 메인 클래스
    "SpecTableEditor",
    # 렌더링
    "TableOutputFormat",
    "TableProcessorConfig",
    "TableProcessor",
    "create_table_processor",
    "import_html_table",
    # 서브패키지
    "grid",
    "functions",
]
