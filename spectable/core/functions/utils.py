# spectable/core/functions/utils.py
"""
스펙 테이블 공통 유틸리티 모듈
"""
import logging
import re
from typing import Any, List, Optional

logger = logging.getLogger("spec-table")


def sanitize_text_for_json(text: Optional[str]) -> str:
    """
    텍스트를 UTF-8 JSON 페이로드에 안전하게 저장할 수 있도록 정제합니다.

    다음 문자들을 제거합니다:
    - 짝이 맞지 않는 서로게이트 (U+D800-U+DFFF)
    - Private Use Area 문자 (U+E000-U+F8FF, U+F0000 이상)
    - 비문자 코드 포인트 (U+FFFE, U+FFFF)
    - 탭, 개행, 캐리지 리턴을 제외한 제어 문자

    Args:
        text: 잘못된 문자가 포함될 수 있는 입력 텍스트

    Returns:
        JSON 인코딩에 안전한 정제된 텍스트
    """
    if not text:
        return ""

    result = []
    for char in text:
        code = ord(char)
        if 0xD800 <= code <= 0xDFFF:
            continue
        if 0xE000 <= code <= 0xF8FF or code >= 0xF0000:
            continue
        if code in (0xFFFE, 0xFFFF):
            continue
        if code < 32 and code not in (9, 10, 13):
            continue
        result.append(char)

    return ''.join(result)


def clean_cell_text(text: Optional[str], collapse_whitespace: bool = True) -> str:
    """셀 내용 정리 (공백 정규화). 렌더링 출력에서만 사용합니다."""
    if not text:
        return ""
    if collapse_whitespace:
        text = re.sub(r'[ \t\r\f\v]+', ' ', text)
        text = re.sub(r' *\n *', '\n', text)
    return text.strip()


def coerce_text(value: Any) -> str:
    """레거시 페이로드 값을 문자열로 변환 (None → "")."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def coerce_span(value: Any, default: int = 1) -> int:
    """rowspan/colspan 값을 정수로 변환. 변환할 수 없으면 default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def split_content(content: str, line_break: str = "\n") -> List[str]:
    """병합된 내용을 줄바꿈 기준으로 분할. 빈 내용은 조각이 없습니다."""
    if not content:
        return []
    return content.split(line_break)


def distribute_fragments(fragments: List[str], slot_count: int, line_break: str = "\n") -> List[str]:
    """
    조각을 slot_count개의 자리에 순서대로 배분합니다.

    조각이 자리보다 많으면 마지막 자리에 남은 조각을 다시 연결하고,
    적으면 남는 자리를 빈 문자열로 채웁니다.
    """
    if slot_count <= 0:
        return []
    if len(fragments) > slot_count:
        head = fragments[:slot_count - 1]
        tail = line_break.join(fragments[slot_count - 1:])
        return head + [tail]
    return list(fragments) + [""] * (slot_count - len(fragments))
