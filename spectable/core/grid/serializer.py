# spectable/core/grid/serializer.py
"""
Serializer - GridModel <-> 저장 페이로드 변환

Wire format (저장소에 그대로 기록되는 JSON):

    {
      "headers": ["구분", "사양"],
      "rows": [
        {"cells": [{"lines": [{"content": "A", "rowspan": 1, "colspan": 1}]}]}
      ]
    }

직렬화는 순서를 보존하며 빠짐없이 출력합니다. COVERED 좌표도
{"content": "", "rowspan": 0, "colspan": 0} placeholder로 기록되어
저장/로드 후에도 인덱스 정렬이 유지됩니다.

텍스트 정제(sanitize_text_for_json)는 모델에 들어오는 시점에 이미
적용되므로, 직렬화는 모델을 그대로 옮기기만 합니다.
"""
import json
import logging
from typing import Any, Dict, Optional

from spectable.core.grid.grid_constants import SpecTableConfig
from spectable.core.grid.grid_model import GridModel
from spectable.core.grid.legacy_adapter import normalize

logger = logging.getLogger("spec-table")


def to_json(model: GridModel) -> Dict[str, Any]:
    """
    GridModel을 저장 페이로드(dict)로 변환합니다.

    Args:
        model: 직렬화할 모델

    Returns:
        JSON 직렬화 가능한 dict (모델 내용과 동일)
    """
    return model.to_dict()


def from_json(payload: Any, config: Optional[SpecTableConfig] = None) -> GridModel:
    """저장 페이로드를 GridModel로 복원합니다 (LegacyAdapter에 위임, 예외 없음)."""
    return normalize(payload, config)


def dumps(model: GridModel, indent: Optional[int] = None) -> str:
    """GridModel을 JSON 문자열로 변환 (한글 유지)."""
    text = json.dumps(to_json(model), ensure_ascii=False, indent=indent)
    logger.debug(f"Serialized spec table: {model.num_rows} rows, {len(text)} chars")
    return text


def loads(text: str, config: Optional[SpecTableConfig] = None) -> GridModel:
    """JSON 문자열에서 GridModel 복원."""
    return from_json(text, config)
