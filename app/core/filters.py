# app/core/filters.py

"""
목록/개수/일괄수정 엔드포인트가 받는 `where`, `filter` 쿼리 파라미터를 해석하는 모듈입니다.

- where:  {"firstName": "Ada", "lastName": {"neq": "Byron"}}
- filter: {"where": {...}, "limit": 10, "skip": 0, "order": "firstName DESC", "include": ["userCredentials"]}

필드명은 camelCase(API)와 snake_case(모델) 모두 허용하며, 모델 속성명으로 정규화합니다.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from fastapi import HTTPException, status
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.alias_generators import to_snake

# crud_base가 지원하는 비교 연산자 목록
WHERE_OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "inq", "nin", "like"}


def _invalid_filter(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid filter: {detail}")


def _load_json(raw: str, name: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        raise _invalid_filter(f"'{name}' must be a JSON object")


def normalize_field(name: str, fields: Iterable[str]) -> str:
    """camelCase 또는 snake_case 필드명을 모델 속성명으로 바꿉니다."""
    allowed = set(fields)
    if name in allowed:
        return name
    snake = to_snake(name)
    if snake in allowed:
        return snake
    raise _invalid_filter(f"unknown field '{name}'")


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def normalize_where(where: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """
    where 절의 키를 정규화하고 연산자와 피연산자 타입을 검증합니다.
    조건을 만들지 않는 빈 연산자 객체와 스칼라가 아닌 피연산자는 거부합니다.
    """
    fields = list(fields)
    normalized: Dict[str, Any] = {}
    for key, value in where.items():
        if isinstance(value, dict):
            if not value:
                raise _invalid_filter(f"empty operator object on '{key}'")
            unknown = set(value) - WHERE_OPERATORS
            if unknown:
                raise _invalid_filter(f"unsupported operator(s) {sorted(unknown)} on '{key}'")
            for op, operand in value.items():
                if op in ("inq", "nin"):
                    if not isinstance(operand, list) or not all(_is_scalar(item) for item in operand):
                        raise _invalid_filter(f"'{op}' on '{key}' expects a list of scalar values")
                elif not _is_scalar(operand):
                    raise _invalid_filter(f"'{op}' on '{key}' expects a scalar value")
        elif not _is_scalar(value):
            raise _invalid_filter(f"'{key}' expects a scalar value or an operator object")
        normalized[normalize_field(key, fields)] = value
    return normalized


def parse_where(raw: Optional[str], fields: Iterable[str]) -> Dict[str, Any]:
    """JSON 문자열 where 파라미터를 필터 딕셔너리로 변환합니다."""
    if not raw:
        return {}
    where = _load_json(raw, "where")
    if not isinstance(where, dict):
        raise _invalid_filter("'where' must be a JSON object")
    return normalize_where(where, fields)


class Filter(BaseModel):
    """목록 조회용 필터"""
    where: Dict[str, Any] = Field(default_factory=dict)
    limit: int = Field(100, ge=1)
    skip: int = Field(0, ge=0)
    order: List[str] = Field(default_factory=list)
    include: List[str] = Field(default_factory=list)

    @field_validator("order", mode="before")
    @classmethod
    def split_order(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("include", mode="before")
    @classmethod
    def relation_names(cls, v: Any) -> Any:
        if isinstance(v, (str, dict)):
            v = [v]
        if isinstance(v, list):
            return [item.get("relation") if isinstance(item, dict) else item for item in v]
        return v

    def order_by(self, fields: Iterable[str]) -> List[Tuple[str, bool]]:
        """order 항목을 (속성명, 내림차순 여부) 목록으로 변환합니다."""
        fields = list(fields)
        result: List[Tuple[str, bool]] = []
        for item in self.order:
            parts = item.split()
            if not parts or len(parts) > 2:
                raise _invalid_filter(f"bad order clause '{item}'")
            direction = parts[1].upper() if len(parts) == 2 else "ASC"
            if direction not in ("ASC", "DESC"):
                raise _invalid_filter(f"bad order direction '{parts[1]}'")
            result.append((normalize_field(parts[0], fields), direction == "DESC"))
        return result


def parse_filter(
    raw: Optional[str],
    fields: Iterable[str],
    relations: Union[Dict[str, str], None] = None,
) -> Filter:
    """
    JSON 문자열 filter 파라미터를 Filter 객체로 변환합니다.
    relations는 API 관계명 -> 모델 관계 속성명 매핑입니다.
    """
    fields = list(fields)
    relations = relations or {}
    if not raw:
        return Filter()
    data = _load_json(raw, "filter")
    if not isinstance(data, dict):
        raise _invalid_filter("'filter' must be a JSON object")
    try:
        parsed = Filter.model_validate(data)
    except ValidationError as e:
        raise _invalid_filter(str(e.errors()[0]["msg"]))

    parsed.where = normalize_where(parsed.where, fields)

    include: List[str] = []
    for name in parsed.include:
        if name not in relations:
            raise _invalid_filter(f"unknown relation '{name}'")
        include.append(relations[name])
    parsed.include = include
    return parsed
