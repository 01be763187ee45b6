# tests/core/test_filters.py

"""
where / filter 쿼리 파라미터 해석 (`app.core.filters`)에 대한 단위 테스트입니다.
"""

import json

import pytest
from fastapi import HTTPException

from app.core.filters import Filter, normalize_field, parse_filter, parse_where

FIELDS = ("email", "first_name", "last_name")
RELATIONS = {"userCredentials": "user_credentials"}


def test_normalize_field_accepts_camel_and_snake_case():
    assert normalize_field("firstName", FIELDS) == "first_name"
    assert normalize_field("first_name", FIELDS) == "first_name"
    assert normalize_field("email", FIELDS) == "email"


def test_normalize_field_rejects_unknown():
    with pytest.raises(HTTPException) as exc_info:
        normalize_field("password", FIELDS)
    assert exc_info.value.status_code == 400


def test_parse_where_empty():
    assert parse_where(None, FIELDS) == {}
    assert parse_where("", FIELDS) == {}


def test_parse_where_with_operators():
    raw = json.dumps({"lastName": {"neq": "Byron"}, "email": {"inq": ["a@example.com"]}})
    assert parse_where(raw, FIELDS) == {"last_name": {"neq": "Byron"}, "email": {"inq": ["a@example.com"]}}


@pytest.mark.parametrize(
    "raw",
    [
        "{",
        "[]",
        '"text"',
        '{"email": {"between": [1, 2]}}',
        '{"email": {"nin": "x"}}',
        '{"email": {}}',
        '{"email": ["a@example.com"]}',
        '{"email": {"x": 1}}',
        '{"email": {"eq": {"x": 1}}}',
        '{"lastName": {"like": ["%a%"]}}',
        '{"email": {"gt": [1]}}',
        '{"email": {"nin": [{"x": 1}]}}',
    ],
)
def test_parse_where_invalid(raw):
    with pytest.raises(HTTPException) as exc_info:
        parse_where(raw, FIELDS)
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail.startswith("Invalid filter")


def test_parse_filter_defaults():
    parsed = parse_filter(None, FIELDS, RELATIONS)
    assert parsed == Filter()
    assert parsed.limit == 100
    assert parsed.skip == 0


def test_parse_filter_full():
    raw = json.dumps({
        "where": {"firstName": "Ada"},
        "limit": 5,
        "skip": 10,
        "order": ["lastName DESC", "email"],
        "include": [{"relation": "userCredentials"}],
    })
    parsed = parse_filter(raw, FIELDS, RELATIONS)

    assert parsed.where == {"first_name": "Ada"}
    assert (parsed.limit, parsed.skip) == (5, 10)
    assert parsed.order_by(FIELDS) == [("last_name", True), ("email", False)]
    assert parsed.include == ["user_credentials"]


def test_parse_filter_order_as_string():
    parsed = parse_filter(json.dumps({"order": "email asc"}), FIELDS)
    assert parsed.order_by(FIELDS) == [("email", False)]


@pytest.mark.parametrize(
    "flt",
    [
        {"limit": 0},
        {"skip": -1},
        {"include": ["roles"]},
        {"where": {"unknown": 1}},
    ],
)
def test_parse_filter_invalid(flt):
    with pytest.raises(HTTPException) as exc_info:
        parse_filter(json.dumps(flt), FIELDS, RELATIONS)
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("order", ["email SIDEWAYS", "email ASC extra", "password"])
def test_order_by_invalid(order):
    parsed = parse_filter(json.dumps({"order": order}), FIELDS)
    with pytest.raises(HTTPException):
        parsed.order_by(FIELDS)
