"""Tests for parsing generations requests."""

import jsonschema
import pytest

from genquery.filters import (
    FilterType,
    Operator,
    OrderDirection,
    parse_generations_query_json,
)


def test_parse_full_payload():
    """Test camelCase JSON becomes a GenerationsQuery."""
    query = parse_generations_query_json(
        {
            "projectId": "proj_1",
            "page": 2,
            "limit": 25,
            "searchQuery": "gpt-4",
            "filter": [
                {"column": "startTime", "type": "datetime", "operator": ">=", "value": "2024-01-01T00:00:00Z"},
                {"column": "metadata", "type": "stringObject", "operator": "contains", "key": "env", "value": "prod"},
            ],
            "orderBy": {"column": "latency", "order": "desc"},
            "selectIO": True,
        }
    )
    assert query.project_id == "proj_1"
    assert (query.page, query.limit) == (2, 25)
    assert query.search_query == "gpt-4"
    assert query.filter[0].type is FilterType.DATETIME
    assert query.filter[0].operator is Operator.GTE
    assert query.filter[1].key == "env"
    assert query.order_by.column == "latency"
    assert query.order_by.order is OrderDirection.DESC
    assert query.select_io is True


def test_parse_json_string_with_defaults():
    query = parse_generations_query_json('{"projectId": "proj_1", "orderBy": null}')
    assert query.page == 0
    assert query.filter == []
    assert query.order_by.column is None
    assert query.search_query is None


def test_round_trip_dict():
    payload = {
        "projectId": "proj_1",
        "page": 0,
        "limit": 10,
        "searchQuery": None,
        "filter": [{"column": "level", "type": "stringOptions", "operator": "any of", "value": ["ERROR"]}],
        "orderBy": {"column": None, "order": None},
        "selectIO": False,
    }
    assert parse_generations_query_json(payload).to_dict() == payload


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"projectId": ""},
        {"projectId": "p", "page": -1},
        {"projectId": "p", "limit": 0},
        {"projectId": "p", "filter": [{"column": "x", "type": "geo", "operator": "=", "value": 1}]},
        {"projectId": "p", "filter": [{"column": "x", "type": "string", "operator": "LIKE", "value": "a"}]},
        {"projectId": "p", "filter": [{"column": "level", "type": "stringOptions", "operator": "any of", "value": "ERROR"}]},
        {"projectId": "p", "filter": [{"column": "metadata", "type": "stringObject", "operator": "=", "value": "a"}]},
        {"projectId": "p", "orderBy": {"column": "latency", "order": "sideways"}},
        {"projectId": "p", "unexpected": True},
    ],
)
def test_malformed_payload_rejected(payload):
    """Test the JSON Schema rejects malformed requests."""
    with pytest.raises(jsonschema.ValidationError):
        parse_generations_query_json(payload)
