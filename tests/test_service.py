"""Tests for fetching a page of generations with their scores."""

import psycopg
import pytest

from genquery.errors import SchemaResolutionError
from genquery.filters import FilterClause, FilterType, Operator
from genquery.service import get_all_generations, get_generations_count

from conftest import make_query


def test_page_with_scores(make_conn, registry, generation_rows, score_rows):
    """Test two generations, one scored, come back newest first with scores attached."""
    conn = make_conn(generation_rows, score_rows)
    result = get_all_generations(conn, make_query(page=0, limit=2), registry=registry)

    assert [g["id"] for g in result.generations] == ["g1", "g2"]
    assert [s["id"] for s in result.generations[0]["scores"]] == ["s1"]
    assert result.generations[1]["scores"] == []
    assert result.datetime_filter is None
    assert result.search_condition is None
    assert result.filter_condition is None
    assert result.page_size == 2

    page_sql, page_params = conn.executed[0]
    assert 'ORDER BY o."start_time" DESC' in page_sql
    assert page_params["limit"] == 2
    scores_sql, scores_params = conn.executed[1]
    assert scores_params == {"project_id": "proj_1", "observation_ids": ["g1", "g2"]}


def test_round_trips_are_sequential(make_conn, registry, generation_rows):
    """Test the scores query runs after, and depends on, the page query."""
    conn = make_conn(generation_rows, [])
    get_all_generations(conn, make_query(), registry=registry)
    assert len(conn.executed) == 2
    assert "FROM observations_view o" in conn.executed[0][0]
    assert "FROM scores s" in conn.executed[1][0]


def test_empty_page_skips_scores_query(make_conn, registry):
    conn = make_conn([])
    result = get_all_generations(conn, make_query(), registry=registry)
    assert result.generations == []
    assert len(conn.executed) == 1


def test_store_failure_propagates_and_aborts(make_conn, registry):
    """Test a failing page query is raised as-is and no scores query follows."""
    conn = make_conn(psycopg.OperationalError("connection lost"))
    with pytest.raises(psycopg.OperationalError):
        get_all_generations(conn, make_query(), registry=registry)
    assert len(conn.executed) == 1


def test_invalid_filter_never_reaches_store(make_conn, registry):
    """Test compile errors fail before any statement is sent."""
    conn = make_conn()
    query = make_query(filter=[FilterClause("nope", FilterType.STRING, Operator.EQ, "x")])
    with pytest.raises(SchemaResolutionError):
        get_all_generations(conn, query, registry=registry)
    assert conn.executed == []


def test_select_io_flag_reaches_statement(make_conn, registry):
    conn = make_conn([])
    get_all_generations(conn, make_query(), select_io=True, registry=registry)
    assert "o.output" in conn.executed[0][0]


def test_search_is_echoed(make_conn, registry, generation_rows):
    conn = make_conn(generation_rows[:1], [])
    result = get_all_generations(conn, make_query(search_query="gpt-4"), registry=registry)
    assert result.search_condition.params == {"search_1": "%gpt-4%"}
    assert conn.executed[0][1]["search_1"] == "%gpt-4%"


def test_count(make_conn, registry):
    conn = make_conn([{"totalCount": 7}])
    assert get_generations_count(conn, make_query(), registry=registry) == 7
    assert "count(*)" in conn.executed[0][0]
