"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from genquery import config
from genquery.filters import FilterClause, FilterType, GenerationsQuery, Operator
from genquery.registry import ColumnRegistry


class FakeCursor:
    """Minimal psycopg cursor: records statements, returns queued rows."""

    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        if not self.conn.results:
            raise AssertionError(f"unexpected statement: {sql}")
        result = self.conn.results.pop(0)
        if isinstance(result, Exception):
            raise result
        self._rows = result
        self.description = [("column",)]

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self, *results):
        self.results = list(results)
        self.executed = []

    def cursor(self):
        return FakeCursor(self)


@pytest.fixture
def registry():
    return ColumnRegistry.load(config.COLUMNS_FILE)


@pytest.fixture
def make_conn():
    return FakeConnection


def start_time(op, value):
    return FilterClause("startTime", FilterType.DATETIME, op, value)


def make_query(**kwargs):
    kwargs.setdefault("project_id", "proj_1")
    return GenerationsQuery(**kwargs)


@pytest.fixture
def generation_rows():
    return [
        {
            "id": "g1",
            "name": "chat",
            "model": "gpt-4",
            "startTime": datetime(2024, 1, 2, 12, 0),
            "traceId": "t1",
            "traceName": "support-bot",
        },
        {
            "id": "g2",
            "name": "summarize",
            "model": "claude",
            "startTime": datetime(2024, 1, 1, 12, 0),
            "traceId": "t2",
            "traceName": "digest",
        },
    ]


@pytest.fixture
def score_rows():
    return [
        {
            "id": "s1",
            "name": "quality",
            "value": 0.9,
            "traceId": "t1",
            "observationId": "g1",
            "projectId": "proj_1",
        },
    ]


