"""Unit tests for the datetime shortcut predicate."""

from datetime import datetime, timezone

import pytest

from genquery import config
from genquery.filters import FilterClause, FilterType, Operator
from genquery.query import datetime_shortcut, filter_to_sql

from conftest import start_time

T0 = "2024-01-01T00:00:00Z"
T1 = "2024-01-31T00:00:00Z"


def test_no_start_time_filter_no_shortcut(registry):
    clauses = [FilterClause("latency", FilterType.NUMBER, Operator.GT, 1)]
    assert datetime_shortcut(clauses, registry, enabled=True) is None


def test_upper_bound_is_mirrored_onto_trace_timestamp(registry):
    """Test the mirrored predicate keeps operator and bound value."""
    frag = datetime_shortcut([start_time(Operator.LTE, T1)], registry, enabled=True)
    assert frag.sql == (
        "t.\"timestamp\" <= %(dt_1)s::timestamp with time zone at time zone 'UTC'"
    )
    assert frag.params == {"dt_1": datetime(2024, 1, 31, tzinfo=timezone.utc)}


def test_mirror_uses_same_operator_and_value_as_source(registry):
    """Test the shortcut differs from the source clause only in its column."""
    clause = start_time(Operator.LT, T1)
    source = filter_to_sql([clause], registry)
    mirror = datetime_shortcut([clause], registry, enabled=True)
    assert mirror.sql.replace('t."timestamp"', 'o."start_time"').replace("dt_1", "filter_1") == source.sql
    assert list(mirror.params.values()) == list(source.params.values())


@pytest.mark.parametrize("op", [Operator.GT, Operator.GTE])
def test_lower_bound_is_not_mirrored(registry, op):
    """Test lower bounds stay off the trace clock; they could drop older traces."""
    assert datetime_shortcut([start_time(op, T0)], registry, enabled=True) is None


def test_range_mirrors_only_its_upper_bound(registry):
    frag = datetime_shortcut(
        [start_time(Operator.GTE, T0), start_time(Operator.LTE, T1)], registry, enabled=True
    )
    assert frag.sql.startswith('t."timestamp" <= ')
    assert list(frag.params.values()) == [datetime(2024, 1, 31, tzinfo=timezone.utc)]


def test_two_upper_bounds_give_no_shortcut(registry):
    """Test the shortcut needs exactly one candidate clause."""
    clauses = [start_time(Operator.LT, T1), start_time(Operator.LTE, T0)]
    assert datetime_shortcut(clauses, registry, enabled=True) is None


def test_display_name_counts_as_start_time(registry):
    clause = FilterClause("Start Time", FilterType.DATETIME, Operator.LT, T1)
    assert datetime_shortcut([clause], registry, enabled=True) is not None


def test_disabled_by_config(registry, monkeypatch):
    monkeypatch.setattr(config, "DATETIME_SHORTCUT", False)
    assert datetime_shortcut([start_time(Operator.LT, T1)], registry) is None


def test_enabled_by_config(registry, monkeypatch):
    monkeypatch.setattr(config, "DATETIME_SHORTCUT", True)
    assert datetime_shortcut([start_time(Operator.LT, T1)], registry) is not None
