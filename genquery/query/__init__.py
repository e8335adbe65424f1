"""
SQL construction for the generations query service.

This module compiles filters, ordering, free-text search and the
datetime shortcut into bound-parameter fragments and assembles them
into the generations statement.
"""

from .fragments import SqlFragment, join_fragments, fragment_dict
from .filters import filter_to_sql, clause_to_sql
from .order import order_by_to_sql, default_order_by
from .search import search_to_sql
from .shortcut import datetime_shortcut
from .builder import (
    GenerationsStatement,
    build_generations_query,
    build_generations_count_query,
)

__all__ = [
    "SqlFragment",
    "join_fragments",
    "fragment_dict",
    "filter_to_sql",
    "clause_to_sql",
    "order_by_to_sql",
    "default_order_by",
    "search_to_sql",
    "datetime_shortcut",
    "GenerationsStatement",
    "build_generations_query",
    "build_generations_count_query",
]
