"""
Request models for the generations query service.

This module provides filter clauses, order specs, and the validated
GenerationsQuery input together with its JSON Schema.
"""

from .models import (
    FilterType,
    Operator,
    OrderDirection,
    OPERATORS_BY_TYPE,
    KEYED_TYPES,
    FilterClause,
    OrderSpec,
    GenerationsQuery,
    GENERATIONS_QUERY_SCHEMA,
    parse_generations_query_json,
)

__all__ = [
    "FilterType",
    "Operator",
    "OrderDirection",
    "OPERATORS_BY_TYPE",
    "KEYED_TYPES",
    "FilterClause",
    "OrderSpec",
    "GenerationsQuery",
    "GENERATIONS_QUERY_SCHEMA",
    "parse_generations_query_json",
]
