from .. import config
from ..errors import QueryValidationError, TypeMismatchError
from ..filters import FilterClause, GenerationsQuery, KEYED_TYPES
from ..registry import ColumnDefinition, ColumnRegistry

# Postgres bigint, the type of OFFSET
_MAX_OFFSET = 2**63 - 1


def _assert_pagination(page: int, limit: int) -> None:
    if isinstance(page, bool) or not isinstance(page, int) or page < 0:
        raise QueryValidationError(f"page must be a non-negative integer, got {page!r}")
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise QueryValidationError(f"limit must be a positive integer, got {limit!r}")
    if page * _cap_page_size(limit) > _MAX_OFFSET:
        raise QueryValidationError(f"page {page} is past the last addressable row")


def _cap_page_size(limit: int) -> int:
    return min(limit, config.GLOBAL_MAX_PAGE_SIZE)


def _assert_clause_allowed(clause: FilterClause, reg: ColumnRegistry) -> ColumnDefinition:
    col = reg.resolve(clause.column)
    if clause.type is not col.type:
        raise TypeMismatchError(
            f"Filter on {col.id} has type {clause.type.value}, column is {col.type.value}"
        )
    if clause.operator not in col.operators:
        raise TypeMismatchError(
            f"Operator {clause.operator.value!r} not allowed on {col.type.value} column {col.id}"
        )
    if col.type in KEYED_TYPES and not clause.key:
        raise TypeMismatchError(f"Filter on {col.id} requires a key")
    return col


def _assert_filters_allowed(query: GenerationsQuery, reg: ColumnRegistry) -> None:
    for clause in query.filter:
        _assert_clause_allowed(clause, reg)


def _assert_sort_allowed(query: GenerationsQuery, reg: ColumnRegistry) -> None:
    if query.order_by.column:
        reg.resolve(query.order_by.column)
