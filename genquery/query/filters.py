from __future__ import annotations
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..errors import TypeMismatchError
from ..filters import FilterClause, FilterType, KEYED_TYPES, OPERATORS_BY_TYPE, Operator
from ..registry import ColumnRegistry
from ..validation import _assert_clause_allowed
from .fragments import SqlFragment, _ParamSink, _escape_like

# operator -> SQL comparison; SQL operators come from here, never from input
_COMPARISONS: Dict[Operator, str] = {
    Operator.EQ: "=",
    Operator.NE: "<>",
    Operator.GT: ">",
    Operator.LT: "<",
    Operator.GTE: ">=",
    Operator.LTE: "<=",
}

# fromisoformat on 3.10 only takes 3 or 6 fraction digits
_FRACTION = re.compile(r"([T ]\d{2}:\d{2}:\d{2})\.(\d+)")

# operator -> (LIKE keyword, pattern template)
_LIKES: Dict[Operator, Tuple[str, str]] = {
    Operator.CONTAINS: ("ILIKE", "%{}%"),
    Operator.NOT_CONTAINS: ("NOT ILIKE", "%{}%"),
    Operator.STARTS_WITH: ("ILIKE", "{}%"),
    Operator.ENDS_WITH: ("ILIKE", "%{}"),
}


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        try:
            text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6]:0<6}", value)
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise TypeMismatchError(f"Not an ISO-8601 datetime: {value!r}") from None
    if not isinstance(value, datetime):
        raise TypeMismatchError(f"Expected a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(f"Expected a number, got {value!r}")
    return float(value)


def _as_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(f"Expected a string, got {value!r}")
    return value


def _as_string_list(value: Any) -> List[str]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise TypeMismatchError(f"Expected a list of strings, got {value!r}")
    if not all(isinstance(v, str) for v in value):
        raise TypeMismatchError(f"Expected a list of strings, got {value!r}")
    return list(value)


# ---------------------------------------------------------------------------
# Per-type predicate builders
# ---------------------------------------------------------------------------

def _datetime_sql(expr: str, op: Operator, value: Any, sink: _ParamSink) -> str:
    ph = sink.add(_as_datetime(value))
    return f"{expr} {_COMPARISONS[op]} {ph}::timestamp with time zone at time zone 'UTC'"


def _number_sql(expr: str, op: Operator, value: Any, sink: _ParamSink) -> str:
    ph = sink.add(_as_number(value))
    return f"{expr} {_COMPARISONS[op]} {ph}::double precision"


def _string_sql(expr: str, op: Operator, value: Any, sink: _ParamSink) -> str:
    text = _as_string(value)
    if op in _LIKES:
        like_kw, template = _LIKES[op]
        ph = sink.add(template.format(_escape_like(text)))
        return f"{expr} {like_kw} {ph} ESCAPE '\\'"
    return f"{expr} {_COMPARISONS[op]} {sink.add(text)}"


def _options_sql(expr: str, op: Operator, value: Any, sink: _ParamSink) -> str:
    vals = _as_string_list(value)
    if not vals:
        # IN () is always false; NOT IN () is always true
        return "1=0" if op == Operator.ANY_OF else "1=1"
    phs = ", ".join(sink.add(v) for v in vals)
    neg = "NOT " if op == Operator.NONE_OF else ""
    return f"{expr} {neg}IN ({phs})"


def _array_sql(expr: str, op: Operator, value: Any, sink: _ParamSink) -> str:
    ph = sink.add(_as_string_list(value))
    if op == Operator.ALL_OF:
        return f"{expr} @> {ph}::text[]"
    if op == Operator.NONE_OF:
        return f"NOT ({expr} && {ph}::text[])"
    return f"{expr} && {ph}::text[]"


def _number_object_sql(expr: str, op: Operator, value: Any, sink: _ParamSink) -> str:
    return _number_sql(f"({expr})::double precision", op, value, sink)


def _boolean_sql(expr: str, op: Operator, value: Any, sink: _ParamSink) -> str:
    if not isinstance(value, bool):
        raise TypeMismatchError(f"Expected a boolean, got {value!r}")
    return f"{expr} {_COMPARISONS[op]} {sink.add(value)}"


_Builder = Callable[[str, Operator, Any, _ParamSink], str]

_HANDLERS: Dict[FilterType, Tuple[_Builder, frozenset]] = {
    FilterType.DATETIME: (_datetime_sql, frozenset(_COMPARISONS)),
    FilterType.NUMBER: (_number_sql, frozenset(_COMPARISONS)),
    FilterType.STRING: (_string_sql, frozenset(_LIKES) | {Operator.EQ}),
    FilterType.STRING_OPTIONS: (_options_sql, frozenset({Operator.ANY_OF, Operator.NONE_OF})),
    FilterType.ARRAY_OPTIONS: (
        _array_sql,
        frozenset({Operator.ANY_OF, Operator.NONE_OF, Operator.ALL_OF}),
    ),
    FilterType.STRING_OBJECT: (_string_sql, frozenset(_LIKES) | {Operator.EQ}),
    FilterType.NUMBER_OBJECT: (_number_object_sql, frozenset(_COMPARISONS)),
    FilterType.BOOLEAN: (_boolean_sql, frozenset({Operator.EQ, Operator.NE})),
}


def _check_operator_tables() -> None:
    for typ, ops in OPERATORS_BY_TYPE.items():
        handler = _HANDLERS.get(typ)
        if handler is None:
            raise RuntimeError(f"No SQL builder for filter type {typ.value}")
        missing = set(ops) - handler[1]
        if missing:
            raise RuntimeError(
                f"SQL builder for {typ.value} lacks operators {sorted(o.value for o in missing)}"
            )


_check_operator_tables()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def clause_to_sql(
    clause: FilterClause,
    registry: ColumnRegistry,
    sink: _ParamSink,
    *,
    relation_prefix: str = "o",
    expression: Optional[str] = None,
) -> str:
    """
    Compile one clause. `expression` replaces the column's own physical
    expression (used to mirror a clause onto another relation).
    """
    col = _assert_clause_allowed(clause, registry)

    expr = expression or col.physical(relation_prefix)
    if col.type in KEYED_TYPES:
        expr = f"({expr} ->> {sink.add(clause.key)})"

    build, _ = _HANDLERS[col.type]
    return build(expr, clause.operator, clause.value, sink)


def filter_to_sql(
    clauses: Sequence[FilterClause],
    registry: ColumnRegistry,
    relation_prefix: str = "o",
) -> Optional[SqlFragment]:
    """
    Conjunction of all clauses, or None for an empty list. Any invalid
    clause raises before a fragment is returned.
    """
    sink = _ParamSink("filter")
    parts = [
        clause_to_sql(c, registry, sink, relation_prefix=relation_prefix) for c in clauses
    ]
    if not parts:
        return None
    return sink.fragment(" AND ".join(parts))
