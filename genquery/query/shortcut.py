from __future__ import annotations
from typing import Optional, Sequence

from .. import config
from ..filters import FilterClause, FilterType, Operator
from ..registry import ColumnRegistry
from .filters import clause_to_sql
from .fragments import SqlFragment, _ParamSink

# A trace is timestamped no later than any of its generations, so only an
# upper bound on the generation start time is also an upper bound on the
# trace timestamp.
_MIRRORED_OPERATORS = frozenset({Operator.LT, Operator.LTE})


def datetime_shortcut(
    clauses: Sequence[FilterClause],
    registry: ColumnRegistry,
    *,
    enabled: Optional[bool] = None,
) -> Optional[SqlFragment]:
    """
    Repeat the start-time upper bound against the trace's own timestamp
    so the planner can prune traces by index before the join.

    Returns None unless exactly one mirrorable clause exists. The
    mirrored predicate keeps the clause's operator and bound value.
    """
    if enabled is None:
        enabled = config.DATETIME_SHORTCUT
    target = registry.shortcut
    if not enabled or target is None:
        return None

    source = registry.resolve(target.source)
    candidates = [
        c
        for c in clauses
        if c.column in (source.id, source.name)
        and c.type is FilterType.DATETIME
        and c.operator in _MIRRORED_OPERATORS
    ]
    if len(candidates) != 1:
        return None

    sink = _ParamSink("dt")
    sql = clause_to_sql(candidates[0], registry, sink, expression=target.expression)
    return sink.fragment(sql)
