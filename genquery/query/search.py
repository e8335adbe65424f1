from __future__ import annotations
from typing import Optional

from ..registry import ColumnRegistry
from .fragments import SqlFragment, _ParamSink, _escape_like


def search_to_sql(
    search_query: Optional[str],
    registry: ColumnRegistry,
    relation_prefix: str = "o",
) -> Optional[SqlFragment]:
    """Case-insensitive substring match on any of the search columns."""
    if not search_query:
        return None
    sink = _ParamSink("search")
    ph = sink.add(f"%{_escape_like(search_query)}%")
    matches = [
        f"{registry.resolve(name).physical(relation_prefix)} ILIKE {ph} ESCAPE '\\'"
        for name in registry.search_columns
    ]
    if not matches:
        return None
    return sink.fragment("(" + " OR ".join(matches) + ")")
