from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional


@dataclass(frozen=True)
class SqlFragment:
    """
    A piece of SQL plus the values bound to its %(name)s placeholders.

    `sql` only ever contains registry expressions, fixed keywords and
    placeholders. Absence of a fragment is `None`, never an empty string.
    """
    sql: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"sql": self.sql, "params": dict(self.params)}


def join_fragments(parts: Iterable[Optional[SqlFragment]], sep: str) -> Optional[SqlFragment]:
    """Join the present fragments with `sep`; None when nothing is present."""
    present = [p for p in parts if p is not None]
    if not present:
        return None
    params: Dict[str, Any] = {}
    for p in present:
        clash = params.keys() & p.params.keys()
        if clash:
            raise ValueError(f"Parameter name collision: {sorted(clash)}")
        params.update(p.params)
    return SqlFragment(sep.join(p.sql for p in present), params)


def fragment_dict(fragment: Optional[SqlFragment]) -> Optional[Dict[str, Any]]:
    return fragment.to_dict() if fragment is not None else None


class _ParamSink:
    """
    Collects bound values and hands out pyformat placeholders, %(p1)s.
    Each compiler uses its own prefix so fragments compose without
    renaming.
    """
    def __init__(self, prefix: str, *, start_index: int = 1):
        self.prefix = prefix
        self.next_idx = start_index
        self.params: Dict[str, Any] = {}

    def add(self, value: Any) -> str:
        name = f"{self.prefix}_{self.next_idx}"
        self.next_idx += 1
        self.params[name] = value
        return f"%({name})s"

    def fragment(self, sql: str) -> SqlFragment:
        return SqlFragment(sql, dict(self.params))


def _escape_like(value: str) -> str:
    """
    Escape \\, %, _ in LIKE patterns. We'll use ESCAPE '\\' in SQL.
    """
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%").replace("_", "\\_")
    return value
