from __future__ import annotations
from typing import Optional

from ..errors import TypeMismatchError
from ..filters import OrderDirection, OrderSpec
from ..registry import ColumnRegistry
from .fragments import SqlFragment


def order_by_to_sql(
    order_by: Optional[OrderSpec],
    registry: ColumnRegistry,
    relation_prefix: str = "o",
) -> Optional[SqlFragment]:
    """
    ORDER BY for a single registry column, or None when no column is
    given. The identity column breaks ties so pages never overlap.
    """
    if order_by is None or not order_by.column:
        return None
    col = registry.resolve(order_by.column)
    if not isinstance(order_by.order, OrderDirection):
        raise TypeMismatchError(f"Sort on {col.id} needs an order of ASC or DESC")

    direction = order_by.order.value
    sql = f"ORDER BY {col.physical(relation_prefix)} {direction}"
    identity = registry.resolve(registry.identity)
    if identity.id != col.id:
        sql += f", {identity.physical(relation_prefix)} {direction}"
    return SqlFragment(sql)


def default_order_by(registry: ColumnRegistry, relation_prefix: str = "o") -> SqlFragment:
    column, direction = registry.default_order
    return order_by_to_sql(OrderSpec(column, direction), registry, relation_prefix)
