"""
Generations query service.

Compiles filter, sort, search and pagination requests for generations
into one bound-parameter PostgreSQL statement and attaches scores.
"""

from .filters import FilterClause, GenerationsQuery, OrderSpec
from .service import GenerationsResult, get_all_generations, get_generations_count

__all__ = [
    "FilterClause",
    "GenerationsQuery",
    "OrderSpec",
    "GenerationsResult",
    "get_all_generations",
    "get_generations_count",
]
