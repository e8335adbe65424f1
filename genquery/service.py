from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from .database import _fetch_all
from .enrichment import attach_scores, fetch_scores
from .filters import GenerationsQuery
from .query import SqlFragment, build_generations_count_query, build_generations_query
from .registry import ColumnRegistry, default_registry

log = logging.getLogger("generations")


@dataclass(frozen=True)
class GenerationsResult:
    generations: List[Dict[str, Any]]
    datetime_filter: Optional[SqlFragment]
    search_condition: Optional[SqlFragment]
    filter_condition: Optional[SqlFragment]
    page_size: int


def get_all_generations(
    conn,
    query: GenerationsQuery,
    *,
    select_io: bool = False,
    registry: Optional[ColumnRegistry] = None,
) -> GenerationsResult:
    """
    Fetch one page of generations and attach their scores.

    The statement is fully compiled before anything is sent to the store,
    and the scores are fetched only once the page query has returned.
    """
    registry = registry or default_registry()
    stmt = build_generations_query(query, registry, select_io=select_io)

    generations = _fetch_all(conn, stmt.sql, stmt.params)
    scores = fetch_scores(conn, query.project_id, [g["id"] for g in generations])
    log.info(
        "project %s page %d: %d generations, %d scores",
        query.project_id,
        query.page,
        len(generations),
        len(scores),
    )

    return GenerationsResult(
        generations=attach_scores(generations, scores, project_id=query.project_id),
        datetime_filter=stmt.datetime_filter,
        search_condition=stmt.search_condition,
        filter_condition=stmt.filter_condition,
        page_size=stmt.page_size,
    )


def get_generations_count(
    conn,
    query: GenerationsQuery,
    *,
    registry: Optional[ColumnRegistry] = None,
) -> int:
    registry = registry or default_registry()
    count = build_generations_count_query(query, registry)
    rows = _fetch_all(conn, count.sql, count.params)
    return int(rows[0]["totalCount"]) if rows else 0
