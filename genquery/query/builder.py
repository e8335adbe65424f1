from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from ..filters import GenerationsQuery
from ..registry import ColumnRegistry
from ..validation import _assert_pagination, _cap_page_size
from .filters import filter_to_sql
from .fragments import SqlFragment, join_fragments
from .order import default_order_by, order_by_to_sql
from .search import search_to_sql
from .shortcut import datetime_shortcut

log = logging.getLogger("generations")

HOME_RELATION = "o"
OBSERVATION_TYPE = "GENERATION"

# average score per name, one JSON object per (trace, observation)
_SCORES_AVG_CTE = """
WITH scores_avg AS (
  SELECT
    trace_id,
    observation_id,
    jsonb_object_agg(name::text, avg_value::double precision) AS scores_avg
  FROM (
    SELECT
      s.trace_id,
      s.observation_id,
      s.name,
      avg(s.value) AS avg_value
    FROM scores s
    JOIN traces st ON st.id = s.trace_id
    WHERE st.project_id = %(project_id)s
    GROUP BY 1, 2, 3
  ) tmp
  GROUP BY 1, 2
)"""

_FROM = """
FROM observations_view o
JOIN traces t ON t.id = o.trace_id AND t.project_id = o.project_id
LEFT JOIN scores_avg AS s_avg ON s_avg.trace_id = t.id AND s_avg.observation_id = o.id
LEFT JOIN prompts p ON p.id = o.prompt_id"""

# physical snake_case columns exposed under their camelCase names
_GENERATION_COLUMNS = (
    "o.id",
    "o.name",
    "o.model",
    'o."modelParameters"',
    'o.start_time AS "startTime"',
    'o.end_time AS "endTime"',
    "o.metadata",
    'o.trace_id AS "traceId"',
    't.name AS "traceName"',
    'o.completion_start_time AS "completionStartTime"',
    'o.prompt_tokens AS "promptTokens"',
    'o.completion_tokens AS "completionTokens"',
    'o.total_tokens AS "totalTokens"',
    "o.unit",
    "o.level",
    'o.status_message AS "statusMessage"',
    "o.version",
    'o.model_id AS "modelId"',
    'o.input_price AS "inputPrice"',
    'o.output_price AS "outputPrice"',
    'o.total_price AS "totalPrice"',
    'o.calculated_input_cost AS "calculatedInputCost"',
    'o.calculated_output_cost AS "calculatedOutputCost"',
    'o.calculated_total_cost AS "calculatedTotalCost"',
    'o."latency"',
    'o.prompt_id AS "promptId"',
    'p.name AS "promptName"',
    'p.version AS "promptVersion"',
)
_IO_COLUMNS = ("o.input", "o.output")


@dataclass(frozen=True)
class GenerationsStatement:
    sql: str
    params: Dict[str, Any]
    datetime_filter: Optional[SqlFragment]
    search_condition: Optional[SqlFragment]
    filter_condition: Optional[SqlFragment]
    order_by: SqlFragment
    page_size: int


@dataclass(frozen=True)
class _Conditions:
    datetime_filter: Optional[SqlFragment]
    search_condition: Optional[SqlFragment]
    filter_condition: Optional[SqlFragment]


def _compile_conditions(query: GenerationsQuery, registry: ColumnRegistry) -> _Conditions:
    return _Conditions(
        datetime_filter=datetime_shortcut(query.filter, registry),
        search_condition=search_to_sql(query.search_query, registry, HOME_RELATION),
        filter_condition=filter_to_sql(query.filter, registry, HOME_RELATION),
    )


def _where(query: GenerationsQuery, cond: _Conditions) -> SqlFragment:
    # tenant scope on both tables; the join key alone does not isolate traces
    scope = SqlFragment(
        "o.project_id = %(project_id)s\n"
        "  AND t.project_id = %(project_id)s\n"
        "  AND o.type = %(observation_type)s",
        {"project_id": query.project_id, "observation_type": OBSERVATION_TYPE},
    )
    return join_fragments(
        [scope, cond.datetime_filter, cond.search_condition, cond.filter_condition],
        "\n  AND ",
    )


def build_generations_query(
    query: GenerationsQuery,
    registry: ColumnRegistry,
    *,
    select_io: bool = False,
) -> GenerationsStatement:
    """
    Compose the paginated generations SELECT. Every compiler runs before
    any SQL text is produced; an invalid clause aborts the whole build.
    """
    _assert_pagination(query.page, query.limit)
    page_size = _cap_page_size(query.limit)

    cond = _compile_conditions(query, registry)
    order_by = order_by_to_sql(query.order_by, registry, HOME_RELATION) or default_order_by(
        registry, HOME_RELATION
    )
    where = _where(query, cond)

    columns = list(_GENERATION_COLUMNS)
    if select_io:
        columns[6:6] = _IO_COLUMNS  # before metadata

    select_list = ",\n  ".join(columns)
    sql = (
        f"{_SCORES_AVG_CTE}\n"
        f"SELECT\n  {select_list}{_FROM}\n"
        f"WHERE\n  {where.sql}\n"
        f"{order_by.sql}\n"
        "LIMIT %(limit)s OFFSET %(offset)s"
    )
    params = dict(where.params)
    params.update(order_by.params)
    params["limit"] = page_size
    params["offset"] = query.page * page_size

    log.debug("generations query: %s", sql)
    return GenerationsStatement(
        sql=sql,
        params=params,
        datetime_filter=cond.datetime_filter,
        search_condition=cond.search_condition,
        filter_condition=cond.filter_condition,
        order_by=order_by,
        page_size=page_size,
    )


def build_generations_count_query(
    query: GenerationsQuery,
    registry: ColumnRegistry,
) -> SqlFragment:
    """Total number of generations matching the same scope, search and filters."""
    where = _where(query, _compile_conditions(query, registry))
    sql = f"{_SCORES_AVG_CTE}\nSELECT count(*) AS \"totalCount\"{_FROM}\nWHERE\n  {where.sql}"
    return SqlFragment(sql, dict(where.params))
