"""
Attach each generation's scores after the page has been fetched.
"""

from __future__ import annotations
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .database import _fetch_all

_SCORES_SQL = """
SELECT
  s.id,
  s.timestamp,
  s.name,
  s.value,
  s.source,
  s.comment,
  s.trace_id AS "traceId",
  s.observation_id AS "observationId",
  t.project_id AS "projectId"
FROM scores s
JOIN traces t ON t.id = s.trace_id
WHERE t.project_id = %(project_id)s
  AND s.observation_id = ANY(%(observation_ids)s)
ORDER BY s.timestamp, s.id
"""


def fetch_scores(conn, project_id: str, observation_ids: Iterable[str]) -> List[Dict[str, Any]]:
    """Scores of the given observations within one project. No ids, no query."""
    ids = list(dict.fromkeys(observation_ids))
    if not ids:
        return []
    return _fetch_all(
        conn,
        _SCORES_SQL,
        {"project_id": project_id, "observation_ids": ids},
    )


def attach_scores(
    rows: Sequence[Dict[str, Any]],
    scores: Iterable[Dict[str, Any]],
    *,
    project_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Return new rows, each with a `scores` list holding exactly the scores
    whose observationId is the row id (empty when there are none).
    With `project_id`, scores from any other project are dropped.
    """
    by_observation: Dict[Any, List[Dict[str, Any]]] = defaultdict(list)
    for s in scores:
        if project_id is not None and s.get("projectId") != project_id:
            continue
        by_observation[s["observationId"]].append(s)
    return [{**row, "scores": list(by_observation.get(row["id"], []))} for row in rows]
