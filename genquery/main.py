from __future__ import annotations
import logging

import jsonschema
import psycopg
from fastapi import Body, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .database import get_connection
from .errors import QueryValidationError
from .filters import parse_generations_query_json
from .query import build_generations_query, fragment_dict
from .registry import default_registry
from .service import get_all_generations, get_generations_count
from .validation import _assert_filters_allowed, _assert_sort_allowed

logging.basicConfig(level=config.LOG_LEVEL)
log = logging.getLogger("generations")

app = FastAPI(title="Generations Query Service", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


def _parse(payload: dict):
    """Parse and validate a request body; schema or registry failures are 400s."""
    try:
        query = parse_generations_query_json(payload, validate=True)
        reg = default_registry()
        _assert_filters_allowed(query, reg)
        _assert_sort_allowed(query, reg)
        return query
    except jsonschema.ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.on_event("startup")
def _startup():
    default_registry()


@app.get("/healthz")
def health():
    return {"ok": True, "columns": [c.id for c in default_registry()]}


@app.get("/columns")
def list_columns():
    reg = default_registry()
    return {
        "columns": [
            {
                "id": c.id,
                "name": c.name,
                "type": c.type.value,
                "operators": [o.value for o in c.operators],
                "options": list(c.options),
            }
            for c in reg
        ],
        "searchColumns": list(reg.search_columns),
        "defaultOrder": {"column": reg.default_order[0], "order": reg.default_order[1].value},
    }


@app.post("/generations/sql")
def build_query(payload: dict = Body(..., description="GenerationsQuery JSON")):
    query = _parse(payload)
    try:
        stmt = build_generations_query(query, default_registry(), select_io=query.select_io)
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "sql": stmt.sql,
        "params": stmt.params,
        "pageSizeApplied": stmt.page_size,
        "datetimeFilter": fragment_dict(stmt.datetime_filter),
        "searchCondition": fragment_dict(stmt.search_condition),
        "filterCondition": fragment_dict(stmt.filter_condition),
    }


@app.post("/generations")
def generations(
    payload: dict = Body(..., description="GenerationsQuery JSON"),
    conn=Depends(get_connection),
):
    query = _parse(payload)
    try:
        result = get_all_generations(conn, query, select_io=query.select_io)
        total = get_generations_count(conn, query)
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except psycopg.Error as e:
        log.error("generations query failed for project %s: %s", query.project_id, e)
        raise HTTPException(status_code=502, detail="Generations query failed")

    return {
        "generations": result.generations,
        "totalCount": total,
        "pageSizeApplied": result.page_size,
        "datetimeFilter": fragment_dict(result.datetime_filter),
        "searchCondition": fragment_dict(result.search_condition),
        "filterCondition": fragment_dict(result.filter_condition),
    }
