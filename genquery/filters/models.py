# filters/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import json

import jsonschema

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FilterType(str, Enum):
    DATETIME = "datetime"
    STRING = "string"
    NUMBER = "number"
    STRING_OPTIONS = "stringOptions"
    ARRAY_OPTIONS = "arrayOptions"
    STRING_OBJECT = "stringObject"
    NUMBER_OBJECT = "numberObject"
    BOOLEAN = "boolean"


class Operator(str, Enum):
    EQ = "="
    NE = "<>"
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    CONTAINS = "contains"
    NOT_CONTAINS = "does not contain"
    STARTS_WITH = "starts with"
    ENDS_WITH = "ends with"
    ANY_OF = "any of"
    NONE_OF = "none of"
    ALL_OF = "all of"


class OrderDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


_COMPARE = (Operator.EQ, Operator.GT, Operator.LT, Operator.GTE, Operator.LTE)
_TEXT = (
    Operator.EQ,
    Operator.CONTAINS,
    Operator.NOT_CONTAINS,
    Operator.STARTS_WITH,
    Operator.ENDS_WITH,
)

OPERATORS_BY_TYPE: Dict[FilterType, tuple] = {
    FilterType.DATETIME: (Operator.GT, Operator.LT, Operator.GTE, Operator.LTE),
    FilterType.STRING: _TEXT,
    FilterType.NUMBER: _COMPARE,
    FilterType.STRING_OPTIONS: (Operator.ANY_OF, Operator.NONE_OF),
    FilterType.ARRAY_OPTIONS: (Operator.ANY_OF, Operator.NONE_OF, Operator.ALL_OF),
    FilterType.STRING_OBJECT: _TEXT,
    FilterType.NUMBER_OBJECT: _COMPARE,
    FilterType.BOOLEAN: (Operator.EQ, Operator.NE),
}

# types addressed as `column ->> key`
KEYED_TYPES = frozenset({FilterType.STRING_OBJECT, FilterType.NUMBER_OBJECT})


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterClause:
    """
    One typed condition: a registry column, an operator valid for the
    column type, and the value to bind. `key` selects a JSON field for
    the object types.
    """
    column: str
    type: FilterType
    operator: Operator
    value: Any
    key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "column": self.column,
            "type": self.type.value,
            "operator": self.operator.value,
            "value": self.value,
        }
        if self.key is not None:
            out["key"] = self.key
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterClause":
        return cls(
            column=data["column"],
            type=FilterType(data["type"]),
            operator=Operator(data["operator"]),
            value=data.get("value"),
            key=data.get("key"),
        )


@dataclass(frozen=True)
class OrderSpec:
    column: Optional[str] = None
    order: Optional[OrderDirection] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column": self.column,
            "order": self.order.value if self.order else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "OrderSpec":
        if not data:
            return cls()
        order = data.get("order")
        return cls(
            column=data.get("column"),
            order=OrderDirection(order.upper()) if order else None,
        )


@dataclass
class GenerationsQuery:
    """
    Validated input for one generations table request.

    Python-idiomatic fields (snake_case) with camelCase JSON interop.
    """
    project_id: str
    page: int = 0
    limit: int = 50
    search_query: Optional[str] = None
    filter: List[FilterClause] = field(default_factory=list)
    order_by: OrderSpec = field(default_factory=OrderSpec)
    select_io: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "page": self.page,
            "limit": self.limit,
            "searchQuery": self.search_query,
            "filter": [f.to_dict() for f in self.filter],
            "orderBy": self.order_by.to_dict(),
            "selectIO": self.select_io,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationsQuery":
        return cls(
            project_id=str(data["projectId"]),
            page=int(data.get("page", 0) or 0),
            limit=int(data.get("limit", 50) or 50),
            search_query=data.get("searchQuery") or None,
            filter=[FilterClause.from_dict(f) for f in data.get("filter", []) or []],
            order_by=OrderSpec.from_dict(data.get("orderBy")),
            select_io=bool(data.get("selectIO", False)),
        )


# ---------------------------------------------------------------------------
# JSON Schema
# ---------------------------------------------------------------------------

GENERATIONS_QUERY_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://example.com/generations-query.schema.json",
    "title": "Generations Query",
    "$defs": {
        "FilterClause": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "column": {"type": "string", "minLength": 1},
                "type": {"type": "string", "enum": [t.value for t in FilterType]},
                "operator": {"type": "string", "enum": [o.value for o in Operator]},
                "key": {"type": "string"},
                "value": {},
            },
            "required": ["column", "type", "operator", "value"],
            "allOf": [
                # list-valued types always carry an array
                {
                    "if": {"properties": {"type": {"enum": ["stringOptions", "arrayOptions"]}}},
                    "then": {"properties": {"value": {"type": "array", "items": {"type": "string"}}}},
                },
                {
                    "if": {"properties": {"type": {"enum": ["stringObject", "numberObject"]}}},
                    "then": {"required": ["key"]},
                },
            ],
        },
        "OrderSpec": {
            "type": ["object", "null"],
            "additionalProperties": False,
            "properties": {
                "column": {"type": ["string", "null"]},
                "order": {"enum": ["ASC", "DESC", "asc", "desc", None]},
            },
        },
    },
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "projectId": {"type": "string", "minLength": 1},
        "page": {"type": "integer", "minimum": 0},
        "limit": {"type": "integer", "minimum": 1},
        "searchQuery": {"type": ["string", "null"]},
        "filter": {"type": "array", "items": {"$ref": "#/$defs/FilterClause"}},
        "orderBy": {"$ref": "#/$defs/OrderSpec"},
        "selectIO": {"type": "boolean"},
    },
    "required": ["projectId"],
}


def parse_generations_query_json(
    payload: Union[str, Dict[str, Any]],
    *,
    validate: bool = True,
) -> GenerationsQuery:
    """
    Accept a JSON string or dict and return a GenerationsQuery.
    Raises jsonschema.ValidationError when the payload is malformed.
    """
    data = json.loads(payload) if isinstance(payload, str) else payload
    if validate:
        jsonschema.validate(instance=data, schema=GENERATIONS_QUERY_SCHEMA)
    return GenerationsQuery.from_dict(data)


__all__ = [
    "FilterType",
    "Operator",
    "OrderDirection",
    "OPERATORS_BY_TYPE",
    "KEYED_TYPES",
    "FilterClause",
    "OrderSpec",
    "GenerationsQuery",
    "GENERATIONS_QUERY_SCHEMA",
    "parse_generations_query_json",
]
