from __future__ import annotations
import json, logging, re, typing as t
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import yaml

from .. import config
from ..errors import RegistryConfigError, SchemaResolutionError
from ..filters import FilterType, OPERATORS_BY_TYPE, OrderDirection

log = logging.getLogger("registry")

_IDENT_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


@dataclass(frozen=True)
class ColumnDefinition:
    id: str
    name: str
    column: str
    type: FilterType
    relation: str | None = None
    options: tuple[str, ...] = ()

    def physical(self, relation_prefix: str) -> str:
        """Trusted SQL reference, e.g. o."start_time"."""
        return f'{self.relation or relation_prefix}."{self.column}"'

    @property
    def operators(self) -> tuple:
        return OPERATORS_BY_TYPE[self.type]


@dataclass(frozen=True)
class ShortcutTarget:
    source: str
    relation: str
    column: str

    @property
    def expression(self) -> str:
        return f'{self.relation}."{self.column}"'


@dataclass(frozen=True)
class ColumnRegistry:
    """
    Read-only whitelist of the columns a request may filter, sort or
    search on. Nothing reaches SQL as an identifier without going
    through `resolve`.
    """
    columns: tuple[ColumnDefinition, ...]
    identity: str
    default_order: tuple[str, OrderDirection]
    search_columns: tuple[str, ...]
    shortcut: ShortcutTarget | None = None
    _by_id: dict[str, ColumnDefinition] = field(default_factory=dict, init=False, repr=False, compare=False)
    _by_name: dict[str, ColumnDefinition] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        for c in self.columns:
            if c.id in self._by_id:
                raise RegistryConfigError(f"Duplicate column id: {c.id}")
            if c.name in self._by_name:
                raise RegistryConfigError(f"Duplicate column name: {c.name}")
            self._by_id[c.id] = c
            self._by_name[c.name] = c

    def resolve(self, logical_name: str) -> ColumnDefinition:
        col = self._by_id.get(logical_name) or self._by_name.get(logical_name)
        if col is None:
            raise SchemaResolutionError(logical_name)
        return col

    def __contains__(self, logical_name: str) -> bool:
        return logical_name in self._by_id or logical_name in self._by_name

    def __iter__(self) -> t.Iterator[ColumnDefinition]:
        return iter(self.columns)

    # -- loading ---------------------------------------------------------

    @classmethod
    def from_dict(cls, cfg: dict) -> "ColumnRegistry":
        cols = tuple(_parse_column(c) for c in cfg.get("columns", []))
        if not cols:
            raise RegistryConfigError("Column registry has no columns")

        order = cfg.get("default_order") or {}
        shortcut_cfg = cfg.get("datetime_shortcut")
        shortcut = None
        if shortcut_cfg:
            target = shortcut_cfg.get("target") or {}
            shortcut = ShortcutTarget(
                source=shortcut_cfg["source"],
                relation=_ident(target.get("relation"), "shortcut relation"),
                column=_ident(target.get("column"), "shortcut column"),
            )

        try:
            direction = OrderDirection(str(order.get("order", "DESC")).upper())
        except ValueError:
            raise RegistryConfigError(f"Bad default order direction: {order.get('order')}") from None

        reg = cls(
            columns=cols,
            identity=cfg.get("identity", "id"),
            default_order=(
                order.get("column", "startTime"),
                direction,
            ),
            search_columns=tuple(cfg.get("search_columns", [])),
            shortcut=shortcut,
        )
        reg._check_references()
        return reg

    @classmethod
    def load(cls, path: Path) -> "ColumnRegistry":
        if not path.exists():
            raise RegistryConfigError(f"Column registry file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                cfg = yaml.safe_load(f)
            else:
                cfg = json.load(f)
        reg = cls.from_dict(cfg or {})
        log.info("loaded %d columns from %s", len(reg.columns), path)
        return reg

    def _check_references(self) -> None:
        try:
            self.resolve(self.identity)
            self.resolve(self.default_order[0])
            for name in self.search_columns:
                if self.resolve(name).type is not FilterType.STRING:
                    raise RegistryConfigError(f"Search column must be a string: {name}")
            if self.shortcut:
                source = self.resolve(self.shortcut.source)
                if source.type is not FilterType.DATETIME:
                    raise RegistryConfigError(
                        f"Shortcut source must be a datetime column: {source.id}"
                    )
        except SchemaResolutionError as e:
            raise RegistryConfigError(f"Registry references unknown column: {e.column}") from e


def _ident(value: t.Any, what: str) -> str:
    if not isinstance(value, str) or not _IDENT_RE.match(value):
        raise RegistryConfigError(f"Bad {what}: {value!r}")
    return value


def _parse_column(raw: dict) -> ColumnDefinition:
    if not isinstance(raw, dict) or "id" not in raw or "column" not in raw:
        raise RegistryConfigError(f"Bad column mapping: {raw}")
    try:
        typ = FilterType(raw.get("type"))
    except ValueError:
        raise RegistryConfigError(f"Unknown type for {raw['id']}: {raw.get('type')}") from None
    if typ not in OPERATORS_BY_TYPE:
        raise RegistryConfigError(f"No operators defined for type {typ.value}")
    relation = raw.get("relation")
    return ColumnDefinition(
        id=raw["id"],
        name=raw.get("name", raw["id"]),
        column=_ident(raw["column"], f"column for {raw['id']}"),
        type=typ,
        relation=_ident(relation, f"relation for {raw['id']}") if relation else None,
        options=tuple(str(o) for o in raw.get("options", [])),
    )


@lru_cache(maxsize=1)
def default_registry() -> ColumnRegistry:
    return ColumnRegistry.load(config.COLUMNS_FILE)
