import logging, typing as t

import psycopg
from psycopg.rows import dict_row

from .. import config

log = logging.getLogger("db")


def _pg_connect(dsn: str | None = None) -> psycopg.Connection:
    dsn = dsn or config.DATABASE_URL
    if not dsn:
        raise RuntimeError("DATABASE_URL not set.")

    kwargs: dict[str, t.Any] = dict(
        row_factory=dict_row,
        application_name=config.APPLICATION_NAME,
    )
    if config.STATEMENT_TIMEOUT_MS > 0:
        kwargs["options"] = f"-c statement_timeout={config.STATEMENT_TIMEOUT_MS}"
    return psycopg.connect(dsn, **kwargs)


def get_connection() -> t.Iterator[psycopg.Connection]:
    """One connection per request; both round trips share it."""
    conn = _pg_connect()
    try:
        yield conn
    finally:
        conn.close()


def _fetch_all(conn, sql: str, params: t.Mapping[str, t.Any]) -> list[dict[str, t.Any]]:
    with conn.cursor() as cur:
        cur.execute(sql, params)
        rows = cur.fetchall() if cur.description else []
    log.debug("fetched %d rows", len(rows))
    return rows
