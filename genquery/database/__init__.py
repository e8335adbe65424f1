"""
Database operations for the generations query service.

This module handles PostgreSQL connections and query execution.
"""

from .postgres import (
    _pg_connect,
    _fetch_all,
    get_connection,
)

__all__ = [
    "_pg_connect",
    "_fetch_all",
    "get_connection",
]
