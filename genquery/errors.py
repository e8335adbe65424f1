"""
Error types raised while turning a generations request into SQL.

Anything derived from QueryValidationError is the caller's fault and is
reported as a bad request. Store failures are psycopg errors and are
propagated untouched.
"""

from psycopg import Error as StoreExecutionError


class QueryValidationError(ValueError):
    """The request cannot be compiled; no SQL is built."""


class SchemaResolutionError(QueryValidationError):
    """A filter, sort or search column is not in the registry."""

    def __init__(self, column: str):
        super().__init__(f"Unknown column: {column}")
        self.column = column


class TypeMismatchError(QueryValidationError):
    """Operator, value and column type do not fit together."""


class RegistryConfigError(RuntimeError):
    """The column registry file is malformed."""


__all__ = [
    "QueryValidationError",
    "SchemaResolutionError",
    "TypeMismatchError",
    "RegistryConfigError",
    "StoreExecutionError",
]
