"""
Column registry for the generations query service.

This module provides the whitelist of columns that filters, sorts and
free-text search may reference.
"""

from .columns import (
    ColumnDefinition,
    ColumnRegistry,
    ShortcutTarget,
    default_registry,
)

__all__ = [
    "ColumnDefinition",
    "ColumnRegistry",
    "ShortcutTarget",
    "default_registry",
]
