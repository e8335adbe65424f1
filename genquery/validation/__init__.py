"""
Validation module for the generations query service.

This module provides input validation for pagination, filters, and sorts.
"""

from .rules import (
    _assert_pagination,
    _cap_page_size,
    _assert_clause_allowed,
    _assert_filters_allowed,
    _assert_sort_allowed,
)

__all__ = [
    "_assert_pagination",
    "_cap_page_size",
    "_assert_clause_allowed",
    "_assert_filters_allowed",
    "_assert_sort_allowed",
]
