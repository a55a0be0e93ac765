"""Helpers - Pure utility functions with no side effects."""

from .escape import escape, link
from .timespan import format_timespan

__all__ = [
    'escape',
    'link',
    'format_timespan',
]
