"""
Sentry Error Tracking Module

Reports delivery and environment-resolution failures with build context.
"""

from .setup import (
    init_sentry,
    set_build_context,
    add_breadcrumb,
    capture_exception,
)

__all__ = [
    'init_sentry',
    'set_build_context',
    'add_breadcrumb',
    'capture_exception',
]
