"""
Monitoring and Delivery for Build Notifications

Provides:
- Slack webhook delivery with retries
- Sentry error tracking with build context
"""

from .retry import RetryStrategy
from .sentry import (
    init_sentry,
    set_build_context,
    add_breadcrumb,
    capture_exception,
)

__all__ = [
    # Retry
    'RetryStrategy',
    # Sentry
    'init_sentry',
    'set_build_context',
    'add_breadcrumb',
    'capture_exception',
]
