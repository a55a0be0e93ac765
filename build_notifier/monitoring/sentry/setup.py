"""
Sentry Setup and Context Management

Initializes Sentry SDK and provides context enrichment helpers.
"""

import logging
from typing import Any, Dict, Optional

from ...config import NotifierConfig

logger = logging.getLogger(__name__)

# Track initialization state
_sentry_initialized = False


def init_sentry(config: Optional[NotifierConfig] = None) -> bool:
    """
    Initialize Sentry SDK.

    Args:
        config: NotifierConfig with DSN

    Returns:
        True if initialized successfully
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    config = config or NotifierConfig.from_env()

    if not config.sentry_enabled:
        logger.debug("Sentry not configured, skipping initialization")
        return False

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration

        logging_integration = LoggingIntegration(
            level=logging.INFO,  # Capture INFO and above as breadcrumbs
            event_level=logging.ERROR,  # Send ERROR and above as events
        )

        sentry_sdk.init(
            dsn=config.sentry_dsn,
            environment=config.sentry_environment,
            traces_sample_rate=config.sentry_traces_sample_rate,
            integrations=[logging_integration],
            send_default_pii=False,
            attach_stacktrace=True,
        )

        sentry_sdk.set_tag("component", "build_notifier")

        _sentry_initialized = True
        logger.debug("Sentry initialized successfully")
        return True

    except ImportError:
        logger.warning("sentry-sdk not installed, Sentry tracking disabled")
        return False
    except Exception as e:
        logger.error("Failed to initialize Sentry: %s", e)
        return False


def set_build_context(
    project: str,
    build_number: int,
    event: str,
    result: Optional[str] = None,
) -> None:
    """
    Set build context for Sentry.

    Args:
        project: Project full name
        build_number: Build number
        event: Lifecycle event being handled (started, completed)
        result: Build result, if completed
    """
    if not _sentry_initialized:
        return

    try:
        import sentry_sdk

        sentry_sdk.set_context("build", {
            "project": project,
            "number": build_number,
            "event": event,
            "result": result,
        })
        sentry_sdk.set_tag("project", project)

    except Exception as e:
        logger.debug("Failed to set build context: %s", e)


def add_breadcrumb(
    message: str,
    category: str = "notify",
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Add a breadcrumb to the current Sentry scope.

    Args:
        message: Breadcrumb message
        category: Category (notify, slack)
        level: Level (debug, info, warning, error)
        data: Additional data
    """
    if not _sentry_initialized:
        return

    try:
        import sentry_sdk

        sentry_sdk.add_breadcrumb(
            message=message,
            category=category,
            level=level,
            data=data,
        )

    except Exception as e:
        logger.debug("Failed to add breadcrumb: %s", e)


def capture_exception(
    exception: Exception,
    level: str = "error",
    tags: Optional[Dict[str, str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """
    Capture an exception and send to Sentry.

    Args:
        exception: The exception to capture
        level: Severity level (error, warning, info)
        tags: Additional tags
        extra: Additional context data

    Returns:
        Sentry event ID if captured, None otherwise
    """
    if not _sentry_initialized:
        return None

    try:
        import sentry_sdk

        with sentry_sdk.new_scope() as scope:
            scope.set_level(level)

            if tags:
                for key, value in tags.items():
                    scope.set_tag(key, value)

            if extra:
                for key, value in extra.items():
                    scope.set_extra(key, value)

            return sentry_sdk.capture_exception(exception)

    except Exception as e:
        logger.debug("Failed to capture exception: %s", e)
        return None
