"""
Slack Notification Module

Delivers build notifications to Slack incoming webhooks.
"""

from .client import SlackSink, build_payload

__all__ = [
    'SlackSink',
    'build_payload',
]
