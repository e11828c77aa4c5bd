"""Upsert clients for the monitoring management API."""

from .base import AlertRuleClient, UpsertCall
from .http_client import HttpAlertRuleClient
from .recording import RecordingAlertRuleClient

__all__ = [
    "AlertRuleClient",
    "UpsertCall",
    "HttpAlertRuleClient",
    "RecordingAlertRuleClient",
]
