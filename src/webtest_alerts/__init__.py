"""
Webtest Alerts - Declarative provisioning of synthetic-availability alert rules

This package contains:
- rules: Operator input models, canonical rule definition and the definition builder
- client: Upsert clients for the monitoring management API (HTTP and recording)
- service: Build-then-upsert provisioning workflow
- errors: Validation and client error taxonomy
- platform: Cross-cutting concerns (configuration, logging)
"""

from webtest_alerts.client import AlertRuleClient, HttpAlertRuleClient, RecordingAlertRuleClient
from webtest_alerts.errors import (
    ClientError,
    InvalidDefinition,
    RemoteRejected,
    TransportError,
    WebtestAlertError,
)
from webtest_alerts.rules import (
    Acknowledgement,
    EmailAction,
    RuleDefinition,
    RuleInput,
    WebhookAction,
    build_rule_definition,
)
from webtest_alerts.service import WebtestAlertRuleService

__version__ = "0.1.0"

__all__ = [
    "Acknowledgement",
    "AlertRuleClient",
    "ClientError",
    "EmailAction",
    "HttpAlertRuleClient",
    "InvalidDefinition",
    "RecordingAlertRuleClient",
    "RemoteRejected",
    "RuleDefinition",
    "RuleInput",
    "TransportError",
    "WebhookAction",
    "WebtestAlertError",
    "WebtestAlertRuleService",
    "build_rule_definition",
]
