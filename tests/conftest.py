"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import timedelta

import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))

# Settings are read once at import time, so the environment is set up front
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("MONITOR_API_URL", "https://monitor.test")
os.environ.setdefault("MONITOR_SUBSCRIPTION_ID", "sub-123")
os.environ.setdefault("MONITOR_API_TOKEN", "test-token")

from webtest_alerts.client import RecordingAlertRuleClient  # noqa: E402
from webtest_alerts.rules import EmailAction, RuleInput, WebhookAction  # noqa: E402


@pytest.fixture
def rule_input() -> RuleInput:
    """Baseline operator input: no actions, default window, enabled."""
    return RuleInput(
        name="webtest-availability",
        location="East US",
        resource_group="RG",
        failed_location_count=10,
        window_size=timedelta(minutes=15),
    )


@pytest.fixture
def email_action() -> EmailAction:
    return EmailAction(send_to_service_owners=True, custom_emails=["le@hypersoft.com"])


@pytest.fixture
def webhook_action() -> WebhookAction:
    return WebhookAction(service_uri="http://bueno.net", properties={"hello": "goodbye"})


@pytest.fixture
def recording_client() -> RecordingAlertRuleClient:
    return RecordingAlertRuleClient(request_id="req-1")
