"""Webtest alert rule models and definition builder."""

from .builder import (
    RESERVED_TAG_PREFIX,
    build_rule_definition,
    validate_rule_input,
)
from .schemas import (
    Acknowledgement,
    Action,
    EmailAction,
    LocationThresholdCondition,
    MetricDataSource,
    RuleDefinition,
    RuleInput,
    WebhookAction,
)

__all__ = [
    # Builder
    "RESERVED_TAG_PREFIX",
    "build_rule_definition",
    "validate_rule_input",
    # Models
    "Acknowledgement",
    "Action",
    "EmailAction",
    "LocationThresholdCondition",
    "MetricDataSource",
    "RuleDefinition",
    "RuleInput",
    "WebhookAction",
]
