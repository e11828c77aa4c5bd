"""
Models for webtest alert rules.

``RuleInput`` is the operator-facing parameter set. It is mutable and is not
re-validated on assignment, so it can be adjusted between builds; the builder is
the one place that rejects bad values. ``RuleDefinition`` is the canonical,
frozen snapshot that crosses the wire.
"""

from datetime import timedelta
from types import MappingProxyType
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from webtest_alerts.platform.config import settings

EMAIL_ACTION_TYPE = "Microsoft.Azure.Management.Insights.Models.RuleEmailAction"
WEBHOOK_ACTION_TYPE = "Microsoft.Azure.Management.Insights.Models.RuleWebhookAction"
LOCATION_THRESHOLD_CONDITION_TYPE = "Microsoft.Azure.Management.Insights.Models.LocationThresholdRuleCondition"
METRIC_DATA_SOURCE_TYPE = "Microsoft.Azure.Management.Insights.Models.RuleMetricDataSource"


def format_duration(value: timedelta) -> str:
    """Render a timedelta as an ISO 8601 duration, e.g. ``PT15M`` or ``P1DT2H``."""
    micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    sign = "-" if micros < 0 else ""
    seconds, micros = divmod(abs(micros), 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    time_part = ""
    if hours:
        time_part += f"{hours}H"
    if minutes:
        time_part += f"{minutes}M"
    if micros:
        time_part += f"{seconds}.{micros:06d}".rstrip("0") + "S"
    elif seconds:
        time_part += f"{seconds}S"

    if not days and not time_part:
        return "PT0S"
    date_part = f"{days}D" if days else ""
    return f"{sign}P{date_part}" + (f"T{time_part}" if time_part else "")


def _default_window_size() -> timedelta:
    return timedelta(minutes=settings.DEFAULT_WINDOW_MINUTES)


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


# Read-only view over a private copy; serialized back to a plain dict
FrozenStrMap = Annotated[
    Mapping[str, str],
    AfterValidator(lambda value: MappingProxyType(dict(value))),
    PlainSerializer(lambda value: dict(value), return_type=Dict[str, str]),
]


class WireModel(BaseModel):
    """Base for models serialized in the management API's camelCase shape."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =========================================================================
# ACTIONS
# =========================================================================

class EmailAction(WireModel):
    """Notify service owners and/or a list of custom addresses."""

    model_config = ConfigDict(frozen=True)

    odata_type: Literal["Microsoft.Azure.Management.Insights.Models.RuleEmailAction"] = Field(
        EMAIL_ACTION_TYPE, alias="odata.type"
    )
    send_to_service_owners: bool = False
    custom_emails: Tuple[str, ...] = ()


class WebhookAction(WireModel):
    """POST the alert to an external endpoint."""

    model_config = ConfigDict(frozen=True)

    odata_type: Literal["Microsoft.Azure.Management.Insights.Models.RuleWebhookAction"] = Field(
        WEBHOOK_ACTION_TYPE, alias="odata.type"
    )
    service_uri: str
    properties: FrozenStrMap = Field(default_factory=_empty_mapping)

    @field_validator("service_uri")
    @classmethod
    def require_absolute_uri(cls, value: str) -> str:
        parsed = urlsplit(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"service_uri must be an absolute URI, got '{value}'")
        return value


Action = Annotated[Union[EmailAction, WebhookAction], Field(discriminator="odata_type")]


# =========================================================================
# OPERATOR INPUT
# =========================================================================

class RuleInput(BaseModel):
    """
    Operator-supplied parameters for a webtest alert rule.

    ``actions`` distinguishes ``None`` (no action policy configured) from an
    empty list (explicitly zero actions).
    """

    name: str
    location: str
    resource_group: str
    failed_location_count: int
    window_size: timedelta = Field(default_factory=_default_window_size)
    disable_rule: bool = False
    actions: Optional[List[Action]] = None
    description: Optional[str] = None
    target_resource_uri: Optional[str] = None
    tags: Dict[str, str] = Field(default_factory=dict)


# =========================================================================
# CANONICAL DEFINITION
# =========================================================================

class MetricDataSource(WireModel):
    """Data source of a webtest rule. Always empty: evaluation keys off the synthetic probe signal."""

    model_config = ConfigDict(frozen=True)

    odata_type: Literal["Microsoft.Azure.Management.Insights.Models.RuleMetricDataSource"] = Field(
        METRIC_DATA_SOURCE_TYPE, alias="odata.type"
    )
    resource_uri: None = None
    metric_name: None = None
    metric_namespace: None = None


class LocationThresholdCondition(WireModel):
    """Fires when ``failed_location_count`` probe locations fail within ``window_size``."""

    model_config = ConfigDict(frozen=True)

    odata_type: Literal["Microsoft.Azure.Management.Insights.Models.LocationThresholdRuleCondition"] = Field(
        LOCATION_THRESHOLD_CONDITION_TYPE, alias="odata.type"
    )
    data_source: MetricDataSource = Field(default_factory=MetricDataSource)
    failed_location_count: int = Field(..., gt=0)
    window_size: timedelta

    @field_validator("window_size")
    @classmethod
    def require_positive_window(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("window_size must be strictly positive")
        return value

    @field_serializer("window_size", when_used="json")
    def serialize_window_size(self, value: timedelta) -> str:
        return format_duration(value)


class RuleDefinition(WireModel):
    """Canonical webtest alert rule, as sent in an upsert call."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    location: str
    tags: FrozenStrMap
    is_enabled: bool
    description: Optional[str] = None
    condition: LocationThresholdCondition
    actions: Optional[Tuple[Action, ...]] = None

    def to_payload(self) -> Dict[str, Any]:
        """Request body for the management API; ``actions`` is omitted when unset."""
        properties: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "isEnabled": self.is_enabled,
            "condition": self.condition.model_dump(mode="json", by_alias=True),
        }
        if self.actions is not None:
            properties["actions"] = [action.model_dump(mode="json", by_alias=True) for action in self.actions]
        return {
            "location": self.location,
            "tags": dict(self.tags),
            "properties": properties,
        }


class Acknowledgement(BaseModel):
    """Service confirmation of an upsert, echoing the definition that was sent."""

    model_config = ConfigDict(frozen=True)

    request_id: str
    status_code: int
    definition: RuleDefinition
