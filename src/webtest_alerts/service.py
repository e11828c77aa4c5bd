import structlog

from webtest_alerts.client.base import AlertRuleClient
from webtest_alerts.errors import ClientError
from webtest_alerts.platform.logging import get_logger
from webtest_alerts.rules.builder import build_rule_definition
from webtest_alerts.rules.schemas import Acknowledgement, RuleDefinition, RuleInput

logger = get_logger(__name__)


class WebtestAlertRuleService:
    def __init__(self, client: AlertRuleClient):
        self.client = client

    def build(self, rule_input: RuleInput) -> RuleDefinition:
        return build_rule_definition(rule_input)

    async def provision(self, rule_input: RuleInput) -> Acknowledgement:
        """
        Build a definition from the current input and upsert it.

        Validation errors are raised before the client is touched. Client errors
        propagate unchanged; nothing is retried here. Client-side log events
        carry the rule name and resource group through structlog contextvars.
        """
        definition = self.build(rule_input)
        log = logger.bind(rule_name=definition.name, resource_group=rule_input.resource_group)
        log.info(
            "alert_rule_built",
            is_enabled=definition.is_enabled,
            action_count=None if definition.actions is None else len(definition.actions),
            window_minutes=definition.condition.window_size.total_seconds() / 60,
        )

        with structlog.contextvars.bound_contextvars(
            rule_name=definition.name, resource_group=rule_input.resource_group
        ):
            try:
                ack = await self.client.upsert(rule_input.resource_group, definition)
            except ClientError as e:
                log.error("alert_rule_upsert_failed", error=str(e), error_type=type(e).__name__)
                raise

        log.info("alert_rule_upserted", request_id=ack.request_id, status_code=ack.status_code)
        return ack
