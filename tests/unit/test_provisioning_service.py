from unittest.mock import AsyncMock, Mock

import pytest
import structlog
from structlog.testing import capture_logs

from webtest_alerts.client import AlertRuleClient, RecordingAlertRuleClient
from webtest_alerts.errors import InvalidDefinition, RemoteRejected, TransportError
from webtest_alerts.service import WebtestAlertRuleService


def test_build_delegates_to_builder(rule_input):
    service = WebtestAlertRuleService(RecordingAlertRuleClient())
    definition = service.build(rule_input)

    assert definition.name == rule_input.name
    assert definition.is_enabled is True


@pytest.mark.asyncio
async def test_provision_sends_resource_group_and_definition(rule_input, recording_client):
    service = WebtestAlertRuleService(recording_client)

    ack = await service.provision(rule_input)

    assert ack.request_id == "req-1"
    assert recording_client.last_resource_group == "RG"
    assert recording_client.last_definition == ack.definition
    assert ack.definition == service.build(rule_input)


@pytest.mark.asyncio
async def test_invalid_input_never_reaches_client(rule_input):
    mock_client = Mock(spec=AlertRuleClient)
    mock_client.upsert = AsyncMock()
    service = WebtestAlertRuleService(mock_client)
    rule_input.failed_location_count = 0

    with pytest.raises(InvalidDefinition):
        await service.provision(rule_input)

    mock_client.upsert.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        TransportError("connection refused", resource_group="RG", rule_name="webtest-availability"),
        RemoteRejected(400, "bad window", code="BadRequest"),
    ],
)
async def test_client_errors_propagate_unchanged(rule_input, error):
    service = WebtestAlertRuleService(RecordingAlertRuleClient(error=error))

    with pytest.raises(type(error)) as exc_info:
        await service.provision(rule_input)

    assert exc_info.value is error


@pytest.mark.asyncio
async def test_provision_is_not_retried(rule_input):
    client = RecordingAlertRuleClient(error=TransportError("timed out"))
    service = WebtestAlertRuleService(client)

    with pytest.raises(TransportError):
        await service.provision(rule_input)

    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_provision_logs_build_and_acknowledgement(rule_input, recording_client):
    service = WebtestAlertRuleService(recording_client)

    with capture_logs() as logs:
        await service.provision(rule_input)

    events = [entry["event"] for entry in logs]
    assert events == ["alert_rule_built", "alert_rule_upserted"]
    assert logs[0]["rule_name"] == "webtest-availability"
    assert logs[0]["action_count"] is None
    assert logs[1]["request_id"] == "req-1"


@pytest.mark.asyncio
async def test_client_runs_with_rule_context_bound(rule_input):
    seen = {}

    class ContextCapturingClient(RecordingAlertRuleClient):
        async def upsert(self, resource_group, definition):
            seen.update(structlog.contextvars.get_contextvars())
            return await super().upsert(resource_group, definition)

    await WebtestAlertRuleService(ContextCapturingClient()).provision(rule_input)

    assert seen["rule_name"] == "webtest-availability"
    assert seen["resource_group"] == "RG"
    assert "rule_name" not in structlog.contextvars.get_contextvars()
