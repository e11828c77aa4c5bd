from typing import List, Optional
from uuid import uuid4

from webtest_alerts.client.base import AlertRuleClient, UpsertCall
from webtest_alerts.errors import ClientError
from webtest_alerts.rules.schemas import Acknowledgement, RuleDefinition


class RecordingAlertRuleClient(AlertRuleClient):
    """
    In-memory upsert client that records every call.

    Returns a successful acknowledgement unless ``error`` is set, in which case
    the call is still recorded and the error is raised.
    """

    def __init__(
        self,
        status_code: int = 200,
        request_id: Optional[str] = None,
        error: Optional[ClientError] = None,
    ):
        self.status_code = status_code
        self.request_id = request_id
        self.error = error
        self.calls: List[UpsertCall] = []

    async def upsert(self, resource_group: str, definition: RuleDefinition) -> Acknowledgement:
        self.calls.append(UpsertCall(resource_group=resource_group, definition=definition))
        if self.error is not None:
            raise self.error
        return Acknowledgement(
            request_id=self.request_id or str(uuid4()),
            status_code=self.status_code,
            definition=definition,
        )

    @property
    def last_call(self) -> Optional[UpsertCall]:
        return self.calls[-1] if self.calls else None

    @property
    def last_resource_group(self) -> Optional[str]:
        return self.last_call.resource_group if self.last_call else None

    @property
    def last_definition(self) -> Optional[RuleDefinition]:
        return self.last_call.definition if self.last_call else None
