from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote
from uuid import uuid4

import httpx

from webtest_alerts.client.base import AlertRuleClient, UpsertCall
from webtest_alerts.errors import RemoteRejected, TransportError
from webtest_alerts.platform.config import settings
from webtest_alerts.platform.logging import get_logger
from webtest_alerts.rules.schemas import Acknowledgement, RuleDefinition

logger = get_logger(__name__)

REQUEST_ID_HEADER = "x-ms-request-id"


def _error_details(response: httpx.Response) -> Tuple[Optional[str], str]:
    """Extract (code, message) from a management API error body."""
    try:
        body = response.json()
    except ValueError:
        return None, response.text or response.reason_phrase

    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict):
            message = error.get("message") or response.reason_phrase
            return error.get("code"), str(message)
    return None, response.text or response.reason_phrase


class HttpAlertRuleClient(AlertRuleClient):
    """Management API implementation of AlertRuleClient using httpx for async."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        subscription_id: Optional[str] = None,
        token: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = (base_url or settings.MONITOR_API_URL).rstrip("/")
        self._subscription_id = subscription_id or settings.MONITOR_SUBSCRIPTION_ID
        self._token = token if token is not None else settings.MONITOR_API_TOKEN
        self._api_version = api_version or settings.MONITOR_API_VERSION
        self._timeout = timeout if timeout is not None else settings.MONITOR_TIMEOUT_SECONDS
        self.client: Optional[httpx.AsyncClient] = http_client
        self._owns_client = http_client is None
        self.last_sent: Optional[UpsertCall] = None

    async def connect(self) -> None:
        if not self.client:
            self.client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True

    async def close(self) -> None:
        if self.client and self._owns_client:
            await self.client.aclose()
            self.client = None

    async def _ensure_connected(self) -> None:
        if not self.client:
            await self.connect()

    def rule_url(self, resource_group: str, rule_name: str) -> str:
        return (
            f"{self._base_url}/subscriptions/{quote(self._subscription_id, safe='')}"
            f"/resourceGroups/{quote(resource_group, safe='')}"
            f"/providers/microsoft.insights/alertrules/{quote(rule_name, safe='')}"
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def upsert(self, resource_group: str, definition: RuleDefinition) -> Acknowledgement:
        await self._ensure_connected()
        self.last_sent = UpsertCall(resource_group=resource_group, definition=definition)
        payload: Dict[str, Any] = definition.to_payload()

        try:
            response = await self.client.put(
                self.rule_url(resource_group, definition.name),
                params={"api-version": self._api_version},
                json=payload,
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            logger.error(
                "alert_rule_transport_failed",
                rule_name=definition.name,
                resource_group=resource_group,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError(
                f"could not reach monitoring service for rule '{definition.name}': {e}",
                resource_group=resource_group,
                rule_name=definition.name,
            ) from e

        request_id = response.headers.get(REQUEST_ID_HEADER) or str(uuid4())

        if not response.is_success:
            code, message = _error_details(response)
            logger.warning(
                "alert_rule_rejected",
                rule_name=definition.name,
                resource_group=resource_group,
                status_code=response.status_code,
                code=code,
                request_id=request_id,
            )
            raise RemoteRejected(
                response.status_code,
                message,
                code=code,
                request_id=request_id,
                definition=definition,
            )

        logger.debug(
            "alert_rule_put",
            rule_name=definition.name,
            resource_group=resource_group,
            status_code=response.status_code,
            request_id=request_id,
        )
        return Acknowledgement(
            request_id=request_id,
            status_code=response.status_code,
            definition=definition,
        )
