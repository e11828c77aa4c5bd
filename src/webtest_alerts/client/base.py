"""
Upsert Client - Abstract interface for pushing rule definitions to the monitoring service.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from webtest_alerts.rules.schemas import Acknowledgement, RuleDefinition


@dataclass(frozen=True)
class UpsertCall:
    """One upsert attempt: the resource group and the exact definition sent."""

    resource_group: str
    definition: RuleDefinition


class AlertRuleClient(ABC):
    """
    Abstract base class for alert rule upsert clients.

    Production code talks HTTP to the management API; tests use an in-memory
    recording client. Both satisfy this interface.
    """

    @abstractmethod
    async def upsert(self, resource_group: str, definition: RuleDefinition) -> Acknowledgement:
        """
        Create or update a rule definition.

        Args:
            resource_group: Resource group that owns the rule
            definition: Canonical rule definition to send

        Returns:
            Acknowledgement carrying the request id, status code and the sent definition

        Raises:
            TransportError: The service could not be reached
            RemoteRejected: The service refused the definition
        """
        ...

    async def close(self) -> None:
        """Release any held connections."""
        return None

    async def __aenter__(self) -> "AlertRuleClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
