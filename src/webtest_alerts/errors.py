"""
Error types raised while building and provisioning webtest alert rules.

Local validation failures (``InvalidDefinition``) are kept apart from client
failures (``TransportError``, ``RemoteRejected``) so callers can always tell
whether a rule was refused before or after it left the process.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from webtest_alerts.rules.schemas import RuleDefinition


class WebtestAlertError(Exception):
    """Base class for all webtest alert errors."""


class InvalidDefinition(WebtestAlertError):
    """Operator input failed a structural precondition. Never reaches the network."""

    def __init__(self, problems: Sequence[str]):
        self.problems: List[str] = list(problems)
        super().__init__(f"invalid alert rule definition: {'; '.join(self.problems)}")


class ClientError(WebtestAlertError):
    """Base class for failures reported by an upsert client."""


class TransportError(ClientError):
    """The monitoring service could not be reached (connect failure, timeout)."""

    def __init__(self, message: str, *, resource_group: Optional[str] = None, rule_name: Optional[str] = None):
        super().__init__(message)
        self.resource_group = resource_group
        self.rule_name = rule_name


class RemoteRejected(ClientError):
    """The monitoring service answered but refused the definition."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        code: Optional[str] = None,
        request_id: Optional[str] = None,
        definition: Optional["RuleDefinition"] = None,
    ):
        detail = f"{code}: {message}" if code else message
        super().__init__(f"alert rule rejected with status {status_code} ({detail})")
        self.status_code = status_code
        self.code = code
        self.message = message
        self.request_id = request_id
        self.definition = definition
