"""
Definition builder: compiles a ``RuleInput`` into a canonical ``RuleDefinition``.

Pure and repeatable. Each call reads only the current state of the input and
returns a fresh snapshot; the input is never mutated and earlier snapshots never
change when the input does.
"""

from datetime import timedelta
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from webtest_alerts.errors import InvalidDefinition
from webtest_alerts.rules.schemas import (
    Action,
    EmailAction,
    LocationThresholdCondition,
    MetricDataSource,
    RuleDefinition,
    RuleInput,
    WebhookAction,
)

# Links the rule to its monitored resource for reverse navigation in the portal
RESERVED_TAG_PREFIX = "hidden-link:"
RESERVED_TAG_VALUE = "Resource"


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_rule_input(rule_input: RuleInput) -> List[str]:
    """Return every structural problem found in ``rule_input`` (empty when valid)."""
    problems: List[str] = []

    if _is_blank(rule_input.name):
        problems.append("name must be a non-empty string")
    if _is_blank(rule_input.resource_group):
        problems.append("resource_group must be a non-empty string")

    count = rule_input.failed_location_count
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        problems.append(f"failed_location_count must be a positive integer, got {count!r}")

    window = rule_input.window_size
    if not isinstance(window, timedelta) or window <= timedelta(0):
        problems.append(f"window_size must be a strictly positive duration, got {window!r}")

    target = rule_input.target_resource_uri
    if target is not None and not isinstance(target, str):
        problems.append(f"target_resource_uri must be a string, got {target!r}")

    tags = rule_input.tags
    if tags is not None and not isinstance(tags, Mapping):
        problems.append(f"tags must be a mapping of strings, got {type(tags).__name__}")
    else:
        for key, value in (tags or {}).items():
            if not isinstance(key, str) or not isinstance(value, str):
                problems.append(f"tag {key!r}: keys and values must be strings")
            elif key.startswith(RESERVED_TAG_PREFIX):
                problems.append(f"tag '{key}' uses the reserved prefix '{RESERVED_TAG_PREFIX}'")

    actions = rule_input.actions
    if actions is not None:
        if not isinstance(actions, (list, tuple)):
            problems.append(f"actions must be a list of actions, got {type(actions).__name__}")
        else:
            for index, action in enumerate(actions):
                if not isinstance(action, (EmailAction, WebhookAction)):
                    problems.append(
                        f"actions[{index}] must be an EmailAction or WebhookAction, got {type(action).__name__}"
                    )

    return problems


def build_tags(rule_input: RuleInput) -> Dict[str, str]:
    """Operator tags plus the reserved resource link, which always wins."""
    tags = dict(rule_input.tags or {})
    tags[RESERVED_TAG_PREFIX + (rule_input.target_resource_uri or "")] = RESERVED_TAG_VALUE
    return tags


def copy_actions(actions: Optional[List[Action]]) -> Optional[Tuple[Action, ...]]:
    # None stays None: "no action policy" is not the same as "zero actions".
    # Actions are frozen, so the snapshot can share them with the input.
    if actions is None:
        return None
    return tuple(actions)


def build_rule_definition(rule_input: RuleInput) -> RuleDefinition:
    """
    Compile operator input into a canonical webtest alert rule definition.

    Args:
        rule_input: Current operator parameters. Not modified.

    Returns:
        A new frozen RuleDefinition.

    Raises:
        InvalidDefinition: If the input fails a structural precondition.
    """
    problems = validate_rule_input(rule_input)
    if problems:
        raise InvalidDefinition(problems)

    try:
        return RuleDefinition(
            name=rule_input.name,
            location=rule_input.location,
            tags=build_tags(rule_input),
            is_enabled=not rule_input.disable_rule,
            description=rule_input.description,
            condition=LocationThresholdCondition(
                data_source=MetricDataSource(),
                failed_location_count=rule_input.failed_location_count,
                window_size=rule_input.window_size,
            ),
            actions=copy_actions(rule_input.actions),
        )
    except ValidationError as exc:
        raise InvalidDefinition(
            [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()]
        ) from exc
