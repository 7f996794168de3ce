"""Trigger expression and trigger specification models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from triggerexpr.core.errors import TriggerExpressionError


class TargetType(str, Enum):
    """Kind of entity a trigger expression watches."""

    ITEM = "Item"
    MEMBER_OF = "Member of"
    DESCENDENT_OF = "Descendent of"
    THING = "Thing"
    CHANNEL = "Channel"
    SYSTEM = "System"
    TIME = "Time"

    @classmethod
    def parse(cls, value: str | None) -> "TargetType | None":
        """Return the matching target type or None."""
        if value is None:
            return None
        return cls._value2member_map_.get(value)


ITEM_TARGETS = frozenset({TargetType.ITEM, TargetType.MEMBER_OF, TargetType.DESCENDENT_OF})
GROUP_TARGETS = frozenset({TargetType.MEMBER_OF, TargetType.DESCENDENT_OF})

# Trigger type keywords
CHANGED = "changed"
RECEIVED_UPDATE = "received update"
RECEIVED_COMMAND = "received command"
TRIGGERED = "triggered"
ADDED = "added"
REMOVED = "removed"
MODIFIED = "modified"
LIFECYCLE_EVENTS = frozenset({ADDED, REMOVED, MODIFIED})


class TriggerTypeCode(str, Enum):
    """Type codes understood by the automation engine."""

    ITEM_STATE_CHANGE = "core.ItemStateChangeTrigger"
    ITEM_STATE_UPDATE = "core.ItemStateUpdateTrigger"
    ITEM_COMMAND = "core.ItemCommandTrigger"
    GENERIC_EVENT = "core.GenericEventTrigger"
    THING_STATUS_CHANGE = "core.ThingStatusChangeTrigger"
    THING_STATUS_UPDATE = "core.ThingStatusUpdateTrigger"
    CHANNEL_EVENT = "core.ChannelEventTrigger"
    GENERIC_CRON = "timer.GenericCronTrigger"
    SYSTEM_STARTLEVEL = "core.SystemStartlevelTrigger"
    DIRECTORY = "jsr223.DirectoryTrigger"


class TriggerSpec(BaseModel):
    """A single trigger handed to the automation engine."""

    type_code: str = Field(..., description="Trigger type UID, e.g. 'core.ItemStateChangeTrigger'")
    configuration: dict[str, Any] = Field(default_factory=dict, description="Trigger configuration")
    id: str = Field(..., description="Unique trigger id")


@dataclass
class ParseState:
    """Call-local state of the trigger expression grammar."""

    expression: str
    tokens: list[str] = field(default_factory=list)
    target_type: str | None = None
    trigger_target: str | None = None
    trigger_type: str | None = None
    old_state: str | None = None
    new_state: str | None = None

    @property
    def is_lifecycle(self) -> bool:
        return self.trigger_type in LIFECYCLE_EVENTS

    def describe(self) -> dict[str, Any]:
        """Slot values for logging."""
        return {
            "target_type": self.target_type,
            "trigger_target": self.trigger_target,
            "trigger_type": self.trigger_type,
            "old_state": self.old_state,
            "new_state": self.new_state,
        }


@dataclass
class ParseResult:
    """Outcome of parsing one trigger expression."""

    expression: str
    triggers: list[Any] = field(default_factory=list)
    error: TriggerExpressionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
