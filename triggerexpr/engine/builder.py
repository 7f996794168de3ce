"""Builder strategies turning a validated expression into triggers."""

from collections.abc import Callable
from typing import Any, TypeVar

from triggerexpr.core.logging import get_logger
from triggerexpr.models.trigger import (
    ADDED,
    CHANGED,
    GROUP_TARGETS,
    ITEM_TARGETS,
    MODIFIED,
    RECEIVED_COMMAND,
    RECEIVED_UPDATE,
    REMOVED,
    ParseState,
    TargetType,
)
from triggerexpr.registry.entities import EntityRegistry
from triggerexpr.triggers import builders
from triggerexpr.triggers.factory import TriggerFactory

logger = get_logger(__name__)

TargetT = TypeVar("TargetT")
TriggerBuilder = Callable[[TargetT], TargetT]

ITEM_EVENT_NAMES = {
    ADDED: "ItemAddedEvent",
    REMOVED: "ItemRemovedEvent",
    MODIFIED: "ItemUpdatedEvent",
}
THING_EVENT_NAMES = {
    ADDED: "ThingAddedEvent",
    REMOVED: "ThingRemovedEvent",
    MODIFIED: "ThingUpdatedEvent",
}


def add_trigger(target: TargetT, trigger: Any) -> TargetT:
    """Append a trigger (or the ``None`` marker) to a target's trigger list.

    Targets without a ``triggers`` attribute, such as plain functions, get
    an empty list first.
    """
    if getattr(target, "triggers", None) is None:
        target.triggers = []
    target.triggers.append(trigger)
    return target


def poison_builder(target: TargetT) -> TargetT:
    """Mark a target as having an invalid trigger definition."""
    return add_trigger(target, None)


def item_trigger_name(item_name: str, state: ParseState) -> str:
    """Derive a readable trigger name for one item.

    e.g. ``Item-Door-changed-from-OPEN-to-CLOSED`` or
    ``Item-Light-received-command-ON``.
    """
    name = f"Item-{item_name}-{state.trigger_type.replace(' ', '-')}"
    if state.old_state is not None:
        name += f"-from-{state.old_state}"
    if state.new_state is not None:
        name += f"-to-{state.new_state}" if state.trigger_type == CHANGED else f"-{state.new_state}"
    return name


class TriggerBuilderFactory:
    """Selects the builder strategy for a validated ``ParseState``."""

    def __init__(self, registry: EntityRegistry, factory: TriggerFactory | None = None):
        self._registry = registry
        self._factory = factory

    def select(self, state: ParseState, trigger_name: str | None = None) -> TriggerBuilder:
        """Return the builder for the expression's target and trigger type.

        Args:
            state: Validated parse state
            trigger_name: Explicit trigger name; the expression is used when
                omitted

        Returns:
            Callable attaching the triggers to a target and returning it
        """
        target_type = TargetType(state.target_type)
        name = trigger_name or state.expression

        if target_type in ITEM_TARGETS:
            if state.is_lifecycle:
                return self._item_event_builder(state, name)
            return self._item_builder(state, target_type, trigger_name)
        if target_type == TargetType.THING:
            if state.is_lifecycle:
                return self._thing_event_builder(state, name)
            return self._thing_builder(state, name)
        if target_type == TargetType.CHANNEL:
            return self._channel_builder(state, name)
        if target_type == TargetType.SYSTEM:
            return self._system_builder(name)
        return self._cron_builder(state, name)

    def _members(self, state: ParseState, target_type: TargetType) -> list[str]:
        if target_type not in GROUP_TARGETS:
            return [state.trigger_target]
        if target_type == TargetType.MEMBER_OF:
            members = self._registry.get_members(state.trigger_target)
        else:
            members = self._registry.get_all_members(state.trigger_target)
        return [member.name for member in members]

    def _item_builder(
        self,
        state: ParseState,
        target_type: TargetType,
        trigger_name: str | None,
    ) -> TriggerBuilder:
        def item_trigger(target: TargetT) -> TargetT:
            member_names = self._members(state, target_type)
            if not member_names:
                logger.warning(
                    "Group has no members, no triggers created",
                    expression=state.expression,
                    group=state.trigger_target,
                )
            for member_name in member_names:
                name = trigger_name or item_trigger_name(member_name, state)
                if state.trigger_type == RECEIVED_UPDATE:
                    trigger = builders.item_state_update_trigger(
                        member_name, state.new_state, name, self._factory
                    )
                elif state.trigger_type == RECEIVED_COMMAND:
                    trigger = builders.item_command_trigger(
                        member_name, state.new_state, name, self._factory
                    )
                else:
                    trigger = builders.item_state_change_trigger(
                        member_name, state.old_state, state.new_state, name, self._factory
                    )
                add_trigger(target, trigger)
            logger.debug(
                "Created item triggers",
                expression=state.expression,
                count=len(member_names),
            )
            return target

        return item_trigger

    def _item_event_builder(self, state: ParseState, name: str) -> TriggerBuilder:
        def item_event_trigger(target: TargetT) -> TargetT:
            trigger = builders.item_event_trigger(
                ITEM_EVENT_NAMES[state.trigger_type],
                state.trigger_target or None,
                name,
                self._factory,
            )
            logger.debug("Created item event trigger", expression=state.expression)
            return add_trigger(target, trigger)

        return item_event_trigger

    def _thing_builder(self, state: ParseState, name: str) -> TriggerBuilder:
        def thing_trigger(target: TargetT) -> TargetT:
            if state.new_state is not None or state.old_state is not None:
                if state.trigger_type == CHANGED:
                    trigger = builders.thing_status_change_trigger(
                        state.trigger_target, state.old_state, state.new_state, name, self._factory
                    )
                else:
                    trigger = builders.thing_status_update_trigger(
                        state.trigger_target, state.new_state, name, self._factory
                    )
            else:
                event_type = (
                    "ThingStatusInfoChangedEvent"
                    if state.trigger_type == CHANGED
                    else "ThingStatusInfoEvent"
                )
                trigger = builders.thing_event_trigger(
                    event_type, state.trigger_target, name, self._factory
                )
            logger.debug("Created thing trigger", expression=state.expression)
            return add_trigger(target, trigger)

        return thing_trigger

    def _thing_event_builder(self, state: ParseState, name: str) -> TriggerBuilder:
        def thing_event_trigger(target: TargetT) -> TargetT:
            trigger = builders.thing_event_trigger(
                THING_EVENT_NAMES[state.trigger_type],
                state.trigger_target or None,
                name,
                self._factory,
            )
            logger.debug("Created thing event trigger", expression=state.expression)
            return add_trigger(target, trigger)

        return thing_event_trigger

    def _channel_builder(self, state: ParseState, name: str) -> TriggerBuilder:
        def channel_trigger(target: TargetT) -> TargetT:
            trigger = builders.channel_event_trigger(
                state.trigger_target, state.new_state, name, self._factory
            )
            logger.debug("Created channel trigger", expression=state.expression)
            return add_trigger(target, trigger)

        return channel_trigger

    def _cron_builder(self, state: ParseState, name: str) -> TriggerBuilder:
        def cron_trigger(target: TargetT) -> TargetT:
            trigger = builders.cron_trigger(state.trigger_type, name, self._factory)
            logger.debug("Created cron trigger", expression=state.expression)
            return add_trigger(target, trigger)

        return cron_trigger

    def _system_builder(self, name: str) -> TriggerBuilder:
        def system_trigger(target: TargetT) -> TargetT:
            trigger = builders.startup_trigger(name, self._factory)
            logger.debug("Created system trigger", trigger_name=name)
            return add_trigger(target, trigger)

        return system_trigger
