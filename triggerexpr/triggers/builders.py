"""Builders for individual automation engine triggers.

Each builder assembles the configuration for one trigger type, derives a
unique id with ``validate_uid`` and hands both to a ``TriggerFactory``.
Optional filters are left out of the configuration when not given so the
engine matches any value.
"""

from collections.abc import Sequence
from typing import Any

from triggerexpr.core.config import get_settings
from triggerexpr.core.logging import get_logger
from triggerexpr.models.trigger import TriggerTypeCode
from triggerexpr.observability.metrics import TRIGGERS_BUILT
from triggerexpr.triggers.factory import TriggerFactory, get_trigger_factory
from triggerexpr.triggers.uid import validate_uid

logger = get_logger(__name__)

DEFAULT_DIRECTORY_EVENT_KINDS = ("ENTRY_CREATE", "ENTRY_DELETE", "ENTRY_MODIFY")


def _build(
    type_code: TriggerTypeCode,
    configuration: dict[str, Any],
    trigger_name: str | None,
    factory: TriggerFactory | None,
) -> Any:
    trigger_id = validate_uid(trigger_name)
    trigger = (factory or get_trigger_factory()).create(type_code.value, configuration, trigger_id)
    TRIGGERS_BUILT.labels(type_code=type_code.value).inc()
    logger.debug("Trigger built", type_code=type_code.value, trigger_id=trigger_id)
    return trigger


def _put_optional(configuration: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        configuration[key] = value


def _join(values: str | Sequence[str]) -> str:
    if isinstance(values, str):
        return values
    return ",".join(values)


def item_state_update_trigger(
    item_name: str,
    state: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build an ItemStateUpdateTrigger.

    Args:
        item_name: Item to watch for updates
        state: Fire only when updated to this state
        trigger_name: Name used to derive the trigger id
        factory: Trigger factory, defaults to one returning ``TriggerSpec``

    Returns:
        Trigger created by the factory
    """
    configuration: dict[str, Any] = {"itemName": item_name}
    _put_optional(configuration, "state", state)
    return _build(TriggerTypeCode.ITEM_STATE_UPDATE, configuration, trigger_name, factory)


def item_state_change_trigger(
    item_name: str,
    previous_state: str | None = None,
    state: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build an ItemStateChangeTrigger.

    Args:
        item_name: Item to watch for changes
        previous_state: Fire only when changing from this state
        state: Fire only when changing to this state
        trigger_name: Name used to derive the trigger id
        factory: Trigger factory, defaults to one returning ``TriggerSpec``

    Returns:
        Trigger created by the factory
    """
    configuration: dict[str, Any] = {"itemName": item_name}
    _put_optional(configuration, "previousState", previous_state)
    _put_optional(configuration, "state", state)
    return _build(TriggerTypeCode.ITEM_STATE_CHANGE, configuration, trigger_name, factory)


def item_command_trigger(
    item_name: str,
    command: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build an ItemCommandTrigger.

    Args:
        item_name: Item to watch for commands
        command: Fire only for this command
        trigger_name: Name used to derive the trigger id
        factory: Trigger factory, defaults to one returning ``TriggerSpec``

    Returns:
        Trigger created by the factory
    """
    configuration: dict[str, Any] = {"itemName": item_name}
    _put_optional(configuration, "command", command)
    return _build(TriggerTypeCode.ITEM_COMMAND, configuration, trigger_name, factory)


def thing_status_update_trigger(
    thing_uid: str,
    status: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a ThingStatusUpdateTrigger."""
    configuration: dict[str, Any] = {"thingUID": thing_uid}
    _put_optional(configuration, "status", status)
    return _build(TriggerTypeCode.THING_STATUS_UPDATE, configuration, trigger_name, factory)


def thing_status_change_trigger(
    thing_uid: str,
    previous_status: str | None = None,
    status: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a ThingStatusChangeTrigger."""
    configuration: dict[str, Any] = {"thingUID": thing_uid}
    _put_optional(configuration, "previousStatus", previous_status)
    _put_optional(configuration, "status", status)
    return _build(TriggerTypeCode.THING_STATUS_CHANGE, configuration, trigger_name, factory)


def channel_event_trigger(
    channel_uid: str,
    event: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a ChannelEventTrigger.

    Args:
        channel_uid: Trigger channel to watch
        event: Fire only for this channel event, e.g. 'START'
        trigger_name: Name used to derive the trigger id
        factory: Trigger factory, defaults to one returning ``TriggerSpec``

    Returns:
        Trigger created by the factory
    """
    configuration: dict[str, Any] = {"channelUID": channel_uid}
    _put_optional(configuration, "event", event)
    return _build(TriggerTypeCode.CHANNEL_EVENT, configuration, trigger_name, factory)


def generic_event_trigger(
    event_source: str,
    event_types: str | Sequence[str],
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a GenericEventTrigger for any event on the event bus.

    Args:
        event_source: Source path below the event source prefix, e.g. 'items/MyItem'
        event_types: Event type name or names to match
        trigger_name: Name used to derive the trigger id
        factory: Trigger factory, defaults to one returning ``TriggerSpec``

    Returns:
        Trigger created by the factory
    """
    settings = get_settings()
    configuration = {
        "eventTopic": settings.event_topic,
        "eventSource": f"{settings.event_source_prefix}{event_source}/",
        "eventTypes": _join(event_types),
    }
    return _build(TriggerTypeCode.GENERIC_EVENT, configuration, trigger_name, factory)


def item_event_trigger(
    event_types: str | Sequence[str],
    item_name: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a GenericEventTrigger for Item events.

    Available event types are ItemStateEvent, ItemStatePredictedEvent,
    ItemCommandEvent, ItemStateChangedEvent, GroupItemStateChangedEvent,
    ItemAddedEvent, ItemUpdatedEvent and ItemRemovedEvent.
    """
    source = f"items/{item_name}" if item_name else "items"
    return generic_event_trigger(source, event_types, trigger_name, factory)


def item_added_trigger(
    item_name: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    return item_event_trigger("ItemAddedEvent", item_name, trigger_name, factory)


def item_removed_trigger(
    item_name: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    return item_event_trigger("ItemRemovedEvent", item_name, trigger_name, factory)


def item_updated_trigger(
    item_name: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    return item_event_trigger("ItemUpdatedEvent", item_name, trigger_name, factory)


def thing_event_trigger(
    event_types: str | Sequence[str],
    thing_uid: str | None = None,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a GenericEventTrigger for Thing events.

    Available event types are ThingStatusInfoChangedEvent,
    ThingStatusInfoEvent, ThingAddedEvent, ThingUpdatedEvent and
    ThingRemovedEvent.
    """
    source = f"things/{thing_uid}" if thing_uid else "things"
    return generic_event_trigger(source, event_types, trigger_name, factory)


def cron_trigger(
    cron_expression: str,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a GenericCronTrigger from a Quartz cron expression."""
    configuration = {"cronExpression": cron_expression}
    return _build(TriggerTypeCode.GENERIC_CRON, configuration, trigger_name, factory)


def startup_trigger(
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a SystemStartlevelTrigger firing once rules are loaded."""
    configuration = {"startlevel": get_settings().startup_start_level}
    return _build(TriggerTypeCode.SYSTEM_STARTLEVEL, configuration, trigger_name, factory)


def directory_event_trigger(
    path: str,
    event_kinds: Sequence[str] | None = None,
    watch_subdirectories: bool = False,
    trigger_name: str | None = None,
    factory: TriggerFactory | None = None,
) -> Any:
    """Build a DirectoryTrigger firing when a directory's contents change.

    Args:
        path: Directory to watch
        event_kinds: Watch event kinds, defaults to create, delete and modify
        watch_subdirectories: Also watch nested directories
        trigger_name: Name used to derive the trigger id
        factory: Trigger factory, defaults to one returning ``TriggerSpec``

    Returns:
        Trigger created by the factory
    """
    configuration = {
        "path": path,
        "event_kinds": _join(event_kinds or DEFAULT_DIRECTORY_EVENT_KINDS),
        "watch_subdirectories": watch_subdirectories,
    }
    return _build(TriggerTypeCode.DIRECTORY, configuration, trigger_name, factory)
