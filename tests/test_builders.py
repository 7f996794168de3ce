"""Tests for individual trigger builders and builder helpers."""

from typing import Any

from triggerexpr.engine.builder import add_trigger, item_trigger_name, poison_builder
from triggerexpr.models.trigger import ParseState, TriggerSpec
from triggerexpr.triggers import builders
from triggerexpr.triggers.factory import SpecTriggerFactory, get_trigger_factory


class Target:
    def __init__(self):
        self.triggers: list[Any] = []


def test_default_factory_is_singleton() -> None:
    factory = get_trigger_factory()

    assert isinstance(factory, SpecTriggerFactory)
    assert get_trigger_factory() is factory


def test_optional_filters_are_omitted() -> None:
    spec = builders.item_state_change_trigger("Light")

    assert isinstance(spec, TriggerSpec)
    assert spec.configuration == {"itemName": "Light"}
    assert spec.type_code == "core.ItemStateChangeTrigger"


def test_unnamed_trigger_gets_uuid_id() -> None:
    first = builders.item_command_trigger("Light", "ON")
    second = builders.item_command_trigger("Light", "ON")

    assert first.id != second.id
    assert len(first.id) == 36


def test_generic_event_joins_event_types() -> None:
    spec = builders.item_event_trigger(["ItemAddedEvent", "ItemRemovedEvent"], "Light")

    assert spec.configuration == {
        "eventTopic": "openhab/*",
        "eventSource": "openhab/items/Light/",
        "eventTypes": "ItemAddedEvent,ItemRemovedEvent",
    }


def test_item_lifecycle_shortcuts() -> None:
    assert builders.item_added_trigger().configuration["eventTypes"] == "ItemAddedEvent"
    assert builders.item_removed_trigger("Light").configuration["eventSource"] == "openhab/items/Light/"
    assert builders.item_updated_trigger().configuration["eventTypes"] == "ItemUpdatedEvent"


def test_thing_event_trigger() -> None:
    spec = builders.thing_event_trigger("ThingStatusInfoChangedEvent", "kodi:kodi:familyroom")

    assert spec.type_code == "core.GenericEventTrigger"
    assert spec.configuration["eventSource"] == "openhab/things/kodi:kodi:familyroom/"


def test_directory_event_trigger() -> None:
    spec = builders.directory_event_trigger("/etc/openhab/html", trigger_name="html changed")

    assert spec.type_code == "jsr223.DirectoryTrigger"
    assert spec.configuration == {
        "path": "/etc/openhab/html",
        "event_kinds": "ENTRY_CREATE,ENTRY_DELETE,ENTRY_MODIFY",
        "watch_subdirectories": False,
    }
    assert spec.id.startswith("html_changed")


def test_builders_use_given_factory() -> None:
    class TupleFactory:
        def create(self, type_code: str, configuration: dict[str, Any], trigger_id: str) -> tuple:
            return type_code, configuration

    result = builders.cron_trigger("0 0 12 * * ?", factory=TupleFactory())

    assert result == ("timer.GenericCronTrigger", {"cronExpression": "0 0 12 * * ?"})


def test_add_trigger_creates_list() -> None:
    def rule_function() -> None: ...

    add_trigger(rule_function, "t1")
    add_trigger(rule_function, "t2")

    assert rule_function.triggers == ["t1", "t2"]


def test_poison_builder_appends_marker() -> None:
    target = Target()
    target.triggers.append("existing")

    assert poison_builder(target) is target
    assert target.triggers == ["existing", None]


def test_item_trigger_names() -> None:
    changed = ParseState("x", trigger_type="changed", old_state="OPEN", new_state="CLOSED")
    command = ParseState("x", trigger_type="received command", new_state="ON")
    update = ParseState("x", trigger_type="received update")

    assert item_trigger_name("Door", changed) == "Item-Door-changed-from-OPEN-to-CLOSED"
    assert item_trigger_name("Light", command) == "Item-Light-received-command-ON"
    assert item_trigger_name("Light", update) == "Item-Light-received-update"
