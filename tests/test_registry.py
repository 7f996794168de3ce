"""Tests for the entity registry and entity descriptors."""

import pytest
from pydantic import ValidationError

from triggerexpr.core.errors import DuplicateEntityError, EntityNotFoundError
from triggerexpr.models.entity import (
    ByHandle,
    ByName,
    Channel,
    Item,
    ItemType,
    Thing,
    ThingStatus,
    as_ref,
    is_valid_channel_uid,
    is_valid_thing_uid,
    split_item_type,
)
from triggerexpr.registry.entities import EntityRegistry


def test_split_item_type() -> None:
    assert split_item_type("Switch") == (ItemType.SWITCH, None)
    assert split_item_type("Number:Temperature") == (ItemType.NUMBER, "Temperature")
    with pytest.raises(ValueError, match="not a valid item type"):
        split_item_type("Lamp")
    with pytest.raises(ValueError, match="Only Number items"):
        split_item_type("Switch:Power")


def test_item_validation() -> None:
    with pytest.raises(ValidationError):
        Item(name="bad name", type="Switch")
    with pytest.raises(ValidationError):
        Item(name="Light", type="Switch", base_type="Switch")
    with pytest.raises(ValidationError):
        Item(name="gAll", type="Group", base_type="Group")
    with pytest.raises(ValidationError):
        Item(name="gSelf", type="Group", groups=["gSelf"])


def test_uid_syntax() -> None:
    assert is_valid_thing_uid("kodi:kodi:familyroom")
    assert is_valid_thing_uid("mqtt:topic:broker:sensor")
    assert not is_valid_thing_uid("kodi:familyroom")
    assert is_valid_channel_uid("astro:sun:local:eclipse#event")
    assert is_valid_channel_uid("kodi:kodi:familyroom:mute")
    assert not is_valid_channel_uid("kodi:kodi:familyroom")
    with pytest.raises(ValidationError):
        Thing(uid="kodi")


def test_channel_thing_uid() -> None:
    channel = Channel(uid="astro:sun:local:eclipse#event")

    assert channel.thing_uid == "astro:sun:local"
    assert not channel.is_trigger


def test_entity_refs() -> None:
    item = Item(name="Light", type="Switch")
    thing = Thing(uid="kodi:kodi:familyroom")

    assert as_ref("Light") == ByName("Light")
    assert as_ref(item) == ByHandle(item)
    assert as_ref(thing).name == "kodi:kodi:familyroom"
    assert as_ref(ByName("x")) == ByName("x")
    with pytest.raises(TypeError):
        as_ref(42)


def test_add_item_by_name() -> None:
    registry = EntityRegistry()

    item = registry.add_item("Light", "Dimmer", groups=["gLights"], label="Light", tags=["Lighting"])

    assert registry.get_item("Light") == item
    assert item.groups == ["gLights"]
    assert registry.has_item("Light")


def test_add_item_by_name_requires_type() -> None:
    with pytest.raises(TypeError, match="item_type"):
        EntityRegistry().add_item("Light")


def test_add_duplicate_item(registry: EntityRegistry) -> None:
    with pytest.raises(DuplicateEntityError, match="Item 'Test_Switch_1' already exists"):
        registry.add_item("Test_Switch_1", "Switch")


def test_update_item(registry: EntityRegistry) -> None:
    registry.update_item(Item(name="Test_Switch_1", type="Switch", label="Updated"))

    assert registry.get_item("Test_Switch_1").label == "Updated"
    with pytest.raises(EntityNotFoundError):
        registry.update_item(Item(name="Unknown", type="Switch"))


def test_remove_group_detaches_members(registry: EntityRegistry) -> None:
    removed = registry.remove_item("gMotion_Sensors")

    assert removed.name == "gMotion_Sensors"
    assert registry.get_item("gMotion_Sensors") is None
    assert registry.get_item("Motion_Kitchen").groups == []
    with pytest.raises(EntityNotFoundError, match="Item 'gMotion_Sensors' not found"):
        registry.remove_item("gMotion_Sensors")


def test_resolve_item(registry: EntityRegistry) -> None:
    item = registry.get_item("Test_Switch_1")

    assert registry.resolve_item("Test_Switch_1") == item
    assert registry.resolve_item(ByHandle(item)) == item
    assert registry.resolve_item("Missing") is None
    assert registry.resolve_item(Thing(uid="kodi:kodi:familyroom")) is None


def test_get_members(registry: EntityRegistry) -> None:
    names = [item.name for item in registry.get_members("gContact_Sensors")]

    assert names == ["gDoors", "gWindows"]


def test_get_all_members_skips_groups_and_duplicates(registry: EntityRegistry) -> None:
    names = [item.name for item in registry.get_all_members("gContact_Sensors")]

    assert names == ["Front_Door", "Back_Door", "Patio_Door", "Kitchen_Window"]


def test_get_all_members_tolerates_cycles() -> None:
    registry = EntityRegistry(items=[
        Item(name="gA", type="Group", groups=["gB"]),
        Item(name="gB", type="Group", groups=["gA"]),
        Item(name="Lamp", type="Switch", groups=["gA"]),
    ])

    assert [item.name for item in registry.get_all_members("gA")] == ["Lamp"]


def test_things(registry: EntityRegistry) -> None:
    thing = registry.get_thing("kodi:kodi:familyroom")

    assert thing.status == ThingStatus.ONLINE
    with pytest.raises(DuplicateEntityError):
        registry.add_thing(Thing(uid="kodi:kodi:familyroom"))
    assert registry.remove_thing("kodi:kodi:familyroom") == thing
    assert registry.list_things() == []
    with pytest.raises(EntityNotFoundError):
        registry.remove_thing("kodi:kodi:familyroom")


def test_channels(registry: EntityRegistry) -> None:
    channel = registry.get_channel("astro:sun:local:eclipse#event")

    assert channel.is_trigger
    assert len(registry.list_channels()) == 2
    registry.remove_channel("astro:sun:local:eclipse#event")
    assert registry.get_channel("astro:sun:local:eclipse#event") is None
    with pytest.raises(EntityNotFoundError):
        registry.remove_channel("astro:sun:local:eclipse#event")
