"""Pytest configuration and fixtures."""

import pytest

from triggerexpr.engine.parser import TriggerExpressionParser
from triggerexpr.models.entity import Channel, ChannelKind, Item, Thing, ThingStatus
from triggerexpr.registry.entities import EntityRegistry

ECLIPSE_CHANNEL = "astro:sun:local:eclipse#event"
ELEVATION_CHANNEL = "astro:sun:local:position#elevation"
KODI_THING = "kodi:kodi:familyroom"


@pytest.fixture
def sample_items() -> list[Item]:
    """Items of a small home: switches, motion sensors and nested contact groups."""
    return [
        Item(name="Test_Switch_1", type="Switch"),
        Item(name="Test_Switch_2", type="Switch"),
        Item(name="Living_Dimmer", type="Dimmer"),
        Item(name="Outdoor_Temperature", type="Number:Temperature"),
        Item(name="Garage_Door", type="Rollershutter"),
        Item(name="gMotion_Sensors", type="Group", base_type="Switch"),
        Item(name="Motion_Kitchen", type="Switch", groups=["gMotion_Sensors"]),
        Item(name="Motion_Hallway", type="Switch", groups=["gMotion_Sensors"]),
        Item(name="Motion_Garage", type="Switch", groups=["gMotion_Sensors"]),
        Item(name="gContact_Sensors", type="Group"),
        Item(name="gDoors", type="Group", groups=["gContact_Sensors"]),
        Item(name="gWindows", type="Group", groups=["gContact_Sensors"]),
        Item(name="Front_Door", type="Contact", groups=["gDoors"]),
        Item(name="Back_Door", type="Contact", groups=["gDoors"]),
        Item(name="Kitchen_Window", type="Contact", groups=["gWindows"]),
        # Reachable through both subgroups
        Item(name="Patio_Door", type="Contact", groups=["gDoors", "gWindows"]),
        Item(name="gEmpty", type="Group"),
    ]


@pytest.fixture
def sample_things() -> list[Thing]:
    return [Thing(uid=KODI_THING, label="Kodi", status=ThingStatus.ONLINE)]


@pytest.fixture
def sample_channels() -> list[Channel]:
    return [
        Channel(uid=ECLIPSE_CHANNEL, kind=ChannelKind.TRIGGER),
        Channel(uid=ELEVATION_CHANNEL, kind=ChannelKind.STATE, item_type="Number:Angle"),
    ]


@pytest.fixture
def registry(
    sample_items: list[Item],
    sample_things: list[Thing],
    sample_channels: list[Channel],
) -> EntityRegistry:
    """Registry populated with the sample entities."""
    return EntityRegistry(items=sample_items, things=sample_things, channels=sample_channels)


@pytest.fixture
def parser(registry: EntityRegistry) -> TriggerExpressionParser:
    return TriggerExpressionParser(registry)
