"""Tests for semantic validation against the entity registry."""

import pytest

from triggerexpr.core.errors import GrammarError, SemanticError
from triggerexpr.engine.grammar import TriggerGrammar
from triggerexpr.engine.validator import TriggerValidator
from triggerexpr.models.entity import ByName
from triggerexpr.models.trigger import ParseState
from triggerexpr.registry.entities import EntityRegistry


def validate(registry: EntityRegistry, expression: str) -> ParseState:
    state = TriggerGrammar().parse(expression)
    TriggerValidator(registry).validate(state)
    return state


@pytest.mark.parametrize(
    "expression",
    [
        "Test_Switch_1",
        "Item Test_Switch_1 changed from ON to OFF",
        "Item Test_Switch_1 received update NULL",
        "Item Test_Switch_1 received command REFRESH",
        "Item Living_Dimmer received command 42",
        "Item Living_Dimmer changed to ON",
        "Item Outdoor_Temperature changed to 21.5",
        "Item Outdoor_Temperature received update 21.5°C",
        "Item Garage_Door received command STOP",
        "Item gMotion_Sensors changed from ON to OFF",
        "Member of gMotion_Sensors changed to ON",
        "Descendent of gContact_Sensors changed from OPEN to CLOSED",
        "Item gContact_Sensors changed to OPEN",
        "Item added",
        "Item Unknown_Item removed",
        "Thing kodi:kodi:familyroom changed from ONLINE to OFFLINE",
        "Thing kodi:kodi:familyroom received update ONLINE",
        "Thing kodi:kodi:familyroom changed",
        "Thing unknown:thing:uid added",
        "Channel astro:sun:local:eclipse#event triggered START",
        "Channel astro:sun:local:eclipse#event triggered",
        "Time cron 0 0/5 * * * ?",
        "System started",
    ],
)
def test_valid_expressions(registry: EntityRegistry, expression: str) -> None:
    validate(registry, expression)


def test_missing_item(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="Item 'Nope' is not in the ItemRegistry"):
        validate(registry, "Item Nope changed")


def test_member_of_requires_group(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="'Member of' was specified, but 'Test_Switch_1' is not a group"):
        validate(registry, "Member of Test_Switch_1 changed")


def test_descendent_of_requires_group(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="'Descendent of' was specified"):
        validate(registry, "Descendent of Front_Door changed")


@pytest.mark.parametrize(
    "expression,message",
    [
        ("Item Test_Switch_1 changed from OPEN", "'OPEN' is not a valid state for 'Test_Switch_1'"),
        ("Item Test_Switch_1 changed to 50", "'50' is not a valid state for 'Test_Switch_1'"),
        ("Item Front_Door received update ON", "'ON' is not a valid state for 'Front_Door'"),
        ("Item Living_Dimmer changed to 150", "'150' is not a valid state for 'Living_Dimmer'"),
        ("Item gMotion_Sensors changed to CLOSED", "'CLOSED' is not a valid state for 'gMotion_Sensors'"),
    ],
)
def test_invalid_states(registry: EntityRegistry, expression: str, message: str) -> None:
    with pytest.raises(SemanticError, match=message):
        validate(registry, expression)


@pytest.mark.parametrize(
    "expression,message",
    [
        ("Item Test_Switch_1 received command OPEN", "'OPEN' is not a valid command for 'Test_Switch_1'"),
        ("Item Test_Switch_1 received command NULL", "'NULL' is not a valid command for 'Test_Switch_1'"),
        ("Item Front_Door received command CLOSED", "'CLOSED' is not a valid command for 'Front_Door'"),
    ],
)
def test_invalid_commands(registry: EntityRegistry, expression: str, message: str) -> None:
    with pytest.raises(SemanticError, match=message):
        validate(registry, expression)


def test_group_without_base_uses_member_types(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="'ON' is not a valid state for 'gContact_Sensors'"):
        validate(registry, "Item gContact_Sensors changed to ON")


def test_empty_group_only_accepts_undefined(registry: EntityRegistry) -> None:
    validate(registry, "Item gEmpty changed to NULL")
    with pytest.raises(SemanticError):
        validate(registry, "Item gEmpty changed to ON")


def test_states_of_group_targets_are_not_checked(registry: EntityRegistry) -> None:
    validate(registry, "Member of gMotion_Sensors changed to WHATEVER")


def test_invalid_thing_uid(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="'kodi' is not a valid Thing UID"):
        validate(registry, "Thing kodi changed")


def test_thing_not_in_registry(registry: EntityRegistry) -> None:
    with pytest.raises(GrammarError, match="not in the ThingRegistry"):
        validate(registry, "Thing kodi:kodi:kitchen received update ONLINE")


def test_invalid_thing_status(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="'SLEEPING' is not a valid Thing status"):
        validate(registry, "Thing kodi:kodi:familyroom changed from ONLINE to SLEEPING")


def test_invalid_channel_uid(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="is not a valid Channel UID"):
        validate(registry, "Channel astro:sun triggered")


def test_missing_channel(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="does not exist"):
        validate(registry, "Channel astro:moon:local:eclipse#event triggered")


def test_state_channel_cannot_trigger(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="is not a trigger Channel"):
        validate(registry, "Channel astro:sun:local:position#elevation triggered")


def test_system_only_supports_started(registry: EntityRegistry) -> None:
    with pytest.raises(SemanticError, match="The only valid trigger_target value is 'started'"):
        validate(registry, "System shuts down")


@pytest.mark.parametrize("expression", ["Member of gMotion_Sensors", "Descendent of gContact_Sensors"])
def test_missing_trigger_type(registry: EntityRegistry, expression: str) -> None:
    with pytest.raises(GrammarError, match="trigger_type cannot be empty") as exc_info:
        validate(registry, expression)

    assert not isinstance(exc_info.value, SemanticError)


def test_item_lookups_go_through_resolve_item(
    registry: EntityRegistry,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    resolved = []
    resolve_item = registry.resolve_item

    def recording_resolve(ref):
        resolved.append(ref)
        return resolve_item(ref)

    monkeypatch.setattr(registry, "resolve_item", recording_resolve)

    validate(registry, "Item Test_Switch_1 changed to ON")

    assert resolved == [ByName("Test_Switch_1")]


def test_invalid_target_type_is_grammar_error(registry: EntityRegistry) -> None:
    state = ParseState(expression="Widget x", target_type="Widget", trigger_target="x")

    with pytest.raises(GrammarError, match="target_type is missing or invalid") as exc_info:
        TriggerValidator(registry).validate(state)

    assert not isinstance(exc_info.value, SemanticError)
