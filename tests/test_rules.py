"""Tests for rule definitions and registration."""

import pytest
from pydantic import ValidationError

from triggerexpr.engine.parser import TriggerExpressionParser
from triggerexpr.models.rule import Rule, RuleDefinition, Visibility
from triggerexpr.rules.registrar import DEFAULT_RULE_NAME, InMemoryAutomationManager, RuleRegistrar
from triggerexpr.triggers.builders import cron_trigger


def test_definition_collects_triggers(parser: TriggerExpressionParser) -> None:
    definition = (
        RuleDefinition(name="Motion light")
        .with_trigger(parser.when("Member of gMotion_Sensors changed to ON"))
        .with_trigger(parser.when("System started"))
    )

    assert len(definition.triggers) == 4
    assert definition.is_valid


def test_definition_with_invalid_expression(parser: TriggerExpressionParser) -> None:
    definition = RuleDefinition(name="Broken").with_trigger(parser.when("Item Nope changed"))

    assert definition.triggers == [None]
    assert not definition.is_valid


def test_register_creates_rule(parser: TriggerExpressionParser) -> None:
    manager = InMemoryAutomationManager()
    registrar = RuleRegistrar(manager)
    definition = RuleDefinition(
        name="Noon",
        description="Runs at noon",
        tags=["time"],
        visibility=Visibility.HIDDEN,
    ).add_trigger(cron_trigger("0 0 12 * * ?"))

    rule = registrar.register(definition)

    assert rule is not None
    assert rule.uid.startswith("Noon")
    assert rule.visibility == Visibility.HIDDEN
    assert manager.get_rule(rule.uid) == rule
    assert registrar.list_rules() == [rule]


def test_register_rejects_invalid_triggers(parser: TriggerExpressionParser) -> None:
    registrar = RuleRegistrar()
    definition = (
        RuleDefinition(name="Half broken")
        .with_trigger(parser.when("Test_Switch_1"))
        .with_trigger(parser.when("Item Test_Switch_1 flipped"))
    )

    assert registrar.register(definition) is None
    assert registrar.list_rules() == []


def test_register_rejects_empty_triggers() -> None:
    assert RuleRegistrar().register(RuleDefinition(name="Nothing")) is None


def test_register_function(parser: TriggerExpressionParser) -> None:
    calls = []

    def door_opened(event) -> None:
        """Announce open doors."""
        calls.append(event)

    parser.when("Item Front_Door changed to OPEN")(door_opened)
    registrar = RuleRegistrar()

    rule = registrar.register_function(door_opened, tags=["doors"])

    assert rule.name == "door_opened"
    assert rule.description == "Announce open doors."
    assert rule.tags == ["doors"]
    assert len(rule.triggers) == 1
    rule.callback("event")
    assert calls == ["event"]


def test_register_function_without_triggers() -> None:
    def idle() -> None: ...

    assert RuleRegistrar().register_function(idle) is None


def test_default_rule_name() -> None:
    definition = RuleDefinition().add_trigger(cron_trigger("0 0 12 * * ?"))

    rule = RuleRegistrar().register(definition)

    assert rule.name == DEFAULT_RULE_NAME


def test_remove_rule() -> None:
    registrar = RuleRegistrar()
    rule = registrar.register(RuleDefinition(name="Temp").add_trigger(cron_trigger("0 0 12 * * ?")))

    assert registrar.remove(rule.uid) == rule
    assert registrar.get_rule(rule.uid) is None
    assert registrar.remove(rule.uid) is None


def test_rule_requires_triggers() -> None:
    with pytest.raises(ValidationError):
        Rule(uid="r1", name="r1", triggers=[])


def test_callback_excluded_from_dump() -> None:
    definition = RuleDefinition(name="Dump", callback=print)

    assert "callback" not in definition.model_dump()
