"""Rule registration with the automation manager."""

from collections.abc import Callable
from typing import Any, Protocol

from triggerexpr.core.logging import get_logger
from triggerexpr.models.rule import Rule, RuleDefinition, Visibility
from triggerexpr.observability.metrics import RULES_REGISTERED
from triggerexpr.triggers.uid import validate_uid

logger = get_logger(__name__)

DEFAULT_RULE_NAME = "triggerexpr-rule"


class AutomationManager(Protocol):
    """Host collaborator owning registered rules."""

    def add_rule(self, rule: Rule) -> Rule: ...

    def remove_rule(self, uid: str) -> Rule | None: ...

    def get_rule(self, uid: str) -> Rule | None: ...

    def list_rules(self) -> list[Rule]: ...


class InMemoryAutomationManager:
    """Automation manager keeping rules in a dict."""

    def __init__(self):
        self._rules: dict[str, Rule] = {}

    def add_rule(self, rule: Rule) -> Rule:
        self._rules[rule.uid] = rule
        return rule

    def remove_rule(self, uid: str) -> Rule | None:
        return self._rules.pop(uid, None)

    def get_rule(self, uid: str) -> Rule | None:
        return self._rules.get(uid)

    def list_rules(self) -> list[Rule]:
        return list(self._rules.values())


class RuleRegistrar:
    """Turns rule definitions into registered rules.

    Definitions without triggers, or with a trigger expression that could
    not be parsed, are skipped with a warning instead of being registered.
    """

    def __init__(self, manager: AutomationManager | None = None):
        self._manager = manager or InMemoryAutomationManager()

    def register(self, definition: RuleDefinition) -> Rule | None:
        """Register a rule definition.

        Args:
            definition: Rule definition with its triggers

        Returns:
            The registered rule, or None if the definition was rejected
        """
        name = definition.name or getattr(definition.callback, "__name__", None) or DEFAULT_RULE_NAME

        if not definition.triggers:
            logger.warning("Not creating rule due to no triggers being defined", rule_name=name)
            RULES_REGISTERED.labels(status="rejected").inc()
            return None
        if not definition.is_valid:
            logger.warning(
                "Not creating rule due to an invalid trigger definition",
                rule_name=name,
            )
            RULES_REGISTERED.labels(status="rejected").inc()
            return None

        rule = Rule(
            uid=validate_uid(name),
            name=name,
            description=definition.description,
            tags=list(definition.tags),
            visibility=definition.visibility,
            triggers=list(definition.triggers),
            callback=definition.callback,
        )
        added = self._manager.add_rule(rule)
        RULES_REGISTERED.labels(status="created").inc()
        logger.debug("Added rule", rule_name=added.name, rule_uid=added.uid, triggers=len(added.triggers))
        return added

    def register_function(
        self,
        func: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
        tags: list[str] | None = None,
        visibility: Visibility = Visibility.VISIBLE,
    ) -> Rule | None:
        """Register a function whose ``triggers`` list was filled by ``when`` builders.

        Example::

            def motion(event): ...

            parser.when("Member of gMotion_Sensors changed to ON")(motion)
            registrar.register_function(motion, "Motion light")
        """
        definition = RuleDefinition(
            name=name or getattr(func, "__name__", None),
            description=description or (func.__doc__ or "").strip(),
            tags=tags or [],
            visibility=visibility,
            triggers=list(getattr(func, "triggers", None) or []),
            callback=func,
        )
        return self.register(definition)

    def remove(self, uid: str) -> Rule | None:
        """Remove a registered rule."""
        rule = self._manager.remove_rule(uid)
        if rule is None:
            logger.warning("Rule not found", rule_uid=uid)
        else:
            logger.debug("Removed rule", rule_uid=uid)
        return rule

    def get_rule(self, uid: str) -> Rule | None:
        return self._manager.get_rule(uid)

    def list_rules(self) -> list[Rule]:
        return self._manager.list_rules()
