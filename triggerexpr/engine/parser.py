"""Trigger expression parser facade."""

from dataclasses import dataclass, field
from typing import Any

from triggerexpr.core.errors import GrammarError, SemanticError, TriggerParserFailure
from triggerexpr.core.logging import get_logger
from triggerexpr.engine.builder import TriggerBuilder, TriggerBuilderFactory, poison_builder
from triggerexpr.engine.grammar import TriggerGrammar
from triggerexpr.engine.validator import TriggerValidator
from triggerexpr.models.trigger import ParseResult, ParseState, TargetType
from triggerexpr.observability.metrics import EXPRESSIONS_PARSED
from triggerexpr.registry.entities import EntityRegistry
from triggerexpr.triggers.factory import TriggerFactory

logger = get_logger(__name__)


def metric_target_type(state: ParseState | None) -> str:
    """Bounded metric label for the target type of a (partially) parsed expression."""
    if state is None or state.target_type is None:
        return "unknown"
    target_type = TargetType.parse(state.target_type)
    return target_type.value if target_type else "invalid"


@dataclass
class _TriggerCollector:
    """Scratch target collecting the triggers of a single parse."""

    triggers: list[Any] = field(default_factory=list)


class TriggerExpressionParser:
    """Parses trigger expressions into triggers for the automation engine.

    Examples of accepted expressions::

        Time cron 55 55 5 * * ?
        Item Test_Switch_1 received command OFF
        Item gMotion_Sensors changed
        Member of gMotion_Sensors changed from ON to OFF
        Descendent of gContact_Sensors changed from OPEN to CLOSED
        Item added
        Thing kodi:kodi:familyroom changed from ONLINE to OFFLINE
        Thing kodi:kodi:familyroom received update ONLINE
        Channel astro:sun:local:eclipse#event triggered START
        System started
    """

    def __init__(self, registry: EntityRegistry, factory: TriggerFactory | None = None):
        """Initialize parser with host collaborators.

        Args:
            registry: Entity registry used for validation and group fan-out
            factory: Trigger factory, defaults to one returning ``TriggerSpec``
        """
        self._registry = registry
        self._grammar = TriggerGrammar()
        self._validator = TriggerValidator(registry)
        self._builders = TriggerBuilderFactory(registry, factory)

    def parse_grammar(self, expression: str) -> ParseState:
        """Fill the parse slots from the expression tokens.

        Raises:
            GrammarError: If the token sequence is malformed
        """
        return self._grammar.parse(expression)

    def validate(self, state: ParseState) -> None:
        """Validate parsed slots against the registry.

        Raises:
            GrammarError: If the target type or trigger type is invalid
            SemanticError: If an entity, state, command or status is invalid
        """
        self._validator.validate(state)

    def analyze(self, expression: str) -> ParseState:
        """Parse and validate an expression.

        Args:
            expression: Trigger expression

        Returns:
            Validated parse state

        Raises:
            GrammarError: If the expression is malformed
            SemanticError: If the expression does not match the registry
            TriggerParserFailure: If parsing failed for an unexpected reason
        """
        state: ParseState | None = None
        try:
            state = self.parse_grammar(expression)
            self.validate(state)
        except GrammarError as e:
            status = "semantic_error" if isinstance(e, SemanticError) else "grammar_error"
            EXPRESSIONS_PARSED.labels(target_type=metric_target_type(state), status=status).inc()
            raise
        except Exception as e:
            logger.error(
                "Unexpected error while parsing trigger expression",
                expression=expression,
                exc_info=True,
            )
            raise TriggerParserFailure(
                f"when: unexpected error while parsing '{expression}'"
            ) from e

        EXPRESSIONS_PARSED.labels(target_type=metric_target_type(state), status="ok").inc()
        logger.debug("Trigger expression parsed", expression=expression, **state.describe())
        return state

    def when(self, expression: str, trigger_name: str | None = None) -> TriggerBuilder:
        """Return a builder attaching the expression's triggers to a target.

        Invalid expressions are logged and yield a builder that attaches a
        single ``None`` marker, so rule registration can skip the rule.

        Args:
            expression: Trigger expression
            trigger_name: Explicit trigger name used to derive trigger ids

        Returns:
            Callable taking a target with a ``triggers`` list and returning it

        Raises:
            TriggerParserFailure: If parsing failed for an unexpected reason
        """
        try:
            state = self.analyze(expression)
        except GrammarError as e:
            logger.warning(
                "Trigger expression could not be parsed",
                expression=expression,
                reason=e.reason,
            )
            return poison_builder
        return self._builders.select(state, trigger_name)

    def parse(self, expression: str, trigger_name: str | None = None) -> ParseResult:
        """Parse an expression into its triggers.

        Args:
            expression: Trigger expression
            trigger_name: Explicit trigger name used to derive trigger ids

        Returns:
            Result holding either the triggers or the parse error

        Raises:
            TriggerParserFailure: If parsing failed for an unexpected reason
        """
        try:
            state = self.analyze(expression)
        except GrammarError as e:
            logger.warning(
                "Trigger expression could not be parsed",
                expression=expression,
                reason=e.reason,
            )
            return ParseResult(expression=expression, error=e)

        builder = self._builders.select(state, trigger_name)
        try:
            collector = builder(_TriggerCollector())
        except Exception as e:
            logger.error(
                "Unexpected error while building triggers",
                expression=expression,
                exc_info=True,
            )
            raise TriggerParserFailure(
                f"when: unexpected error while building triggers for '{expression}'"
            ) from e
        return ParseResult(expression=expression, triggers=collector.triggers)
