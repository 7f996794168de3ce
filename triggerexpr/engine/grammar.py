"""Tokenizer and grammar state machine for trigger expressions.

Expressions follow the shape::

    target_type trigger_target [trigger_type] [from old_state] [to new_state]

for example ``Member of gMotion_Sensors changed from ON to OFF`` or
``Time cron 0 0 12 * * ?``. Tokens are consumed left to right into the five
slots of a ``ParseState``; each slot is filled at most once and in order.
"""

from triggerexpr.core.errors import GrammarError
from triggerexpr.engine.cron import CronSyntaxError, validate_cron_expression
from triggerexpr.models.trigger import (
    ADDED,
    CHANGED,
    MODIFIED,
    RECEIVED_COMMAND,
    RECEIVED_UPDATE,
    REMOVED,
    TRIGGERED,
    ParseState,
    TargetType,
)

TWO_WORD_TARGET_TYPES = (TargetType.MEMBER_OF.value, TargetType.DESCENDENT_OF.value)
SHUTS_DOWN = "shuts down"
CRON = "cron"
INVALID_TARGET_TYPE = (
    "target_type is missing or invalid. Valid target_type values are: "
    "Item, Member of, Descendent of, Thing, Channel, System, and Time."
)

_ITEM_THING = {TargetType.ITEM, TargetType.THING}
_ITEMS_AND_GROUPS = {TargetType.ITEM, TargetType.MEMBER_OF, TargetType.DESCENDENT_OF}

# Which target types each keyword may follow
TWO_WORD_TRIGGER_TYPES: dict[str, set[TargetType]] = {
    RECEIVED_UPDATE: _ITEMS_AND_GROUPS | {TargetType.THING},
    RECEIVED_COMMAND: _ITEMS_AND_GROUPS,
}
ONE_WORD_TRIGGER_TYPES: dict[str, set[TargetType]] = {
    CHANGED: _ITEMS_AND_GROUPS | {TargetType.THING},
    TRIGGERED: {TargetType.CHANNEL},
    ADDED: _ITEM_THING,
    REMOVED: _ITEM_THING,
    MODIFIED: _ITEM_THING,
}


def tokenize(expression: str) -> list[str]:
    """Split an expression into whitespace separated tokens."""
    return expression.split()


class TriggerGrammar:
    """State machine filling ``ParseState`` slots from expression tokens."""

    def parse(self, expression: str) -> ParseState:
        """Parse an expression into its slots.

        A single word is shorthand for ``Item <word> changed``.

        Raises:
            GrammarError: If the token sequence cannot be parsed
        """
        tokens = tokenize(expression)
        if not tokens:
            raise GrammarError(expression, "The expression is empty")

        state = ParseState(expression=expression, tokens=tokens)
        if len(tokens) == 1:
            state.target_type = TargetType.ITEM.value
            state.trigger_target = tokens.pop(0)
            state.trigger_type = CHANGED
            return state

        while state.tokens:
            if state.target_type is None:
                self._consume_target_type(state)
            elif state.trigger_target is None:
                self._consume_trigger_target(state)
            elif state.trigger_type is None:
                self._consume_trigger_type(state)
            else:
                self._consume_qualifier(state)
        return state

    @staticmethod
    def _take(state: ParseState, count: int) -> str:
        taken, state.tokens = state.tokens[:count], state.tokens[count:]
        return " ".join(taken)

    @staticmethod
    def _peek(state: ParseState, count: int) -> str:
        return " ".join(state.tokens[:count])

    def _consume_target_type(self, state: ParseState) -> None:
        if self._peek(state, 2) in TWO_WORD_TARGET_TYPES:
            state.target_type = self._take(state, 2)
        else:
            state.target_type = self._take(state, 1)

    def _consume_trigger_target(self, state: ParseState) -> None:
        target_type = TargetType.parse(state.target_type)
        if target_type == TargetType.SYSTEM and len(state.tokens) > 1:
            count = 2 if self._peek(state, 2) == SHUTS_DOWN else 1
            state.trigger_target = self._take(state, count)
        elif target_type in _ITEM_THING and len(state.tokens) == 1:
            # Only the entity type was given, e.g. "Item added"
            state.trigger_target = ""
        else:
            state.trigger_target = self._take(state, 1)

    def _consume_trigger_type(self, state: ParseState) -> None:
        if TargetType.parse(state.target_type) is None:
            raise GrammarError(state.expression, INVALID_TARGET_TYPE)
        two_words = self._peek(state, 2)
        one_word = state.tokens[0]

        if two_words in TWO_WORD_TRIGGER_TYPES:
            self._check_allowed(state, two_words, TWO_WORD_TRIGGER_TYPES[two_words])
            state.trigger_type = self._take(state, 2)
        elif one_word in ONE_WORD_TRIGGER_TYPES:
            self._check_allowed(state, one_word, ONE_WORD_TRIGGER_TYPES[one_word])
            state.trigger_type = self._take(state, 1)
        elif state.trigger_target == CRON:
            self._check_allowed(state, CRON, {TargetType.TIME})
            state.trigger_type = self._take(state, len(state.tokens))
            try:
                validate_cron_expression(state.trigger_type)
            except CronSyntaxError as e:
                raise GrammarError(
                    state.expression,
                    f"'{state.trigger_type}' is not a valid cron expression: {e}",
                ) from e
        else:
            raise GrammarError(
                state.expression,
                f"The trigger_type '{one_word}' is invalid for target_type '{state.target_type}'",
            )

    @staticmethod
    def _check_allowed(state: ParseState, keyword: str, allowed: set[TargetType]) -> None:
        if TargetType.parse(state.target_type) not in allowed:
            raise GrammarError(
                state.expression,
                f"'{keyword}' is invalid for target_type '{state.target_type}'",
            )

    def _consume_qualifier(self, state: ParseState) -> None:
        token = state.tokens[0]
        is_changed = state.trigger_type == CHANGED

        if state.old_state is None and is_changed and token == "from":
            state.old_state = self._consume_keyword_value(state, "from")
        elif state.new_state is None and is_changed and token == "to":
            state.new_state = self._consume_keyword_value(state, "to")
        elif state.new_state is None and state.trigger_type in (RECEIVED_UPDATE, RECEIVED_COMMAND):
            state.new_state = self._take(state, 1)
        elif state.new_state is None and state.target_type == TargetType.CHANNEL.value:
            state.new_state = self._take(state, 1)
        else:
            raise GrammarError(
                state.expression,
                f"'{' '.join(state.tokens)}' is invalid for "
                f"'{state.target_type} {state.trigger_target} {state.trigger_type}'",
            )

    def _consume_keyword_value(self, state: ParseState, keyword: str) -> str:
        if len(state.tokens) < 2:
            raise GrammarError(state.expression, f"'{keyword}' must be followed by a state")
        self._take(state, 1)
        return self._take(state, 1)
