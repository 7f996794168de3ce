"""Semantic validation of parsed trigger expressions against the registry."""

from triggerexpr.core.errors import GrammarError, SemanticError
from triggerexpr.engine.grammar import INVALID_TARGET_TYPE
from triggerexpr.engine.state_types import (
    accepted_command_types,
    accepted_data_types,
    parse_command,
    parse_state,
)
from triggerexpr.models.entity import (
    ByName,
    ItemType,
    ThingStatus,
    is_valid_channel_uid,
    is_valid_thing_uid,
)
from triggerexpr.models.trigger import (
    CHANGED,
    GROUP_TARGETS,
    ITEM_TARGETS,
    RECEIVED_COMMAND,
    RECEIVED_UPDATE,
    ParseState,
    TargetType,
)
from triggerexpr.registry.entities import EntityRegistry

SYSTEM_STARTED = "started"


class TriggerValidator:
    """Rejects well-formed expressions that make no sense for the registry.

    Checks run in a fixed order and the first failure wins.
    """

    def __init__(self, registry: EntityRegistry):
        self._registry = registry

    def validate(self, state: ParseState) -> None:
        """Validate a parsed expression.

        Args:
            state: Slots filled by the grammar

        Raises:
            GrammarError: If the target type is invalid or the trigger type
                is missing
            SemanticError: If the expression references a missing or
                mismatched entity, or an invalid state, command or status
        """
        target_type = TargetType.parse(state.target_type)
        if target_type is None:
            raise GrammarError(state.expression, INVALID_TARGET_TYPE)
        if state.trigger_type is None and target_type != TargetType.SYSTEM:
            raise GrammarError(state.expression, "trigger_type cannot be empty")

        if target_type in ITEM_TARGETS:
            self._validate_item(state, target_type)
        elif target_type == TargetType.THING:
            self._validate_thing(state)
        elif target_type == TargetType.CHANNEL:
            self._validate_channel(state)
        elif target_type == TargetType.SYSTEM:
            if state.trigger_target != SYSTEM_STARTED:
                raise SemanticError(
                    state.expression,
                    f"trigger_target '{state.trigger_target}' is invalid for target_type 'System'. "
                    f"The only valid trigger_target value is '{SYSTEM_STARTED}'",
                )

    def _validate_item(self, state: ParseState, target_type: TargetType) -> None:
        if state.is_lifecycle:
            return

        item = self._registry.resolve_item(ByName(state.trigger_target))
        if item is None:
            raise SemanticError(
                state.expression,
                f"Item '{state.trigger_target}' is not in the ItemRegistry",
            )
        if target_type in GROUP_TARGETS and item.item_type != ItemType.GROUP:
            raise SemanticError(
                state.expression,
                f"'{target_type.value}' was specified, but '{item.name}' is not a group",
            )
        if target_type != TargetType.ITEM:
            return

        members = self._registry.get_members
        if state.old_state is not None and state.trigger_type == CHANGED:
            if parse_state(accepted_data_types(item, members), state.old_state) is None:
                raise SemanticError(
                    state.expression,
                    f"'{state.old_state}' is not a valid state for '{item.name}'",
                )
        if state.new_state is not None and state.trigger_type in (CHANGED, RECEIVED_UPDATE):
            if parse_state(accepted_data_types(item, members), state.new_state) is None:
                raise SemanticError(
                    state.expression,
                    f"'{state.new_state}' is not a valid state for '{item.name}'",
                )
        if state.new_state is not None and state.trigger_type == RECEIVED_COMMAND:
            if parse_command(accepted_command_types(item, members), state.new_state) is None:
                raise SemanticError(
                    state.expression,
                    f"'{state.new_state}' is not a valid command for '{item.name}'",
                )

    def _validate_thing(self, state: ParseState) -> None:
        if state.is_lifecycle:
            return

        uid = state.trigger_target
        if not is_valid_thing_uid(uid):
            raise SemanticError(state.expression, f"'{uid}' is not a valid Thing UID")
        if self._registry.get_thing(uid) is None:
            raise SemanticError(state.expression, f"Thing '{uid}' is not in the ThingRegistry")
        for status in (state.old_state, state.new_state):
            if status is not None and not ThingStatus.is_valid(status):
                raise SemanticError(state.expression, f"'{status}' is not a valid Thing status")

    def _validate_channel(self, state: ParseState) -> None:
        uid = state.trigger_target
        if not is_valid_channel_uid(uid):
            raise SemanticError(state.expression, f"'{uid}' is not a valid Channel UID")
        channel = self._registry.get_channel(uid)
        if channel is None:
            raise SemanticError(state.expression, f"Channel '{uid}' does not exist")
        if not channel.is_trigger:
            raise SemanticError(state.expression, f"'{uid}' is not a trigger Channel")
