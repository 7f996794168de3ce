"""State and command literal parsing for item types.

Mirrors how the automation host decides whether a literal like ``ON``,
``42 %`` or ``2024-01-01T10:00`` is a valid state or command for an item:
every item type accepts an ordered list of data types, and a literal is
valid when any of them can parse it.
"""

import re
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

from triggerexpr.models.entity import Item, ItemType, split_item_type


class DataType(str, Enum):
    """Data types an item can hold as state or receive as command."""

    DECIMAL = "DecimalType"
    QUANTITY = "QuantityType"
    PERCENT = "PercentType"
    HSB = "HSBType"
    ON_OFF = "OnOffType"
    OPEN_CLOSED = "OpenClosedType"
    UP_DOWN = "UpDownType"
    STOP_MOVE = "StopMoveType"
    INCREASE_DECREASE = "IncreaseDecreaseType"
    NEXT_PREVIOUS = "NextPreviousType"
    PLAY_PAUSE = "PlayPauseType"
    REWIND_FASTFORWARD = "RewindFastforwardType"
    STRING = "StringType"
    STRING_LIST = "StringListType"
    DATETIME = "DateTimeType"
    POINT = "PointType"
    RAW = "RawType"
    REFRESH = "RefreshType"
    UNDEF = "UnDefType"


T = DataType

ACCEPTED_DATA_TYPES: dict[ItemType, tuple[DataType, ...]] = {
    ItemType.CALL: (T.STRING_LIST, T.UNDEF),
    ItemType.COLOR: (T.HSB, T.PERCENT, T.ON_OFF, T.UNDEF),
    ItemType.CONTACT: (T.OPEN_CLOSED, T.UNDEF),
    ItemType.DATETIME: (T.DATETIME, T.UNDEF),
    ItemType.DIMMER: (T.PERCENT, T.ON_OFF, T.UNDEF),
    ItemType.IMAGE: (T.RAW, T.UNDEF),
    ItemType.LOCATION: (T.POINT, T.UNDEF),
    ItemType.NUMBER: (T.DECIMAL, T.QUANTITY, T.UNDEF),
    ItemType.PLAYER: (T.PLAY_PAUSE, T.REWIND_FASTFORWARD, T.UNDEF),
    ItemType.ROLLERSHUTTER: (T.PERCENT, T.UP_DOWN, T.UNDEF),
    ItemType.STRING: (T.STRING, T.DATETIME, T.UNDEF),
    ItemType.SWITCH: (T.ON_OFF, T.UNDEF),
}

ACCEPTED_COMMAND_TYPES: dict[ItemType, tuple[DataType, ...]] = {
    ItemType.CALL: (T.REFRESH,),
    ItemType.COLOR: (T.HSB, T.PERCENT, T.ON_OFF, T.INCREASE_DECREASE, T.REFRESH),
    ItemType.CONTACT: (T.REFRESH,),
    ItemType.DATETIME: (T.DATETIME, T.REFRESH),
    ItemType.DIMMER: (T.PERCENT, T.ON_OFF, T.INCREASE_DECREASE, T.REFRESH),
    ItemType.IMAGE: (T.REFRESH,),
    ItemType.LOCATION: (T.POINT, T.REFRESH),
    ItemType.NUMBER: (T.DECIMAL, T.QUANTITY, T.REFRESH),
    ItemType.PLAYER: (T.PLAY_PAUSE, T.REWIND_FASTFORWARD, T.NEXT_PREVIOUS, T.REFRESH),
    ItemType.ROLLERSHUTTER: (T.UP_DOWN, T.STOP_MOVE, T.PERCENT, T.REFRESH),
    ItemType.STRING: (T.STRING, T.DATETIME, T.REFRESH),
    ItemType.SWITCH: (T.ON_OFF, T.REFRESH),
}

# Data types that are states only and never commands
STATE_ONLY = frozenset({T.UNDEF})

_NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_QUANTITY_RE = re.compile(rf"^{_NUMBER}\s*[^\d\s.,+-].*$")


def _decimal(value: str) -> Decimal | None:
    try:
        number = Decimal(value)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def _keyword(*keywords: str) -> Callable[[str], bool]:
    return lambda value: value in keywords


def _is_decimal(value: str) -> bool:
    return _decimal(value) is not None


def _is_percent(value: str) -> bool:
    number = _decimal(value)
    return number is not None and 0 <= number <= 100


def _is_quantity(value: str) -> bool:
    return bool(_QUANTITY_RE.match(value))


def _is_hsb(value: str) -> bool:
    parts = value.split(",")
    if len(parts) != 3:
        return False
    numbers = [_decimal(part.strip()) for part in parts]
    if any(number is None for number in numbers):
        return False
    hue, saturation, brightness = numbers
    return 0 <= hue <= 360 and 0 <= saturation <= 100 and 0 <= brightness <= 100


def _is_point(value: str) -> bool:
    parts = value.split(",")
    if len(parts) not in (2, 3):
        return False
    numbers = [_decimal(part.strip()) for part in parts]
    if any(number is None for number in numbers):
        return False
    return -90 <= numbers[0] <= 90 and -180 <= numbers[1] <= 180


def _is_datetime(value: str) -> bool:
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return False
    return True


def _any(value: str) -> bool:
    return True


def _never(value: str) -> bool:
    return False


PARSERS: dict[DataType, Callable[[str], bool]] = {
    T.DECIMAL: _is_decimal,
    T.QUANTITY: _is_quantity,
    T.PERCENT: _is_percent,
    T.HSB: _is_hsb,
    T.ON_OFF: _keyword("ON", "OFF"),
    T.OPEN_CLOSED: _keyword("OPEN", "CLOSED"),
    T.UP_DOWN: _keyword("UP", "DOWN"),
    T.STOP_MOVE: _keyword("STOP", "MOVE"),
    T.INCREASE_DECREASE: _keyword("INCREASE", "DECREASE"),
    T.NEXT_PREVIOUS: _keyword("NEXT", "PREVIOUS"),
    T.PLAY_PAUSE: _keyword("PLAY", "PAUSE"),
    T.REWIND_FASTFORWARD: _keyword("REWIND", "FASTFORWARD"),
    T.STRING: _any,
    T.STRING_LIST: _any,
    T.DATETIME: _is_datetime,
    T.POINT: _is_point,
    # Raw data cannot be written as a literal
    T.RAW: _never,
    T.REFRESH: _keyword("REFRESH"),
    T.UNDEF: _keyword("NULL", "UNDEF"),
}


def parse_state(accepted: Iterable[DataType], value: str) -> DataType | None:
    """Return the first accepted data type that parses ``value`` as a state."""
    for data_type in accepted:
        if PARSERS[data_type](value):
            return data_type
    return None


def parse_command(accepted: Iterable[DataType], value: str) -> DataType | None:
    """Return the first accepted data type that parses ``value`` as a command."""
    for data_type in accepted:
        if data_type in STATE_ONLY:
            continue
        if PARSERS[data_type](value):
            return data_type
    return None


def _intersect(type_lists: list[tuple[DataType, ...]]) -> tuple[DataType, ...]:
    if not type_lists:
        return ()
    first, *rest = type_lists
    return tuple(t for t in first if all(t in other for other in rest))


def accepted_data_types(
    item: Item,
    members: Callable[[Item], list[Item]] | None = None,
    _seen: frozenset[str] = frozenset(),
) -> tuple[DataType, ...]:
    """Data types an item accepts as state.

    A Group item accepts the types of its base item. Without a base it
    accepts the types shared by all of its members, or only ``UnDefType``
    when it has none.
    """
    if not item.is_group:
        return ACCEPTED_DATA_TYPES[item.item_type]
    if item.base_type:
        return ACCEPTED_DATA_TYPES[split_item_type(item.base_type)[0]]
    seen = _seen | {item.name}
    children = [m for m in (members(item) if members else []) if m.name not in seen]
    if not children:
        return (T.UNDEF,)
    return _intersect([accepted_data_types(m, members, seen) for m in children])


def accepted_command_types(
    item: Item,
    members: Callable[[Item], list[Item]] | None = None,
    _seen: frozenset[str] = frozenset(),
) -> tuple[DataType, ...]:
    """Data types an item accepts as command, resolved like ``accepted_data_types``."""
    if not item.is_group:
        return ACCEPTED_COMMAND_TYPES[item.item_type]
    if item.base_type:
        return ACCEPTED_COMMAND_TYPES[split_item_type(item.base_type)[0]]
    seen = _seen | {item.name}
    children = [m for m in (members(item) if members else []) if m.name not in seen]
    if not children:
        return ()
    return _intersect([accepted_command_types(m, members, seen) for m in children])
