"""Quartz cron expression syntax validation."""

import re
from dataclasses import dataclass

MONTH_NAMES = {name: i for i, name in enumerate(
    ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"], start=1
)}
DAY_NAMES = {name: i for i, name in enumerate(["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"], start=1)}

_DAY_OF_MONTH_SPECIAL = re.compile(r"^(L(-\d{1,2})?|LW|\d{1,2}W)$")
_DAY_OF_WEEK_SPECIAL = re.compile(r"^(\w{1,3})(L|#[1-5])$")


@dataclass(frozen=True)
class CronField:
    """Bounds and aliases of one cron field."""

    name: str
    minimum: int
    maximum: int
    names: dict[str, int] | None = None


SECONDS = CronField("seconds", 0, 59)
MINUTES = CronField("minutes", 0, 59)
HOURS = CronField("hours", 0, 23)
DAY_OF_MONTH = CronField("day-of-month", 1, 31)
MONTH = CronField("month", 1, 12, MONTH_NAMES)
DAY_OF_WEEK = CronField("day-of-week", 1, 7, DAY_NAMES)
YEAR = CronField("year", 1970, 2099)

FIELDS = (SECONDS, MINUTES, HOURS, DAY_OF_MONTH, MONTH, DAY_OF_WEEK, YEAR)


class CronSyntaxError(ValueError):
    """Cron expression does not follow Quartz syntax."""


def _value(token: str, spec: CronField) -> int:
    if token.isdigit():
        value = int(token)
    elif spec.names and token.upper() in spec.names:
        value = spec.names[token.upper()]
    else:
        raise CronSyntaxError(f"'{token}' is not a valid {spec.name} value")
    if not spec.minimum <= value <= spec.maximum:
        raise CronSyntaxError(
            f"{spec.name} value {value} is outside {spec.minimum}-{spec.maximum}"
        )
    return value


def _validate_element(element: str, spec: CronField) -> None:
    base, slash, step = element.partition("/")
    if slash:
        if not step.isdigit() or int(step) == 0:
            raise CronSyntaxError(f"'{element}' has an invalid {spec.name} increment")
    if base == "*":
        return
    if spec is DAY_OF_MONTH and _DAY_OF_MONTH_SPECIAL.match(base) and not slash:
        digits = re.sub(r"\D", "", base)
        if digits and not 1 <= int(digits) <= 31:
            raise CronSyntaxError(f"'{element}' is not a valid {spec.name} value")
        return
    if spec is DAY_OF_WEEK and not slash:
        match = _DAY_OF_WEEK_SPECIAL.match(base)
        if base == "L":
            return
        if match:
            _value(match.group(1), spec)
            return
    start, dash, end = base.partition("-")
    _value(start, spec)
    if dash:
        _value(end, spec)


def _validate_field(text: str, spec: CronField) -> None:
    if text == "?":
        if spec not in (DAY_OF_MONTH, DAY_OF_WEEK):
            raise CronSyntaxError(f"'?' is not allowed in the {spec.name} field")
        return
    for element in text.split(","):
        if not element:
            raise CronSyntaxError(f"Empty element in the {spec.name} field")
        _validate_element(element, spec)


def validate_cron_expression(expression: str) -> None:
    """Validate a Quartz cron expression.

    Quartz expressions have six or seven fields: seconds, minutes, hours,
    day-of-month, month, day-of-week and an optional year. Exactly one of
    day-of-month and day-of-week must be '?'.

    Raises:
        CronSyntaxError: With a description of the first problem found
    """
    fields = expression.split()
    if len(fields) not in (6, 7):
        raise CronSyntaxError(
            f"Expected 6 or 7 fields, got {len(fields)}"
        )
    for text, spec in zip(fields, FIELDS):
        _validate_field(text, spec)

    day_of_month, day_of_week = fields[3], fields[5]
    if (day_of_month == "?") == (day_of_week == "?"):
        raise CronSyntaxError(
            "Exactly one of day-of-month and day-of-week must be '?'"
        )


def is_valid_cron_expression(expression: str) -> bool:
    """Check whether an expression is valid Quartz cron syntax."""
    try:
        validate_cron_expression(expression)
    except CronSyntaxError:
        return False
    return True
