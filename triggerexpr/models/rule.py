"""Rule domain models."""

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Visibility(str, Enum):
    """Rule visibility in the host UI."""

    VISIBLE = "VISIBLE"
    HIDDEN = "HIDDEN"
    EXPERT = "EXPERT"


class RuleDefinition(BaseModel):
    """Rule under construction, collecting triggers from ``when`` builders.

    Builders append either triggers or a ``None`` marker for an expression
    that could not be parsed.

    Example::

        definition = (
            RuleDefinition(name="Motion light", callback=turn_on_light)
            .with_trigger(parser.when("Member of gMotion_Sensors changed to ON"))
            .with_trigger(parser.when("System started"))
        )
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str | None = Field(default=None, description="Rule name")
    description: str = Field(default="", description="Rule description")
    tags: list[str] = Field(default_factory=list, description="Rule tags")
    visibility: Visibility = Field(default=Visibility.VISIBLE, description="Rule visibility")
    triggers: list[Any] = Field(default_factory=list, description="Triggers or None markers")
    callback: Callable[..., Any] | None = Field(
        default=None,
        description="Function run when the rule fires",
        exclude=True,
    )

    def with_trigger(self, builder: Callable[["RuleDefinition"], "RuleDefinition"]) -> "RuleDefinition":
        """Apply a trigger builder and return this definition."""
        return builder(self)

    def add_trigger(self, trigger: Any) -> "RuleDefinition":
        """Append a trigger built directly, e.g. with ``cron_trigger``."""
        self.triggers.append(trigger)
        return self

    @property
    def is_valid(self) -> bool:
        """Whether every trigger expression of this rule could be parsed."""
        return None not in self.triggers


class Rule(BaseModel):
    """Rule handed to the automation manager."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    uid: str = Field(..., description="Rule unique identifier")
    name: str = Field(..., description="Rule name")
    description: str = Field(default="", description="Rule description")
    tags: list[str] = Field(default_factory=list, description="Rule tags")
    visibility: Visibility = Field(default=Visibility.VISIBLE, description="Rule visibility")
    triggers: list[Any] = Field(..., min_length=1, description="Rule triggers")
    callback: Callable[..., Any] | None = Field(default=None, exclude=True)
