"""Trigger expression API schemas."""

from pydantic import BaseModel, Field

from triggerexpr.models.trigger import TriggerSpec


class ParseRequest(BaseModel):
    """Request schema for parsing a trigger expression."""

    expression: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Trigger expression, e.g. 'Item Door changed from CLOSED to OPEN'",
    )
    trigger_name: str | None = Field(
        default=None,
        max_length=200,
        description="Explicit trigger name used to derive trigger ids",
    )


class ParseError(BaseModel):
    """Why an expression was rejected."""

    kind: str = Field(..., description="'grammar' or 'semantic'")
    reason: str = Field(..., description="Human readable reason")
    message: str = Field(..., description="Full error message including the expression")


class ParseResponse(BaseModel):
    """Response schema for a parsed trigger expression."""

    expression: str
    valid: bool = Field(..., description="Whether the expression could be parsed")
    triggers: list[TriggerSpec] = Field(default_factory=list, description="Generated triggers")
    error: ParseError | None = Field(default=None, description="Parse error if invalid")
