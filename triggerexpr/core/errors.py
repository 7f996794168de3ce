"""Exception types raised by the parser, the registry and rule registration."""


class TriggerExpressionError(ValueError):
    """Base error for a trigger expression that could not be parsed."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"when: '{expression}' could not be parsed. {reason}")


class GrammarError(TriggerExpressionError):
    """Malformed token sequence (unknown keyword, leftover tokens, bad cron)."""


class SemanticError(GrammarError):
    """Well-formed expression referencing a missing or mismatched entity.

    Also raised for state, command and status literals the target does not
    accept. Subclasses ``GrammarError`` so that callers interested only in
    "could not be parsed" can catch a single type.
    """


class TriggerParserFailure(RuntimeError):
    """Unexpected internal failure while parsing a trigger expression."""


class EntityNotFoundError(KeyError):
    """Requested entity does not exist in the registry."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")

    def __str__(self) -> str:
        return self.args[0]


class DuplicateEntityError(ValueError):
    """Entity with the same key is already registered."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' already exists")
