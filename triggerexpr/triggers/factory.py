"""Trigger factories turning specifications into engine trigger objects."""

from typing import Any, Protocol

from triggerexpr.models.trigger import TriggerSpec


class TriggerFactory(Protocol):
    """Host collaborator that builds concrete triggers."""

    def create(self, type_code: str, configuration: dict[str, Any], trigger_id: str) -> Any:
        """Build a trigger from a type code, configuration and id."""
        ...


class SpecTriggerFactory:
    """Factory returning the ``TriggerSpec`` itself."""

    def create(self, type_code: str, configuration: dict[str, Any], trigger_id: str) -> TriggerSpec:
        return TriggerSpec(type_code=type_code, configuration=dict(configuration), id=trigger_id)


_factory: TriggerFactory | None = None


def get_trigger_factory() -> TriggerFactory:
    """Get the default trigger factory singleton."""
    global _factory
    if _factory is None:
        _factory = SpecTriggerFactory()
    return _factory
