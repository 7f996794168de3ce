"""API dependency injection."""

from typing import Annotated

from fastapi import Depends, Query

from triggerexpr.engine.parser import TriggerExpressionParser
from triggerexpr.registry.entities import EntityRegistry
from triggerexpr.schemas.common import PaginationParams

_registry: EntityRegistry | None = None


def get_entity_registry() -> EntityRegistry:
    """Get the registry backing the API."""
    global _registry
    if _registry is None:
        _registry = EntityRegistry()
    return _registry


def reset_entity_registry() -> None:
    """Drop the API registry, e.g. on application shutdown."""
    global _registry
    _registry = None


EntityRegistryDep = Annotated[EntityRegistry, Depends(get_entity_registry)]


def get_parser(registry: EntityRegistryDep) -> TriggerExpressionParser:
    """Get a parser bound to the API registry."""
    return TriggerExpressionParser(registry)


ParserDep = Annotated[TriggerExpressionParser, Depends(get_parser)]


def get_pagination(
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=50, ge=1, le=500, description="Entities per page"),
) -> PaginationParams:
    """Get pagination parameters from query."""
    return PaginationParams(page=page, page_size=page_size)


PaginationDep = Annotated[PaginationParams, Depends(get_pagination)]
