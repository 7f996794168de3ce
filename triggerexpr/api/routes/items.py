"""Item registry API routes."""

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from triggerexpr.api.deps import EntityRegistryDep, PaginationDep
from triggerexpr.core.errors import DuplicateEntityError, EntityNotFoundError
from triggerexpr.models.entity import Item
from triggerexpr.schemas.common import APIResponse, PaginatedResponse
from triggerexpr.schemas.registry import ItemCreate, ItemResponse

router = APIRouter(prefix="/items", tags=["items"])


@router.post("", response_model=APIResponse[ItemResponse])
async def create_item(
    data: ItemCreate,
    registry: EntityRegistryDep,
) -> APIResponse[ItemResponse]:
    """Add an item to the registry."""
    try:
        item = registry.add_item(Item(**data.model_dump()))
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        raise HTTPException(status_code=422, detail=errors) from e
    except DuplicateEntityError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return APIResponse(data=ItemResponse.from_item(item))


@router.get("", response_model=PaginatedResponse[ItemResponse])
async def list_items(
    registry: EntityRegistryDep,
    pagination: PaginationDep,
    group: str | None = Query(default=None, description="Filter by direct parent group"),
    name_contains: str | None = Query(default=None, description="Filter by name substring"),
) -> PaginatedResponse[ItemResponse]:
    """List items with optional filtering."""
    items = registry.list_items()
    if group:
        items = [i for i in items if group in i.groups]
    if name_contains:
        needle = name_contains.lower()
        items = [i for i in items if needle in i.name.lower()]

    return PaginatedResponse(
        data=[ItemResponse.from_item(i) for i in pagination.paginate(items)],
        total=len(items),
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/{name}", response_model=APIResponse[ItemResponse])
async def get_item(
    name: str,
    registry: EntityRegistryDep,
) -> APIResponse[ItemResponse]:
    """Get a single item by name."""
    item = registry.get_item(name)
    if not item:
        raise HTTPException(status_code=404, detail=f"Item {name} not found")

    return APIResponse(data=ItemResponse.from_item(item))


@router.get("/{name}/members", response_model=APIResponse[list[ItemResponse]])
async def get_item_members(
    name: str,
    registry: EntityRegistryDep,
    recursive: bool = Query(default=False, description="Return all non-group descendants"),
) -> APIResponse[list[ItemResponse]]:
    """Get the members of a group item."""
    item = registry.get_item(name)
    if not item:
        raise HTTPException(status_code=404, detail=f"Item {name} not found")
    if not item.is_group:
        raise HTTPException(status_code=400, detail=f"Item {name} is not a group")

    members = registry.get_all_members(item) if recursive else registry.get_members(item)
    return APIResponse(data=[ItemResponse.from_item(m) for m in members])


@router.delete("/{name}", response_model=APIResponse)
async def delete_item(
    name: str,
    registry: EntityRegistryDep,
) -> APIResponse:
    """Remove an item from the registry."""
    try:
        registry.remove_item(name)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Item {name} not found") from e

    return APIResponse(message=f"Item {name} deleted")
