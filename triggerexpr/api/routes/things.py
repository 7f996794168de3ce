"""Thing and channel registry API routes."""

from fastapi import APIRouter, HTTPException

from triggerexpr.api.deps import EntityRegistryDep, PaginationDep
from triggerexpr.core.errors import DuplicateEntityError, EntityNotFoundError
from triggerexpr.models.entity import Channel, ChannelKind, Thing
from triggerexpr.schemas.common import APIResponse, PaginatedResponse

router = APIRouter(tags=["things"])


@router.post("/things", response_model=APIResponse[Thing])
async def create_thing(
    data: Thing,
    registry: EntityRegistryDep,
) -> APIResponse[Thing]:
    """Add a Thing to the registry."""
    try:
        thing = registry.add_thing(data)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return APIResponse(data=thing)


@router.get("/things", response_model=PaginatedResponse[Thing])
async def list_things(
    registry: EntityRegistryDep,
    pagination: PaginationDep,
) -> PaginatedResponse[Thing]:
    """List Things."""
    things = registry.list_things()
    return PaginatedResponse(
        data=pagination.paginate(things),
        total=len(things),
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/things/{uid}", response_model=APIResponse[Thing])
async def get_thing(
    uid: str,
    registry: EntityRegistryDep,
) -> APIResponse[Thing]:
    """Get a single Thing by UID."""
    thing = registry.get_thing(uid)
    if not thing:
        raise HTTPException(status_code=404, detail=f"Thing {uid} not found")
    return APIResponse(data=thing)


@router.delete("/things/{uid}", response_model=APIResponse)
async def delete_thing(
    uid: str,
    registry: EntityRegistryDep,
) -> APIResponse:
    """Remove a Thing from the registry."""
    try:
        registry.remove_thing(uid)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Thing {uid} not found") from e
    return APIResponse(message=f"Thing {uid} deleted")


@router.post("/channels", response_model=APIResponse[Channel])
async def create_channel(
    data: Channel,
    registry: EntityRegistryDep,
) -> APIResponse[Channel]:
    """Add a Channel to the registry."""
    try:
        channel = registry.add_channel(data)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return APIResponse(data=channel)


@router.get("/channels", response_model=PaginatedResponse[Channel])
async def list_channels(
    registry: EntityRegistryDep,
    pagination: PaginationDep,
    kind: ChannelKind | None = None,
) -> PaginatedResponse[Channel]:
    """List Channels, optionally only those of one kind."""
    channels = registry.list_channels()
    if kind is not None:
        channels = [c for c in channels if c.kind == kind]
    return PaginatedResponse(
        data=pagination.paginate(channels),
        total=len(channels),
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/channels/{uid:path}", response_model=APIResponse[Channel])
async def get_channel(
    uid: str,
    registry: EntityRegistryDep,
) -> APIResponse[Channel]:
    """Get a single Channel by UID."""
    channel = registry.get_channel(uid)
    if not channel:
        raise HTTPException(status_code=404, detail=f"Channel {uid} not found")
    return APIResponse(data=channel)


@router.delete("/channels/{uid:path}", response_model=APIResponse)
async def delete_channel(
    uid: str,
    registry: EntityRegistryDep,
) -> APIResponse:
    """Remove a Channel from the registry."""
    try:
        registry.remove_channel(uid)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Channel {uid} not found") from e
    return APIResponse(message=f"Channel {uid} deleted")
