"""In-memory registry of items, things and channels."""

from triggerexpr.core.errors import DuplicateEntityError, EntityNotFoundError
from triggerexpr.core.logging import get_logger
from triggerexpr.models.entity import (
    ByHandle,
    Channel,
    EntityRef,
    Item,
    Thing,
    as_ref,
)

logger = get_logger(__name__)


class EntityRegistry:
    """Registry of the entities trigger expressions can refer to.

    Owned by the host and injected into the parser. Lookups with ``get_*``
    return None for unknown keys; ``update_*`` and ``remove_*`` raise
    ``EntityNotFoundError``.
    """

    def __init__(
        self,
        items: list[Item] | None = None,
        things: list[Thing] | None = None,
        channels: list[Channel] | None = None,
    ):
        self._items: dict[str, Item] = {}
        self._things: dict[str, Thing] = {}
        self._channels: dict[str, Channel] = {}
        for item in items or []:
            self.add_item(item)
        for thing in things or []:
            self.add_thing(thing)
        for channel in channels or []:
            self.add_channel(channel)

    # Items

    def add_item(
        self,
        item_or_name: Item | str,
        item_type: str | None = None,
        groups: list[str] | None = None,
        base_type: str | None = None,
        label: str = "",
        tags: list[str] | None = None,
    ) -> Item:
        """Add an item by descriptor or by name and type.

        Raises:
            TypeError: If a name is given without ``item_type``
            DuplicateEntityError: If the name is already registered
        """
        if isinstance(item_or_name, Item):
            item = item_or_name
        elif isinstance(item_or_name, str):
            if not item_type:
                raise TypeError("Must provide 'item_type' when creating an Item by name")
            item = Item(
                name=item_or_name,
                type=item_type,
                groups=groups or [],
                base_type=base_type,
                label=label,
                tags=tags or [],
            )
        else:
            raise TypeError(f"'{item_or_name!r}' is not a string or Item")

        if item.name in self._items:
            raise DuplicateEntityError("Item", item.name)
        self._items[item.name] = item
        logger.debug("Item added", item_name=item.name, item_type=item.type)
        return item

    def get_item(self, name: str) -> Item | None:
        return self._items.get(name)

    def has_item(self, name: str) -> bool:
        return name in self._items

    def update_item(self, item: Item) -> Item:
        """Replace an existing item descriptor."""
        if item.name not in self._items:
            raise EntityNotFoundError("Item", item.name)
        self._items[item.name] = item
        logger.debug("Item updated", item_name=item.name)
        return item

    def remove_item(self, name: str) -> Item:
        """Remove an item and drop it from the group lists of its members."""
        item = self._items.pop(name, None)
        if item is None:
            raise EntityNotFoundError("Item", name)
        if item.is_group:
            for member in self.get_members(item):
                self._items[member.name] = member.model_copy(
                    update={"groups": [g for g in member.groups if g != name]}
                )
        logger.debug("Item removed", item_name=name)
        return item

    def list_items(self) -> list[Item]:
        return list(self._items.values())

    def resolve_item(self, ref: EntityRef | Item | str) -> Item | None:
        """Resolve a name or descriptor to the registered item.

        Returns:
            The registered item, or None if it is unknown or the reference
            does not point at an item
        """
        ref = as_ref(ref)
        if isinstance(ref, ByHandle):
            if not isinstance(ref.entity, Item):
                logger.warning("Reference is not an Item", reference=ref.name)
                return None
            name = ref.entity.name
        else:
            name = ref.name
        item = self.get_item(name)
        if item is None:
            logger.warning("Item is not in the registry", item_name=name)
        return item

    def get_members(self, group: Item | str) -> list[Item]:
        """Direct members of a group item, in registration order."""
        group_name = group.name if isinstance(group, Item) else group
        return [item for item in self._items.values() if group_name in item.groups]

    def get_all_members(self, group: Item | str) -> list[Item]:
        """All non-group descendants of a group item.

        Nested groups are traversed but not returned. Each item is returned
        once even when reachable through several groups, and membership
        cycles are tolerated.
        """
        group_name = group.name if isinstance(group, Item) else group
        result: dict[str, Item] = {}
        visited: set[str] = set()
        pending = [group_name]
        while pending:
            current = pending.pop(0)
            if current in visited:
                continue
            visited.add(current)
            for member in self.get_members(current):
                if member.is_group:
                    pending.append(member.name)
                else:
                    result.setdefault(member.name, member)
        return list(result.values())

    # Things

    def add_thing(self, thing: Thing) -> Thing:
        if thing.uid in self._things:
            raise DuplicateEntityError("Thing", thing.uid)
        self._things[thing.uid] = thing
        logger.debug("Thing added", thing_uid=thing.uid)
        return thing

    def get_thing(self, uid: str) -> Thing | None:
        return self._things.get(uid)

    def remove_thing(self, uid: str) -> Thing:
        thing = self._things.pop(uid, None)
        if thing is None:
            raise EntityNotFoundError("Thing", uid)
        logger.debug("Thing removed", thing_uid=uid)
        return thing

    def list_things(self) -> list[Thing]:
        return list(self._things.values())

    # Channels

    def add_channel(self, channel: Channel) -> Channel:
        if channel.uid in self._channels:
            raise DuplicateEntityError("Channel", channel.uid)
        self._channels[channel.uid] = channel
        logger.debug("Channel added", channel_uid=channel.uid, kind=channel.kind.value)
        return channel

    def get_channel(self, uid: str) -> Channel | None:
        return self._channels.get(uid)

    def remove_channel(self, uid: str) -> Channel:
        channel = self._channels.pop(uid, None)
        if channel is None:
            raise EntityNotFoundError("Channel", uid)
        logger.debug("Channel removed", channel_uid=uid)
        return channel

    def list_channels(self) -> list[Channel]:
        return list(self._channels.values())
