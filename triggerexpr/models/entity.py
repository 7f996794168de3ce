"""Entity descriptors resolved by the entity registry."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import BaseModel, Field, field_validator, model_validator

ITEM_NAME_PATTERN = r"^[A-Za-z0-9_]+$"

_UID_SEGMENT = r"[A-Za-z0-9_-]+"
THING_UID_RE = re.compile(rf"^{_UID_SEGMENT}(?::{_UID_SEGMENT}){{2,}}$")
CHANNEL_UID_RE = re.compile(
    rf"^{_UID_SEGMENT}(?::{_UID_SEGMENT}){{2,}}:{_UID_SEGMENT}(?:#{_UID_SEGMENT})?$"
)


class ItemType(str, Enum):
    """Item type enumeration."""

    CALL = "Call"
    COLOR = "Color"
    CONTACT = "Contact"
    DATETIME = "DateTime"
    DIMMER = "Dimmer"
    GROUP = "Group"
    IMAGE = "Image"
    LOCATION = "Location"
    NUMBER = "Number"
    PLAYER = "Player"
    ROLLERSHUTTER = "Rollershutter"
    STRING = "String"
    SWITCH = "Switch"


class ThingStatus(str, Enum):
    """Thing status enumeration."""

    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZING = "INITIALIZING"
    UNKNOWN = "UNKNOWN"
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    REMOVING = "REMOVING"
    REMOVED = "REMOVED"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check whether a literal names a Thing status."""
        return value in cls._value2member_map_


class ChannelKind(str, Enum):
    """Channel kind enumeration."""

    STATE = "STATE"
    TRIGGER = "TRIGGER"


def split_item_type(type_name: str) -> tuple[ItemType, str | None]:
    """Split ``Number:Temperature`` style type names into type and dimension.

    Raises:
        ValueError: If the main type is unknown or a dimension is given for
            a type other than Number
    """
    main, _, dimension = type_name.partition(":")
    try:
        item_type = ItemType(main)
    except ValueError:
        raise ValueError(f"'{type_name}' is not a valid item type") from None
    if dimension and item_type != ItemType.NUMBER:
        raise ValueError(f"Only Number items can have a dimension, got '{type_name}'")
    return item_type, dimension or None


def is_valid_thing_uid(uid: str) -> bool:
    """Check Thing UID syntax (``binding:type:id[:...]``)."""
    return bool(THING_UID_RE.match(uid))


def is_valid_channel_uid(uid: str) -> bool:
    """Check Channel UID syntax (``binding:type:thing:[group#]channel``)."""
    return bool(CHANNEL_UID_RE.match(uid))


def thing_uid_of(channel_uid: str) -> str:
    """Return the Thing UID a Channel UID belongs to."""
    return channel_uid.rsplit(":", 1)[0]


class Item(BaseModel):
    """Item descriptor."""

    name: str = Field(..., pattern=ITEM_NAME_PATTERN, description="Item name")
    type: str = Field(..., description="Item type, e.g. 'Switch' or 'Number:Temperature'")
    groups: list[str] = Field(default_factory=list, description="Names of parent group items")
    base_type: str | None = Field(default=None, description="Base item type for Group items")
    label: str = Field(default="", description="Item label")
    tags: list[str] = Field(default_factory=list, description="Item tags")

    @field_validator("type", "base_type")
    @classmethod
    def validate_type_name(cls, value: str | None) -> str | None:
        if value is not None:
            split_item_type(value)
        return value

    @model_validator(mode="after")
    def validate_base_type(self) -> "Item":
        """Ensure only Group items carry a base type."""
        if self.base_type is not None:
            if not self.is_group:
                raise ValueError("base_type is only allowed for Group items")
            if split_item_type(self.base_type)[0] == ItemType.GROUP:
                raise ValueError("base_type of a Group item cannot be Group")
        if self.name in self.groups:
            raise ValueError(f"Item '{self.name}' cannot be a member of itself")
        return self

    @property
    def item_type(self) -> ItemType:
        return split_item_type(self.type)[0]

    @property
    def is_group(self) -> bool:
        return self.item_type == ItemType.GROUP


class Thing(BaseModel):
    """Thing descriptor."""

    uid: str = Field(..., description="Thing UID, e.g. 'kodi:kodi:familyroom'")
    label: str = Field(default="", description="Thing label")
    status: ThingStatus = Field(default=ThingStatus.UNINITIALIZED, description="Current status")

    @field_validator("uid")
    @classmethod
    def validate_uid(cls, value: str) -> str:
        if not is_valid_thing_uid(value):
            raise ValueError(f"'{value}' is not a valid Thing UID")
        return value


class Channel(BaseModel):
    """Channel descriptor."""

    uid: str = Field(..., description="Channel UID, e.g. 'astro:sun:local:eclipse#event'")
    kind: ChannelKind = Field(default=ChannelKind.STATE, description="Channel kind")
    item_type: str | None = Field(default=None, description="Accepted item type for state channels")
    label: str = Field(default="", description="Channel label")

    @field_validator("uid")
    @classmethod
    def validate_uid(cls, value: str) -> str:
        if not is_valid_channel_uid(value):
            raise ValueError(f"'{value}' is not a valid Channel UID")
        return value

    @property
    def thing_uid(self) -> str:
        return thing_uid_of(self.uid)

    @property
    def is_trigger(self) -> bool:
        return self.kind == ChannelKind.TRIGGER


Entity = Union[Item, Thing, Channel]


@dataclass(frozen=True)
class ByName:
    """Reference to an entity by its name or UID."""

    name: str


@dataclass(frozen=True)
class ByHandle:
    """Reference to an already resolved entity descriptor."""

    entity: Entity

    @property
    def name(self) -> str:
        if isinstance(self.entity, Item):
            return self.entity.name
        return self.entity.uid


EntityRef = Union[ByName, ByHandle]


def as_ref(value: "str | Entity | EntityRef") -> EntityRef:
    """Wrap a name or descriptor into an ``EntityRef``.

    Raises:
        TypeError: If the value is neither a string, a descriptor nor a ref
    """
    if isinstance(value, (ByName, ByHandle)):
        return value
    if isinstance(value, str):
        return ByName(value)
    if isinstance(value, (Item, Thing, Channel)):
        return ByHandle(value)
    raise TypeError(f"'{value!r}' is not an entity name or descriptor")
