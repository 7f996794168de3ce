"""Entity registry API schemas."""

from pydantic import BaseModel, Field

from triggerexpr.models.entity import ITEM_NAME_PATTERN, Item


class ItemCreate(BaseModel):
    """Schema for creating a new item."""

    name: str = Field(..., pattern=ITEM_NAME_PATTERN, max_length=200, description="Item name")
    type: str = Field(..., description="Item type, e.g. 'Switch' or 'Number:Temperature'")
    groups: list[str] = Field(default_factory=list, description="Parent group names")
    base_type: str | None = Field(default=None, description="Base type for Group items")
    label: str = Field(default="", max_length=500, description="Item label")
    tags: list[str] = Field(default_factory=list, description="Item tags")


class ItemResponse(BaseModel):
    """Schema for item response."""

    name: str
    type: str
    groups: list[str]
    base_type: str | None
    label: str
    tags: list[str]
    is_group: bool = Field(default=False, description="Whether the item is a group")

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        return cls(**item.model_dump(), is_group=item.is_group)
