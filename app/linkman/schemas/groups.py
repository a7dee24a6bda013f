from datetime import datetime

from pydantic import BaseModel, Field


class GroupSpec(BaseModel):
    name: str = Field(..., min_length=3, max_length=75)
    description: str | None = Field(default=None, max_length=255)
    members: list[str] = Field(default_factory=list)
    owners: list[str] = Field(
        default_factory=list,
        description="On update an empty list keeps the caller as the only owner.",
    )


class AdminGroupSpec(GroupSpec):
    created_by: str | None = Field(
        default=None,
        max_length=255,
        description="Creator to record; defaults to the calling admin on create and is kept on update.",
    )


class GroupItem(GroupSpec):
    id: str
    version: int
    created_by: str | None
    created_at: datetime
    modified_at: datetime
    source: str


class GroupListResponse(BaseModel):
    groups: list[GroupItem]


class GroupStatusResponse(BaseModel):
    owned_group_size: int
    membership_size: int
    max_owned_groups: int


class SelectOptionItem(BaseModel):
    value: str
    display_value: str


class SelectOptionListResponse(BaseModel):
    options: list[SelectOptionItem]


class MembershipIdsResponse(BaseModel):
    ids: list[str]
