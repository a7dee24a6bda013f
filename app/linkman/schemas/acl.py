from pydantic import BaseModel, Field


class AccessControlEntrySchema(BaseModel):
    guest: bool = False
    users: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    groups: list[str] = Field(default_factory=list, description="Group ids.")


class AccessControlListSchema(BaseModel):
    owner: str | None = None
    read: AccessControlEntrySchema = Field(default_factory=AccessControlEntrySchema)
