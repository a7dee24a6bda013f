from pydantic import BaseModel, Field, field_validator

from app.linkman.schemas.acl import AccessControlListSchema


class LinkSpec(BaseModel):
    order: int = 0
    href: str = Field(..., min_length=1, max_length=2048)
    blank: bool = Field(default=False, description="Open the link in a new browser tab.")
    text: str = Field(..., min_length=3, max_length=75)
    text_translations: dict[str, str] = Field(default_factory=dict)
    display_text: bool = True
    description: str | None = Field(default=None, max_length=255)
    description_translations: dict[str, str] = Field(default_factory=dict)
    acl: AccessControlListSchema = Field(default_factory=AccessControlListSchema)
    category_ids: list[str] = Field(default_factory=list)
    card_image: str | None = Field(default=None, description="Object key of the card image.")
    menu_image: str | None = Field(default=None, description="Object key of the menu image.")

    @field_validator("href")
    @classmethod
    def href_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("href must not be blank")
        return value.strip()


class LinkItem(LinkSpec):
    id: str


class LinkListResponse(BaseModel):
    links: list[LinkItem]
