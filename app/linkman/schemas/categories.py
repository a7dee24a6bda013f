from pydantic import BaseModel, Field

from app.linkman.schemas.acl import AccessControlListSchema


class CategorySpec(BaseModel):
    order: int = 0
    name: str = Field(..., min_length=1, max_length=75)
    translations: dict[str, str] = Field(
        default_factory=dict,
        description="Localized names keyed by two-letter language code.",
    )
    acl: AccessControlListSchema = Field(default_factory=AccessControlListSchema)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order": 10,
                    "name": "Administration",
                    "translations": {"de": "Verwaltung"},
                    "acl": {"read": {"roles": ["ROLE_ADMIN"]}},
                }
            ]
        }
    }


class CategoryItem(CategorySpec):
    id: str
    public: bool


class CategoryListResponse(BaseModel):
    categories: list[CategoryItem]
