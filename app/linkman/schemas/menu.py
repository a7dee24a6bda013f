from pydantic import BaseModel


class MenuLinkItem(BaseModel):
    id: str | None
    href: str
    text: str
    description: str | None = None
    blank: bool = False
    display_text: bool = True
    card_image_url: str | None = None
    menu_image_url: str | None = None


class MenuEntryItem(BaseModel):
    category: str
    public: bool
    links: list[MenuLinkItem]


class LinkContainerItem(MenuEntryItem):
    category_id: str | None = None


class LanguagesResponse(BaseModel):
    languages: list[str]
