from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from app.linkman.core.acl import AccessControlList
from app.linkman.core.i18n import get_localized_text, sort_key


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class Category:
    name: str
    order: int = 0
    translations: dict[str, str] = field(default_factory=dict)
    acl: AccessControlList = field(default_factory=AccessControlList)
    id: str | None = None

    @property
    def is_public(self) -> bool:
        return self.acl.is_public

    def get_name(self, language: str | None) -> str:
        return get_localized_text(self.name, self.translations, language)

    def sort_key(self, language: str | None) -> tuple[int, str]:
        return sort_key(self.order, self.get_name(language))

    def copy(self) -> "Category":
        return replace(self, translations=dict(self.translations))


@dataclass
class Link:
    href: str
    text: str
    order: int = 0
    blank: bool = False
    display_text: bool = True
    text_translations: dict[str, str] = field(default_factory=dict)
    description: str | None = None
    description_translations: dict[str, str] = field(default_factory=dict)
    acl: AccessControlList = field(default_factory=AccessControlList)
    category_ids: set[str] = field(default_factory=set)
    card_image: str | None = None
    menu_image: str | None = None
    id: str | None = None

    def get_text(self, language: str | None) -> str:
        return get_localized_text(self.text, self.text_translations, language)

    def get_description(self, language: str | None) -> str | None:
        return get_localized_text(self.description, self.description_translations, language)

    def sort_key(self, language: str | None) -> tuple[int, str]:
        return sort_key(self.order, self.get_text(language))

    def copy(self) -> "Link":
        return replace(
            self,
            text_translations=dict(self.text_translations),
            description_translations=dict(self.description_translations),
            category_ids=set(self.category_ids),
        )


@dataclass
class Group:
    name: str
    created_by: str | None = None
    description: str | None = None
    members: set[str] = field(default_factory=set)
    owners: set[str] = field(default_factory=set)
    source: str = "INTERNAL"
    version: int = 0
    created_at: datetime = field(default_factory=utcnow)
    modified_at: datetime = field(default_factory=utcnow)
    id: str | None = None

    def sort_key(self) -> tuple[str, str]:
        return (self.name or "").casefold(), (self.created_by or "").casefold()

    def copy(self) -> "Group":
        return replace(self, members=set(self.members), owners=set(self.owners))
