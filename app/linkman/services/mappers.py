from __future__ import annotations

from app.linkman.core.acl import READ, AccessControlEntry, AccessControlList
from app.linkman.core.i18n import normalize_translations
from app.linkman.repos.entities import Category, Group, Link
from app.linkman.schemas.acl import AccessControlEntrySchema, AccessControlListSchema
from app.linkman.schemas.categories import CategoryItem, CategorySpec
from app.linkman.schemas.groups import AdminGroupSpec, GroupItem, GroupSpec, SelectOptionItem
from app.linkman.schemas.links import LinkItem, LinkSpec
from app.linkman.schemas.menu import LinkContainerItem, MenuEntryItem, MenuLinkItem
from app.linkman.services.groups import SelectOption
from app.linkman.services.menu import MenuEntry


def acl_from_schema(schema: AccessControlListSchema) -> AccessControlList:
    entry = AccessControlEntry(
        guest=schema.read.guest,
        users=frozenset(schema.read.users),
        roles=frozenset(schema.read.roles),
        groups=frozenset(schema.read.groups),
    )
    return AccessControlList(owner=schema.owner or None, entries={READ: entry})


def acl_to_schema(acl: AccessControlList) -> AccessControlListSchema:
    read = acl.read
    return AccessControlListSchema(
        owner=acl.owner,
        read=AccessControlEntrySchema(
            guest=read.guest,
            users=sorted(read.users),
            roles=sorted(read.roles),
            groups=sorted(read.groups),
        ),
    )


def category_from_spec(spec: CategorySpec) -> Category:
    return Category(
        order=spec.order,
        name=spec.name,
        translations=normalize_translations(spec.translations),
        acl=acl_from_schema(spec.acl),
    )


def category_to_item(category: Category) -> CategoryItem:
    return CategoryItem(
        id=category.id,
        order=category.order,
        name=category.name,
        translations=dict(category.translations),
        acl=acl_to_schema(category.acl),
        public=category.is_public,
    )


def link_from_spec(spec: LinkSpec) -> Link:
    return Link(
        order=spec.order,
        href=spec.href,
        blank=spec.blank,
        text=spec.text,
        text_translations=normalize_translations(spec.text_translations),
        display_text=spec.display_text,
        description=spec.description,
        description_translations=normalize_translations(spec.description_translations),
        acl=acl_from_schema(spec.acl),
        category_ids={category_id for category_id in spec.category_ids if category_id},
        card_image=spec.card_image,
        menu_image=spec.menu_image,
    )


def link_to_item(link: Link) -> LinkItem:
    return LinkItem(
        id=link.id,
        order=link.order,
        href=link.href,
        blank=link.blank,
        text=link.text,
        text_translations=dict(link.text_translations),
        display_text=link.display_text,
        description=link.description,
        description_translations=dict(link.description_translations),
        acl=acl_to_schema(link.acl),
        category_ids=sorted(link.category_ids),
        card_image=link.card_image,
        menu_image=link.menu_image,
    )


def group_from_spec(spec: GroupSpec | AdminGroupSpec) -> Group:
    return Group(
        name=spec.name,
        created_by=getattr(spec, "created_by", None),
        description=spec.description,
        members={member for member in spec.members if member},
        owners={owner for owner in spec.owners if owner},
    )


def group_to_item(group: Group) -> GroupItem:
    return GroupItem(
        id=group.id,
        version=group.version,
        created_by=group.created_by,
        created_at=group.created_at,
        modified_at=group.modified_at,
        source=group.source,
        name=group.name,
        description=group.description,
        members=sorted(group.members),
        owners=sorted(group.owners),
    )


def option_to_item(option: SelectOption) -> SelectOptionItem:
    return SelectOptionItem(value=option.value, display_value=option.display_value)


def _menu_links(entry: MenuEntry) -> list[MenuLinkItem]:
    return [
        MenuLinkItem(
            id=link.id,
            href=link.href,
            text=link.text,
            description=link.description,
            blank=link.blank,
            display_text=link.display_text,
            card_image_url=link.card_image_url,
            menu_image_url=link.menu_image_url,
        )
        for link in entry.links
    ]


def menu_entry_to_item(entry: MenuEntry) -> MenuEntryItem:
    return MenuEntryItem(category=entry.category, public=entry.public, links=_menu_links(entry))


def link_container_to_item(entry: MenuEntry) -> LinkContainerItem:
    return LinkContainerItem(
        category_id=entry.category_id,
        category=entry.category,
        public=entry.public,
        links=_menu_links(entry),
    )
