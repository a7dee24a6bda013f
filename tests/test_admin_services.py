import pytest

from app.linkman.core.acl import AccessControlList
from app.linkman.core.error_catalog import AppError
from app.linkman.core.metrics import metrics
from app.linkman.core.config import settings
from app.linkman.db.seed import bootstrap_public_category
from app.linkman.repos.base import PublicCategoryConflictError
from app.linkman.repos.entities import Category, Link
from app.linkman.services.categories import CategoryAdminService
from app.linkman.services.links import LinkAdminService


class _RecordingStorage:
    def __init__(self):
        self.deleted = []

    async def delete_objects(self, keys):
        removed = [key for key in keys if key]
        self.deleted.extend(removed)
        return removed


def _category_service(stores):
    return CategoryAdminService(stores.categories, stores.links)


def _link_service(stores, storage=None):
    return LinkAdminService(stores.links, stores.categories, storage=storage)


def _category(name, **acl):
    return Category(name=name, acl=AccessControlList.readable_by(**acl))


def _link(text, *categories, **kwargs):
    return Link(href="https://example.org", text=text, category_ids={category.id for category in categories}, **kwargs)


@pytest.mark.asyncio
async def test_second_public_category_is_rejected(stores):
    service = _category_service(stores)
    await service.add_category(_category("Public", guest=True))

    with pytest.raises(AppError) as exc_info:
        await service.add_category(_category("Also public", guest=True))

    assert exc_info.value.error.code == "ONLY_ONE_PUBLIC_CATEGORY_IS_ALLOWED"
    assert await stores.categories.count_public_categories() == 1
    assert b"public_category_conflict_total 1.0" in metrics.render().content


@pytest.mark.asyncio
async def test_update_to_public_is_checked(stores):
    service = _category_service(stores)
    public = await service.add_category(_category("Public", guest=True))
    team = await service.add_category(_category("Team", roles={"ROLE_USER"}))

    renamed = await service.update_category(public.id, _category("Everyone", guest=True))
    with pytest.raises(AppError) as exc_info:
        await service.update_category(team.id, _category("Team", guest=True))

    assert renamed.name == "Everyone"
    assert renamed.is_public
    assert exc_info.value.error.code == "ONLY_ONE_PUBLIC_CATEGORY_IS_ALLOWED"
    assert await stores.categories.count_public_categories() == 1


@pytest.mark.asyncio
async def test_store_rejects_second_public_category(stores):
    await stores.categories.save(_category("Public", guest=True))

    with pytest.raises(PublicCategoryConflictError):
        await stores.categories.save(_category("Racing", guest=True))

    assert await stores.categories.count_public_categories() == 1


@pytest.mark.asyncio
async def test_add_category_ignores_client_id(stores):
    service = _category_service(stores)
    category = _category("Team", roles={"ROLE_USER"})
    category.id = "client-chosen"

    created = await service.add_category(category)

    assert created.id != "client-chosen"
    assert await service.get_category(created.id) == created


@pytest.mark.asyncio
async def test_missing_category_is_not_found(stores):
    service = _category_service(stores)

    for call in (
        service.get_category("missing"),
        service.update_category("missing", _category("x")),
        service.delete_category("missing"),
    ):
        with pytest.raises(AppError) as exc_info:
            await call
        assert exc_info.value.error.code == "CATEGORY_NOT_FOUND"


@pytest.mark.asyncio
async def test_deleting_category_cascades_to_links(stores):
    categories = _category_service(stores)
    links = _link_service(stores)
    public = await categories.add_category(_category("Public", guest=True))
    admin = await categories.add_category(_category("Admin", roles={"ADMIN"}))
    only_admin = await links.add_link(_link("Console", admin))
    shared = await links.add_link(_link("Docs", admin, public))

    await categories.delete_category(admin.id)

    assert await stores.links.find_by_id(only_admin.id) is None
    remaining = await stores.links.find_by_id(shared.id)
    assert remaining.category_ids == {public.id}


class _FailingOnceLinks:
    def __init__(self, links):
        self._links = links
        self.failures = 1

    def __getattr__(self, name):
        return getattr(self._links, name)

    async def remove_category_references(self, category_id):
        if self.failures:
            self.failures -= 1
            raise RuntimeError("link store unavailable")
        await self._links.remove_category_references(category_id)


@pytest.mark.asyncio
async def test_interrupted_category_delete_can_be_repeated(stores):
    team = await stores.categories.save(_category("Team", users={"anna"}))
    link = await stores.links.save(_link("Solo", team))
    links = _FailingOnceLinks(stores.links)
    service = CategoryAdminService(stores.categories, links)

    with pytest.raises(RuntimeError):
        await service.delete_category(team.id)
    assert await stores.categories.find_by_id(team.id) is not None

    await service.delete_category(team.id)

    assert await stores.categories.find_by_id(team.id) is None
    assert await stores.links.find_by_id(link.id) is None
    assert all(team.id not in item.category_ids for item in await stores.links.find_all())


@pytest.mark.asyncio
async def test_reference_cleanup_is_idempotent(stores):
    public = await stores.categories.save(_category("Public", guest=True))
    team = await stores.categories.save(_category("Team", users={"anna"}))
    await stores.links.save(_link("Solo", team))
    await stores.links.save(_link("Both", team, public))

    await stores.links.remove_category_references(team.id)
    once = [(link.text, link.category_ids) for link in await stores.links.find_all()]
    await stores.links.remove_category_references(team.id)
    twice = [(link.text, link.category_ids) for link in await stores.links.find_all()]

    assert once == twice == [("Both", {public.id})]


@pytest.mark.asyncio
async def test_links_by_category_can_be_ordered(stores):
    team = await stores.categories.save(_category("Team", users={"anna"}))
    await stores.links.save(_link("zeta", team, order=1))
    await stores.links.save(_link("Beta", team, order=2))
    await stores.links.save(_link("alpha", team, order=2))

    ordered = [link.text async for link in stores.links.find_by_category_id(team.id, ordered=True)]
    unordered = [link.text async for link in stores.links.find_by_category_id(team.id)]

    assert ordered == ["zeta", "alpha", "Beta"]
    assert sorted(unordered) == sorted(ordered)


@pytest.mark.asyncio
async def test_link_with_unknown_category_is_rejected(stores):
    public = await stores.categories.save(_category("Public", guest=True))
    service = _link_service(stores)

    with pytest.raises(AppError) as exc_info:
        await service.add_link(Link(href="https://example.org", text="Wiki", category_ids={public.id, "nope"}))

    assert exc_info.value.error.code == "CATEGORY_REFERENCE_NOT_FOUND"
    assert exc_info.value.details == {"category_ids": ["nope"]}
    assert await stores.links.find_all() == []


@pytest.mark.asyncio
async def test_update_link_replaces_fields(stores):
    public = await stores.categories.save(_category("Public", guest=True))
    team = await stores.categories.save(_category("Team", users={"anna"}))
    service = _link_service(stores)
    created = await service.add_link(_link("Wiki", public, team, text_translations={"de": "Wissen", "fr": "Savoir"}))

    updated = await service.update_link(created.id, _link("Wiki", team, text_translations={"de": "Wiki"}))

    assert updated.id == created.id
    assert updated.category_ids == {team.id}
    assert updated.text_translations == {"de": "Wiki"}
    assert await service.get_links(public.id) == []
    assert [link.id for link in await service.get_links(team.id)] == [created.id]


@pytest.mark.asyncio
async def test_delete_link_removes_images(stores):
    public = await stores.categories.save(_category("Public", guest=True))
    storage = _RecordingStorage()
    service = _link_service(stores, storage)
    link = await service.add_link(_link("Home", public, card_image="cards/home.png"))

    await service.delete_link(link.id)

    assert storage.deleted == ["cards/home.png"]
    with pytest.raises(AppError) as exc_info:
        await service.get_link(link.id)
    assert exc_info.value.error.code == "LINK_NOT_FOUND"


@pytest.mark.asyncio
async def test_bootstrap_is_idempotent(stores):
    first = await bootstrap_public_category(stores.categories, settings)
    second = await bootstrap_public_category(stores.categories, settings)

    assert first.id == second.id
    assert first.name == settings.PUBLIC_CATEGORY_NAME
    assert first.get_name("de") == "Öffentlich"
    assert await stores.categories.count_public_categories() == 1
