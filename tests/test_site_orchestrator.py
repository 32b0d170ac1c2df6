"""
站点编排测试

创建站点初始化、失败回收、级联删除、默认主题切换
"""

import pytest
from sqlalchemy import func, select

from sitebuilder.core.exceptions import DuplicateDomain, NotFound
from sitebuilder.database.models import Page, Site, Theme
from sitebuilder.services.page_catalog import PageCatalog
from sitebuilder.services.site_orchestrator import SiteOrchestrator


async def _count(db, model, **filters) -> int:
    query = select(func.count()).select_from(model)
    for name, value in filters.items():
        query = query.where(getattr(model, name) == value)
    return await db.scalar(query)


class ExplodingPageCatalog(PageCatalog):
    """批量建页失败"""

    async def bulk_create(self, db, site_id, specs):
        raise RuntimeError("page store unavailable")


@pytest.mark.asyncio
async def test_create_site_with_defaults(db_session, services, owner):
    """新站点带一个默认主题和四个已发布页面"""
    resolved = await services.orchestrator.create_site_with_defaults(
        db_session,
        owner_id=owner.id,
        name="Acme",
        domain="acme.example.com",
        description="Outdoor gear",
    )
    site, theme, pages = resolved.site, resolved.theme, resolved.pages

    assert site.status == "draft"
    assert site.owner_id == owner.id
    assert theme is not None
    assert theme.is_default is True
    assert theme.name == "Default Theme"
    assert theme.secondary_color == "purple-600"
    assert site.theme_id == theme.id

    assert {page.path: page.page_type for page in pages} == {
        "/": "home",
        "/products": "product-listing",
        "/about": "about",
        "/contact": "contact",
    }
    assert [page.name for page in pages if page.is_default] == ["Home"]
    assert all(page.is_published and page.published_at is not None for page in pages)
    assert all(page.site_id == site.id for page in pages)


@pytest.mark.asyncio
async def test_create_site_duplicate_domain(db_session, services, owner):
    await services.orchestrator.create_site_with_defaults(
        db_session, owner_id=owner.id, name="Acme", domain="acme.example.com"
    )

    with pytest.raises(DuplicateDomain):
        await services.orchestrator.create_site_with_defaults(
            db_session, owner_id=owner.id, name="Acme 2", domain="acme.example.com"
        )

    assert await _count(db_session, Site) == 1
    assert await _count(db_session, Theme) == 1
    assert await _count(db_session, Page) == 4


@pytest.mark.asyncio
async def test_bootstrap_failure_is_compensated(db_session, services, owner):
    """初始化失败时不留下站点、主题或页面，原始错误继续抛出"""
    orchestrator = SiteOrchestrator(services.registry, services.themes, ExplodingPageCatalog())

    with pytest.raises(RuntimeError, match="page store unavailable"):
        await orchestrator.create_site_with_defaults(
            db_session, owner_id=owner.id, name="Acme", domain="acme.example.com"
        )

    assert await _count(db_session, Site) == 0
    assert await _count(db_session, Theme) == 0
    assert await _count(db_session, Page) == 0

    # 域名可以再次使用
    resolved = await services.orchestrator.create_site_with_defaults(
        db_session, owner_id=owner.id, name="Acme", domain="acme.example.com"
    )
    assert len(resolved.pages) == 4


@pytest.mark.asyncio
async def test_delete_site_cascade(db_session, services, owner):
    keep = await services.orchestrator.create_site_with_defaults(
        db_session, owner_id=owner.id, name="Keep", domain="keep.example.com"
    )
    doomed = await services.orchestrator.create_site_with_defaults(
        db_session, owner_id=owner.id, name="Doomed", domain="doomed.example.com"
    )
    site_id = doomed.site.id
    await services.themes.clone(db_session, doomed.theme.id, "Extra")
    await services.pages.create(db_session, site_id, "Blog", "/blog", "custom")

    await services.orchestrator.delete_site_cascade(db_session, site_id)

    assert await _count(db_session, Page, site_id=site_id) == 0
    assert await _count(db_session, Theme, site_id=site_id) == 0
    with pytest.raises(NotFound):
        await services.registry.get(db_session, site_id)

    # 其他站点不受影响
    assert await _count(db_session, Page, site_id=keep.site.id) == 4
    assert await _count(db_session, Theme, site_id=keep.site.id) == 1

    with pytest.raises(NotFound):
        await services.orchestrator.delete_site_cascade(db_session, site_id)


@pytest.mark.asyncio
async def test_set_default_theme_updates_site(db_session, services, owner):
    resolved = await services.orchestrator.create_site_with_defaults(
        db_session, owner_id=owner.id, name="Acme", domain="acme.example.com"
    )
    original = resolved.theme
    clone = await services.orchestrator.clone_theme(db_session, original.id, "Holiday")

    await services.orchestrator.set_default_theme(db_session, clone.id)
    await db_session.refresh(original)

    site = await services.registry.get(db_session, resolved.site.id)
    assert site.theme_id == clone.id
    assert clone.is_default is True
    assert original.is_default is False
    assert await _count(db_session, Theme, site_id=site.id, is_default=True) == 1


@pytest.mark.asyncio
async def test_publish_and_unpublish_are_idempotent(db_session, services, owner):
    resolved = await services.orchestrator.create_site_with_defaults(
        db_session, owner_id=owner.id, name="Acme", domain="acme.example.com"
    )
    about = next(page for page in resolved.pages if page.path == "/about")
    first_published = about.published_at

    page = await services.orchestrator.publish_page(db_session, about.id)
    assert page.is_published is True
    assert page.published_at == first_published

    page = await services.orchestrator.unpublish_page(db_session, about.id)
    page = await services.orchestrator.unpublish_page(db_session, about.id)
    assert page.is_published is False

    page = await services.orchestrator.publish_page(db_session, about.id)
    assert page.is_published is True
    assert page.published_at == first_published


@pytest.mark.asyncio
async def test_clone_page(db_session, services, owner, make_tree):
    resolved = await services.orchestrator.create_site_with_defaults(
        db_session, owner_id=owner.id, name="Acme", domain="acme.example.com"
    )
    home = next(page for page in resolved.pages if page.is_default)
    await services.pages.update(db_session, home.id, {"components": make_tree(3)})

    clone = await services.orchestrator.clone_page(db_session, home.id, "Home B", "/home-b")

    assert clone.components == home.components
    assert clone.is_default is False
    assert clone.is_published is False
